"""Meta-information about script classes and their native functions."""

from __future__ import annotations

import copy
import threading
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from jcontainers.istring import IString

CommentSource = Union[str, Callable[[], str], None]


class ObjectHandle(int):
    """Marker type for an integer that identifies a container object."""


class Form:
    """Marker type for a game form argument."""


class FormList:
    """Marker type for a game form list argument."""


@dataclass(frozen=True)
class FunctionParameter:
    """Script type name of a value and the default name of its argument."""

    tes_type_name: str
    tes_arg_name: str = ""


_SCALAR_TYPES: dict[Any, FunctionParameter] = {
    None: FunctionParameter("void"),
    type(None): FunctionParameter("void"),
    bool: FunctionParameter("Bool"),
    str: FunctionParameter("String"),
    float: FunctionParameter("Float"),
    int: FunctionParameter("Int"),
    ObjectHandle: FunctionParameter("Int", "object"),
    Form: FunctionParameter("Form"),
    FormList: FunctionParameter("FormList"),
}

_NAMED_TYPES: dict[str, Any] = {
    "None": None,
    "NoneType": type(None),
    "bool": bool,
    "str": str,
    "float": float,
    "int": int,
    "ObjectHandle": ObjectHandle,
    "Form": Form,
    "FormList": FormList,
}

_LIST_PREFIXES = ("list[", "List[", "typing.List[")


def _resolve_annotation(annotation: Any) -> Any:
    """Turn an annotation written as text into the type it names."""
    if not isinstance(annotation, str):
        return annotation
    text = annotation.strip()
    for prefix in _LIST_PREFIXES:
        if text.startswith(prefix) and text.endswith("]"):
            return list[_resolve_annotation(text[len(prefix):-1])]
    name = text.rsplit(".", 1)[-1]
    try:
        return _NAMED_TYPES[name]
    except KeyError:
        raise TypeError(f"no script type for {annotation!r}") from None


def type_info(python_type: Any) -> FunctionParameter:
    """Describe a Python type as a script type.

    ``list[T]`` becomes an array of ``T`` whose argument is named ``values``.
    Raises TypeError for types that have no script counterpart.
    """
    python_type = _resolve_annotation(python_type)
    if typing.get_origin(python_type) is list:
        (item_type,) = typing.get_args(python_type) or (None,)
        if item_type is None:
            raise TypeError("array type needs an item type")
        return FunctionParameter(type_info(item_type).tes_type_name + "[]", "values")
    try:
        return _SCALAR_TYPES[python_type]
    except (KeyError, TypeError):
        raise TypeError(f"no script type for {python_type!r}") from None


def _parameter_names(func: Callable[..., Any]) -> list[str]:
    code = getattr(func, "__code__", None)
    if code is None:
        raise TypeError(f"cannot describe {func!r}")
    names = list(code.co_varnames[: code.co_argcount + code.co_kwonlyargcount])
    if isinstance(func, types.MethodType):
        names = names[1:]
    return names


@dataclass
class FunctionInfo:
    """A native function exposed to scripts.

    ``parameters`` holds the return type first, then one entry per argument.
    """

    name: IString
    parameters: list[FunctionParameter]
    argument_names: str = ""
    c_func: Optional[Callable[..., Any]] = None
    stateless: bool = True
    _comment_func: Optional[Callable[[], str]] = field(default=None, init=False, repr=False)
    _comment_text: Optional[str] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.name = IString(self.name)
        if not self.parameters:
            raise ValueError("parameters must start with the return type")

    @classmethod
    def from_function(
        cls,
        func: Callable[..., Any],
        name: Optional[str] = None,
        argument_names: str = "",
        comment: CommentSource = None,
        stateless: bool = True,
    ) -> FunctionInfo:
        """Build the description of ``func`` from its annotations.

        A function that is not stateless takes the shared state as its first
        argument; that argument is not exposed to scripts.
        """
        hints = dict(getattr(func, "__annotations__", {}) or {})
        params = _parameter_names(func)
        if not stateless:
            if not params:
                raise TypeError("a stateful function must take the state argument")
            params = params[1:]
        missing = [p for p in params if p not in hints]
        if missing:
            raise TypeError(f"parameters without annotations: {', '.join(missing)}")
        parameter_types = [type_info(hints.get("return"))]
        parameter_types.extend(type_info(hints[p]) for p in params)
        info = cls(
            name=IString(name if name is not None else func.__name__),
            parameters=parameter_types,
            argument_names=argument_names or "",
            c_func=func,
            stateless=stateless,
        )
        info.set_comment(comment)
        return info

    def comment(self) -> str:
        if self._comment_func is not None:
            return self._comment_func()
        return self._comment_text or ""

    def set_comment(self, comment: CommentSource) -> None:
        """Set the comment as text, as a callable producing text, or clear it with None."""
        if comment is None:
            self._comment_func = None
            self._comment_text = None
        elif callable(comment):
            self._comment_func = comment
        else:
            self._comment_text = str(comment)

    def copy(self) -> FunctionInfo:
        return copy.copy(self)


@dataclass
class PapyrusTextBlock:
    """Literal script text, given directly or produced on demand."""

    text: Union[str, Callable[[], str]]

    def get_text(self) -> str:
        return self.text if isinstance(self.text, str) else self.text()


@dataclass
class ClassInfo:
    """A script class with its native functions and extra text blocks."""

    class_name: IString = field(default_factory=lambda: IString(""))
    methods: list[FunctionInfo] = field(default_factory=list)
    text_blocks: list[PapyrusTextBlock] = field(default_factory=list)
    extends_class: IString = field(default_factory=lambda: IString(""))
    comment: str = ""
    version: int = 0

    def __post_init__(self) -> None:
        self.class_name = IString(self.class_name)
        self.extends_class = IString(self.extends_class)

    def initialized(self) -> bool:
        return bool(self.class_name)

    def find_function(self, name: str) -> Optional[FunctionInfo]:
        key = IString(name)
        return next((fi for fi in self.methods if fi.name == key), None)

    def add_function(self, info: FunctionInfo) -> None:
        if self.find_function(info.name) is not None:
            raise ValueError(f"function {info.name} is already defined in {self.class_name}")
        self.methods.append(info)

    def add_text_block(self, block: Union[PapyrusTextBlock, str, Callable[[], str]]) -> None:
        if not isinstance(block, PapyrusTextBlock):
            block = PapyrusTextBlock(block)
        self.text_blocks.append(block)

    def merge_with_extension(self, extension: ClassInfo) -> None:
        """Add the functions of another description of the same class."""
        if not self.initialized():
            raise ValueError("class has no name")
        if self.class_name != extension.class_name:
            raise ValueError(
                f"cannot merge {extension.class_name} into {self.class_name}"
            )
        if self.extends_class != extension.extends_class:
            raise ValueError("extension has a different base class")
        for info in extension.methods:
            self.add_function(info)


class MetaRegistry:
    """Collects class-description creators and merges them into one database."""

    def __init__(self) -> None:
        self._creators: list[Callable[[], ClassInfo]] = []
        self._cache: Optional[dict[IString, ClassInfo]] = None
        self._lock = threading.Lock()

    def register(self, creator: Callable[[], ClassInfo]) -> Callable[[], ClassInfo]:
        """Add a creator; returns it, so this may be used as a decorator."""
        with self._lock:
            self._creators.append(creator)
            self._cache = None
        return creator

    def build_class_database(self) -> dict[IString, ClassInfo]:
        """Run every creator and merge descriptions of the same class."""
        with self._lock:
            creators = list(self._creators)
        database: dict[IString, ClassInfo] = {}
        for creator in creators:
            info = creator()
            found = database.get(info.class_name)
            if found is not None:
                found.merge_with_extension(info)
            else:
                database[info.class_name] = info
        return database

    def class_registry(self) -> dict[IString, ClassInfo]:
        """The merged database, built once and then reused."""
        with self._lock:
            cached = self._cache
        if cached is None:
            cached = self.build_class_database()
            with self._lock:
                if self._cache is None:
                    self._cache = cached
                cached = self._cache
        return cached

    def find_function_of_class(
        self, function_name: str, class_name: str
    ) -> Optional[FunctionInfo]:
        cls = self.class_registry().get(IString(class_name))
        return cls.find_function(function_name) if cls is not None else None


def sorted_classes(classes: dict[Any, ClassInfo]) -> list[tuple[IString, ClassInfo]]:
    """Classes ordered by name without regard to case."""
    return sorted(
        ((IString(key), cls) for key, cls in classes.items()),
        key=lambda item: item[0].lower(),
    )


def amalgamate_classes(name: str, classes: dict[Any, ClassInfo]) -> ClassInfo:
    """Gather the stateful functions of all classes into one class.

    Each function is renamed ``<Class>_<function>`` and loses its comment.
    """
    amalgam = ClassInfo(IString(name))
    for _, cls in sorted_classes(classes):
        for func in cls.methods:
            if not func.stateless:
                info = func.copy()
                info.set_comment(None)
                info.name = IString(f"{cls.class_name}_{func.name}")
                amalgam.add_function(info)
    return amalgam