"""Switchable access to game-engine services, with fake and silent implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional

FORM_ID_ZERO = 0

_MOD_DICT = "\0A\0B\0C\0D\0E\0F\0G\0H\0I\0J\0K\0L\0M\0N\0O\0P\0Q\0R\0S\0T\0U\0V\0W\0X\0Y\0Z"

FAKE_FORM = object()
"""Stand-in form object returned by the fake implementation."""


class SkseApi(ABC):
    """Interface of engine services used by the container runtime.

    Every implementation counts the calls made to it in ``calls``.
    """

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()

    def _record(self, name: str) -> None:
        self.calls[name] += 1

    @abstractmethod
    def form_from_file(self, name: str, form: int) -> Optional[int]: ...

    @abstractmethod
    def loaded_mod_name(self, index: int) -> Optional[str]: ...

    @abstractmethod
    def loaded_light_mod_name(self, index: int) -> Optional[str]: ...

    @abstractmethod
    def resolve_handle(self, handle: int) -> int: ...

    @abstractmethod
    def lookup_form(self, handle: int) -> Any: ...

    @abstractmethod
    def try_retain_handle(self, handle: int) -> bool: ...

    @abstractmethod
    def release_handle(self, handle: int) -> None: ...

    @abstractmethod
    def console_print(self, fmt: str, *args: Any) -> None: ...


class FakeApi(SkseApi):
    """Deterministic implementation for tests: mods are named ``A`` to ``Z``.

    Retained handles are tracked in ``retained`` and console output is kept
    in ``printed`` as ``(fmt, args)`` pairs.
    """

    def __init__(self) -> None:
        super().__init__()
        self.retained: Counter[int] = Counter()
        self.printed: list[tuple[str, tuple[Any, ...]]] = []

    def loaded_mod_name(self, index: int) -> Optional[str]:
        self._record("loaded_mod_name")
        pos = _MOD_DICT.find(chr(index & 0xFF))
        if pos < 0:
            return None
        start = pos + (1 if index & 0xFF == 0 else 0)
        return _MOD_DICT[start:].split("\0", 1)[0]

    def loaded_light_mod_name(self, index: int) -> Optional[str]:
        self._record("loaded_light_mod_name")
        return self.loaded_mod_name(index & 0xFF)

    def form_from_file(self, name: str, form: int) -> Optional[int]:
        self._record("form_from_file")
        if not name or name[0] not in _MOD_DICT:
            return None
        return (ord(name[0]) << 24) | (form & 0x00FFFFFF)

    def resolve_handle(self, handle: int) -> int:
        self._record("resolve_handle")
        return handle

    def lookup_form(self, handle: int) -> Any:
        self._record("lookup_form")
        return FAKE_FORM

    def try_retain_handle(self, handle: int) -> bool:
        self._record("try_retain_handle")
        self.retained[handle] += 1
        return True

    def release_handle(self, handle: int) -> None:
        self._record("release_handle")
        if self.retained[handle] > 0:
            self.retained[handle] -= 1
        if self.retained[handle] <= 0:
            del self.retained[handle]

    def console_print(self, fmt: str, *args: Any) -> None:
        self._record("console_print")
        self.printed.append((fmt, args))


class SilentApi(SkseApi):
    """Stub implementation that answers every call with an empty result."""

    def loaded_mod_name(self, index: int) -> Optional[str]:
        self._record("loaded_mod_name")
        return ""

    def loaded_light_mod_name(self, index: int) -> Optional[str]:
        self._record("loaded_light_mod_name")
        return ""

    def form_from_file(self, name: str, form: int) -> Optional[int]:
        self._record("form_from_file")
        return 0

    def resolve_handle(self, handle: int) -> int:
        self._record("resolve_handle")
        return FORM_ID_ZERO

    def lookup_form(self, handle: int) -> Any:
        self._record("lookup_form")
        return None

    def try_retain_handle(self, handle: int) -> bool:
        self._record("try_retain_handle")
        return True

    def release_handle(self, handle: int) -> None:
        self._record("release_handle")

    def console_print(self, fmt: str, *args: Any) -> None:
        self._record("console_print")


@dataclass
class _Selection:
    current: SkseApi


_fake_api = FakeApi()
_silent_api = SilentApi()
_selection = _Selection(_fake_api)


def set_fake_api() -> SkseApi:
    """Route every call to the fake implementation and return it."""
    _selection.current = _fake_api
    return _selection.current


def set_silent_api() -> SkseApi:
    """Route every call to the silent implementation and return it."""
    _selection.current = _silent_api
    return _selection.current


def form_from_file(name: str, form: int) -> Optional[int]:
    """Resolve ``form`` within the mod called ``name``."""
    return _selection.current.form_from_file(name, form)


def loaded_mod_name(index: int) -> Optional[str]:
    return _selection.current.loaded_mod_name(index)


def loaded_light_mod_name(index: int) -> Optional[str]:
    return _selection.current.loaded_light_mod_name(index)


def resolve_handle(handle: int) -> int:
    return _selection.current.resolve_handle(handle)


def lookup_form(handle: int) -> Any:
    """Look up a form; the zero handle never resolves."""
    if handle == FORM_ID_ZERO:
        return None
    return _selection.current.lookup_form(handle)


def try_retain_handle(handle: int) -> bool:
    return _selection.current.try_retain_handle(handle)


def release_handle(handle: int) -> None:
    _selection.current.release_handle(handle)


def console_print(fmt: str, *args: Any) -> None:
    _selection.current.console_print(fmt, *args)