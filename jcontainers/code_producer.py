"""Generation of script source files from class meta-information."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Union

from jcontainers.istring import IString
from jcontainers.reflection import ClassInfo, FunctionInfo, sorted_classes

PathLike = Union[str, Path]


def _argument_name(info: FunctionInfo, index: int) -> str:
    names = re.split(r"\s", info.argument_names)
    if index < len(names) and names[index] != "*":
        return names[index]
    arg_name = info.parameters[index + 1].tes_arg_name
    if arg_name:
        return arg_name
    return "arg" + chr(index + ord("0"))


def _comment_block(comment: str) -> str:
    if not comment:
        return ""
    return "\n;/  " + comment.replace("\n", "\n    ") + "\n/;\n"


def function_to_string(info: FunctionInfo) -> str:
    """The native function declaration line for ``info``."""
    return_type, *arguments = info.parameters
    parts = []
    if return_type.tes_type_name != "void":
        parts.append(return_type.tes_type_name + " ")
    parts.append(f"function {info.name}(")
    parts.append(
        ", ".join(
            f"{param.tes_type_name} {_argument_name(info, index)}"
            for index, param in enumerate(arguments)
        )
    )
    parts.append(") global native")
    return "".join(parts)


def produce_class_code(cls: ClassInfo) -> str:
    """The full script source of a class."""
    out = [_comment_block(cls.comment), f"ScriptName {cls.class_name}"]
    if cls.extends_class:
        out.append(f" extends {cls.extends_class}")
    out.append("\n")
    for method in cls.methods:
        out.append(_comment_block(method.comment()))
        out.append(function_to_string(method))
        out.append("\n")
    for block in cls.text_blocks:
        out.append(block.get_text())
        out.append("\n")
    return "".join(out)


def produce_class_to_file(cls: ClassInfo, directory: PathLike) -> Path:
    """Write ``<directory>/<ClassName>.psc``; return its path."""
    path = Path(directory) / f"{cls.class_name}.psc"
    path.write_text(produce_class_code(cls), encoding="utf-8")
    return path


def produce_amalgamated_code_to_file(
    classes: dict[Any, ClassInfo], directory: PathLike, script_name: str
) -> Path:
    """Write one script declaring every stateful function of every class.

    Functions are named ``<Class>_<function>``; returns the file's path.
    """
    lines = [f"ScriptName {script_name}\n"]
    for key, cls in sorted_classes(classes):
        lines.append(f"\n; {key}\n\n")
        for func in cls.methods:
            if not func.stateless:
                renamed = func.copy()
                renamed.name = IString(f"{key}_{func.name}")
                lines.append(function_to_string(renamed) + "\n")
    path = Path(directory) / f"{script_name}.psc"
    path.write_text("".join(lines), encoding="utf-8")
    return path