"""Batch validation of JSON files and directories."""

from __future__ import annotations

import argparse
import json
import re
import sys
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

APP_DESCRIPTION = (
    "Utility for batch JSON file validation. "
    "Drag JSON files or folders onto executable (the file) to validate"
)

UTF8_BOM = b"\xef\xbb\xbf"

PathLike = Union[str, Path]


class ValidationError(Exception):
    """A file that is not valid JSON, with the position of the problem."""

    def __init__(
        self,
        path: PathLike,
        line: int,
        column: int,
        text: str,
        source: str,
        likely_bom: bool = False,
    ) -> None:
        super().__init__(text)
        self.path = Path(path)
        self.line = line
        self.column = column
        self.text = text
        self.source = source
        self.likely_bom = likely_bom

    def __str__(self) -> str:
        return f"{self.path}: line {self.line} column {self.column}: {self.text}"

    def report(self) -> str:
        """The multi-line report printed for this failure."""
        lines = [
            f"validation failed: {self.path}",
            f"line {self.line} column {self.column}",
            self.text,
            f"source: {self.source}",
        ]
        if self.likely_bom:
            lines.append(
                "likely incorrect encoding. re-save the file using "
                '"UTF-8 without BOM" encoding format'
            )
        lines.append("")
        return "\n".join(lines)


@dataclass
class ValidationSummary:
    """Outcome of validating a batch of paths."""

    errors: list[ValidationError] = field(default_factory=list)
    files_total: int = 0

    @property
    def error_count(self) -> int:
        return len(self.errors)


class _DuplicateKey(ValueError):
    def __init__(self, key: str) -> None:
        super().__init__(f"duplicate object key near '{key}'")
        self.key = key


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKey(key)
        result[key] = value
    return result


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid token near '{name}'")


def _position(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def _duplicate_position(text: str, key: str) -> tuple[int, int]:
    pattern = re.escape(json.dumps(key)) + r"\s*:"
    matches = list(re.finditer(pattern, text))
    if len(matches) < 2:
        return 0, 0
    return _position(text, matches[1].start())


def is_likely_utf8_bom(path: PathLike) -> bool:
    """Whether the file starts with a UTF-8 byte order mark."""
    try:
        with open(path, "rb") as fh:
            return fh.read(3) == UTF8_BOM
    except OSError:
        return False


def validate_file(path: PathLike) -> None:
    """Validate one file; raise ValidationError if it is not valid JSON.

    Duplicate object keys, non-finite numbers and a top level other than an
    array or object are rejected. OSError is raised if the file cannot be read.
    """
    source = str(path)
    with open(path, "rb") as fh:
        raw = fh.read()

    def fail(line: int, column: int, text: str) -> ValidationError:
        return ValidationError(path, line, column, text, source, is_likely_utf8_bom(path))

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        prefix = raw[: exc.start].decode("utf-8", errors="replace")
        line, column = _position(prefix, len(prefix))
        raise fail(line, column, f"unable to decode byte 0x{raw[exc.start]:x}") from None

    stripped = text.lstrip(" \t\r\n")
    if stripped and stripped[0] not in "[{" and not stripped.startswith("\ufeff"):
        line, column = _position(text, len(text) - len(stripped))
        raise fail(line, column, f"'[' or '{{' expected near '{stripped[:1]}'")

    try:
        json.loads(
            text,
            object_pairs_hook=_reject_duplicates,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise fail(exc.lineno, exc.colno, exc.msg) from None
    except _DuplicateKey as exc:
        line, column = _duplicate_position(text, exc.key)
        raise fail(line, column, str(exc)) from None
    except ValueError as exc:
        raise fail(0, 0, str(exc)) from None


def iter_files(path: PathLike) -> Iterator[Path]:
    """Yield ``path`` if it is a file, or every file below it if it is a directory."""
    root = Path(path)
    if not root.exists():
        return
    if root.is_file():
        yield root
        return
    yield from sorted(p for p in root.rglob("*") if p.is_file())


def validate_paths(paths: Iterable[PathLike]) -> ValidationSummary:
    """Validate every file named by or found below ``paths``.

    Files that cannot be opened are skipped and not counted.
    """
    summary = ValidationSummary()
    for path in paths:
        for file in iter_files(path):
            try:
                validate_file(file)
            except ValidationError as exc:
                summary.errors.append(exc)
            except OSError:
                continue
            summary.files_total += 1
    return summary


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="json-validator", description=APP_DESCRIPTION)
    parser.add_argument("paths", nargs="*", help="JSON files or folders to validate")
    args = parser.parse_args(argv)

    if not args.paths:
        print(APP_DESCRIPTION)
        return 0

    summary = validate_paths(args.paths)
    for error in summary.errors:
        print(error.report())
    print(f"{summary.error_count} errors found. {summary.files_total} files total")
    return 0


if __name__ == "__main__":
    sys.exit(main())