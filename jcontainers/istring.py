"""Case-insensitive string type."""

from __future__ import annotations


class IString(str):
    """A ``str`` that compares, orders and hashes without regard to letter case."""

    __slots__ = ()

    @staticmethod
    def _fold(value: str) -> str:
        return value.lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return self._fold(self) == self._fold(other)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return self._fold(self) != self._fold(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return self._fold(self) < self._fold(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return self._fold(self) <= self._fold(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return self._fold(self) > self._fold(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, str):
            return NotImplemented
        return self._fold(self) >= self._fold(other)

    def __hash__(self) -> int:
        return hash(self._fold(self))

    def __repr__(self) -> str:
        return f"IString({str.__repr__(self)})"