"""Generator of reusable integer identifiers kept as sorted free ranges."""

from __future__ import annotations

import bisect
from dataclasses import dataclass

MIN_HANDLE = 1
MAX_HANDLE = 0x7FFFFFFF - 1


class IdExhaustedError(RuntimeError):
    """Raised when no free identifier is left."""


@dataclass
class Range:
    """An inclusive range ``first..last`` of free identifiers."""

    first: int
    last: int

    def empty(self) -> bool:
        return self.first > self.last

    def new_id(self) -> int:
        if self.empty():
            raise ValueError("range is empty")
        value = self.first
        self.first += 1
        return value

    @property
    def begin(self) -> int:
        return self.first

    @property
    def end(self) -> int:
        return self.last + 1


class IdGenerator:
    """Hands out identifiers in ``min_id..max_id`` and takes back released ones."""

    def __init__(self, min_id: int = MIN_HANDLE, max_id: int = MAX_HANDLE) -> None:
        if min_id > max_id:
            raise ValueError("min_id must not exceed max_id")
        self._min_id = min_id
        self._max_id = max_id
        self._ranges: list[Range] = []
        self._current = 0
        self.clear()

    def clear(self) -> None:
        """Make every identifier free again."""
        self._ranges = [Range(self._min_id, self._max_id)]
        self._current = 0

    def new_id(self) -> int:
        if not self._ranges:
            raise IdExhaustedError("no free identifiers left")
        rng = self._ranges[self._current]
        value = rng.new_id()
        if rng.empty():
            del self._ranges[self._current]
            if self._current == len(self._ranges):
                self._current = 0
        return value

    def is_free_id(self, value: int) -> bool:
        right = bisect.bisect_right(self._ranges, value, key=lambda r: r.first)
        if right == 0:
            return False
        left = self._ranges[right - 1]
        return left.begin <= value < left.end

    def is_valid(self) -> bool:
        if not self._ranges or self._current >= len(self._ranges):
            return False
        return all(
            prev.begin < curr.begin and prev.end < curr.end
            for prev, curr in zip(self._ranges, self._ranges[1:])
        )

    def reuse_id(self, value: int) -> None:
        """Return ``value`` to the pool of free identifiers."""
        right = bisect.bisect_left(self._ranges, value, key=lambda r: r.first)

        left_range = self._ranges[right - 1] if right > 0 else None
        if left_range is not None and left_range.end != value:
            left_range = None

        right_range = self._ranges[right] if right < len(self._ranges) else None
        if right_range is not None and right_range.begin - 1 != value:
            right_range = None

        if left_range is None and right_range is None:
            if self._ranges:
                index = self._current + (0 if self._current < right else 1)
            else:
                index = 0
            self._ranges.insert(right, Range(value, value))
            self._current = index
        elif left_range is not None and right_range is not None:
            left_range.last = right_range.last
            index = self._current - (0 if self._current < right else 1)
            del self._ranges[right]
            self._current = index
        elif left_range is not None:
            left_range.last = value
        else:
            right_range.first = value