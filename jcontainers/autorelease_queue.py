"""Queue that temporarily owns objects and releases them once their lifetime expires."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Optional

from jcontainers.object_base import ObjectBase

TIME_MAX = 0xFFFFFFFF
"""Largest value of the wrapping tick counter."""

OBJ_LIFETIME = 10
"""Seconds an object is kept alive by the queue."""

TICK_DURATION = 2
"""Seconds between two ticks of the queue."""

ONE_TICK = 1

OBJ_LIFE_IN_TICKS = OBJ_LIFETIME // TICK_DURATION
"""An object's lifetime expressed in ticks."""


def time_subtract(minuend: int, subtrahend: int) -> int:
    """Subtract two tick counts, wrapping around ``TIME_MAX``."""
    if minuend >= subtrahend:
        return minuend - subtrahend
    return TIME_MAX - (subtrahend - minuend)


def time_add(a: int, b: int) -> int:
    """Add two tick counts, wrapping around ``TIME_MAX``."""
    if TIME_MAX - a > b:
        return a + b
    return b - (TIME_MAX - a)


class AutoreleaseQueue:
    """Owns objects for about ``OBJ_LIFETIME`` seconds and then releases them.

    A background timer calls :meth:`tick` every ``tick_duration`` seconds while
    the queue is started; :meth:`tick` may also be called directly.
    """

    def __init__(self, registry: Any, tick_duration: float = TICK_DURATION) -> None:
        self._registry = registry
        self._tick_duration = float(tick_duration)
        self._queue: deque[Optional[ObjectBase]] = deque()
        self._tick_counter = 0
        self._queue_lock = threading.RLock()
        self._timer_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._timer_stopped = True
        self._generation = 0
        self.start()

    # state --------------------------------------------------------------

    @property
    def tick_counter(self) -> int:
        return self._tick_counter

    @property
    def queue(self) -> tuple[ObjectBase, ...]:
        """Snapshot of the objects currently owned by the queue."""
        with self._queue_lock:
            return tuple(obj for obj in self._queue if obj is not None)

    def count(self) -> int:
        """Number of objects in the queue."""
        with self._queue_lock:
            return len(self._queue)

    def lifetime_diff(self, time: int) -> int:
        """Ticks elapsed since ``time``."""
        return time_subtract(self._tick_counter, time)

    # ownership ----------------------------------------------------------

    def prolong_lifetime(self, obj: ObjectBase, is_public: bool) -> None:
        """Own ``obj`` for a full lifetime if public, or only until the next tick."""
        with self._queue_lock:
            obj.aqueue_push_time = (
                self._tick_counter
                if is_public
                else time_subtract(self._tick_counter, OBJ_LIFE_IN_TICKS)
            )
            if not obj.is_in_aqueue():
                self._queue.append(obj)
                obj.aqueue_retain()

    def not_prolong_lifetime(self, obj: ObjectBase) -> None:
        """Make ``obj`` expire at the next tick if the queue holds it."""
        if obj.is_in_aqueue():
            with self._queue_lock:
                obj.aqueue_push_time = time_subtract(self._tick_counter, OBJ_LIFE_IN_TICKS)

    def tick(self) -> int:
        """Release every expired object and advance the counter; return how many were released."""
        to_release: list[ObjectBase] = []
        with self._queue_lock:
            kept: deque[Optional[ObjectBase]] = deque()
            for obj in self._queue:
                if obj is None:
                    kept.append(obj)
                    continue
                # +1 because ticks 0..5 make six ticks
                diff = time_subtract(self._tick_counter, obj.aqueue_push_time) + 1
                if diff >= OBJ_LIFE_IN_TICKS:
                    to_release.append(obj)
                else:
                    kept.append(obj)
            self._queue = kept
            self._tick_counter = time_add(self._tick_counter, ONE_TICK)

        for obj in to_release:
            obj.aqueue_release()
        return len(to_release)

    def nullify(self) -> None:
        """Forget every queued object without releasing it."""
        with self._queue_lock:
            self._queue = deque(None for _ in self._queue)

    def clear(self) -> None:
        """Stop the timer, reset the counter and release whatever is still owned."""
        self.stop()
        with self._queue_lock:
            remaining = [obj for obj in self._queue if obj is not None]
            self._queue.clear()
            self._tick_counter = 0
        for obj in remaining:
            obj.aqueue_release()

    # timer --------------------------------------------------------------

    def start(self) -> None:
        """Start releasing objects asynchronously."""
        with self._timer_lock:
            if self._timer_stopped:
                self._timer_stopped = False
                self._start_timer()

    def stop(self) -> None:
        """Stop the asynchronous activity started by :meth:`start`."""
        with self._timer_lock:
            self._timer_stopped = True
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def running(self) -> bool:
        with self._timer_lock:
            return not self._timer_stopped

    def _start_timer(self) -> None:
        generation = self._generation
        timer = threading.Timer(self._tick_duration, self._on_timer, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _on_timer(self, generation: int) -> None:
        with self._timer_lock:
            if self._timer_stopped or generation != self._generation:
                return
            self.tick()
            self._start_timer()