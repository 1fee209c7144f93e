"""Context that ties together an object registry and its autorelease queue."""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Optional

from jcontainers import skse_api
from jcontainers.autorelease_queue import TICK_DURATION, AutoreleaseQueue
from jcontainers.garbage_collector import CollectionResult, collect
from jcontainers.object_base import ObjectBase
from jcontainers.object_registry import ObjectRegistry

logger = logging.getLogger(__name__)


def _log(fmt: str, *args: object) -> None:
    skse_api.console_print(fmt, *args)
    logger.info(fmt, *args)


class DependentContext(ABC):
    """State that lives alongside an object context and is reset with it."""

    @abstractmethod
    def clear_state(self) -> None:
        """Drop all state held by this context."""


class ObjectContext:
    """Owns the registry of objects and the queue that keeps new objects alive."""

    def __init__(self, tick_duration: float = TICK_DURATION) -> None:
        self.registry = ObjectRegistry()
        self.aqueue = AutoreleaseQueue(self.registry, tick_duration)
        self._dependents_lock = threading.Lock()
        self._dependents: list[DependentContext] = []

    # activity -----------------------------------------------------------

    @contextmanager
    def activity_stopped(self) -> Iterator[ObjectContext]:
        """Stop background activity for the duration of a ``with`` block."""
        self.stop_activity()
        try:
            yield self
        finally:
            self.start_activity()

    def stop_activity(self) -> None:
        self.aqueue.stop()

    def start_activity(self) -> None:
        self.aqueue.start()

    def clear_state(self) -> None:
        """Reset dependent contexts and forget every object."""
        with self._dependents_lock:
            dependents = list(self._dependents)
        for ctx in dependents:
            ctx.clear_state()

        # Cut cross-references first, so that dropping objects releases nothing.
        self.aqueue.nullify()
        for obj in list(self.registry.all_objects()):
            obj.nullify_objects()
        self.registry.clear()
        self.aqueue.clear()

    # queries ------------------------------------------------------------

    def filter_objects(self, predicate: Callable[[ObjectBase], bool]) -> list[ObjectBase]:
        return self.registry.filter_objects(predicate)

    def get_object(self, handle: int) -> Optional[ObjectBase]:
        return self.registry.get_object(handle)

    def aqueue_size(self) -> int:
        return self.aqueue.count()

    def object_count(self) -> int:
        return self.registry.object_count()

    def collect_garbage(self) -> int:
        """Run the garbage collector; return the number of garbage objects found."""
        with self.activity_stopped():
            result = collect(self.registry, self.aqueue)
        return result.garbage_total

    # loading ------------------------------------------------------------

    def post_load_initializations(self) -> None:
        """Attach every loaded object to this context, then notify it."""
        objects = list(self.registry.all_objects())
        for obj in objects:
            obj.set_context(self)
        for obj in objects:
            obj.on_loaded()

    def post_load_maintenance(self) -> Optional[CollectionResult]:
        """Collect garbage after loading, logging how long it took."""
        operation = "Garbage collection"
        _log("%s started", operation)
        started = time.monotonic()
        result: Optional[CollectionResult] = None
        try:
            result = collect(self.registry, self.aqueue)
            _log(
                "%u garbage objects collected. %u objects are parts of cyclic graphs",
                result.garbage_total,
                result.part_of_graphs,
            )
        except Exception as exc:
            logger.error("'%s' throws '%s' of type '%s'", operation, exc, type(exc).__name__)
        elapsed = time.monotonic() - started
        _log("%s finished in %f sec", operation, elapsed)
        return result

    def print_stats(self) -> dict[str, int]:
        """Log object statistics and return them as a dictionary."""
        stats = {
            "total": len(self.registry.all_objects()),
            "public": self.registry.public_object_count(),
            "aqueue": self.aqueue.count(),
        }
        _log("%lu objects total", stats["total"])
        _log("%lu public objects", stats["public"])
        _log("%lu objects in aqueue", stats["aqueue"])
        return stats

    # dependents ---------------------------------------------------------

    def add_dependent_context(self, ctx: DependentContext) -> None:
        with self._dependents_lock:
            if not any(existing is ctx for existing in self._dependents):
                self._dependents.append(ctx)

    def remove_dependent_context(self, ctx: DependentContext) -> None:
        with self._dependents_lock:
            self._dependents = [d for d in self._dependents if d is not ctx]