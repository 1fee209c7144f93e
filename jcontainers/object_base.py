"""Reference-counted base for container objects."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from enum import IntEnum
from typing import Any, Optional

from jcontainers.istring import IString

NULL_HANDLE = 0
"""The handle of an object that has not been exposed publicly."""


class CollectionType(IntEnum):
    """Kind of container an object is."""

    NONE = 0
    ARRAY = 1
    MAP = 2
    FORM_MAP = 3
    INTEGER_MAP = 4


class ObjectBase(ABC):
    """Container object owned by other objects, users, the stack and the autorelease queue.

    The object reaches its registry and autorelease queue through its context,
    which must provide ``registry`` and ``aqueue`` attributes.
    """

    def __init__(self, collection_type: CollectionType = CollectionType.NONE) -> None:
        self.type = CollectionType(collection_type)
        self.tag = IString("")
        self.aqueue_push_time = 0
        self._id = NULL_HANDLE
        self._ref_count = 0
        self._tes_ref_count = 0
        self._stack_ref_count = 0
        self._aqueue_ref_count = 0
        self._context: Optional[Any] = None
        self.lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type.name} id={self._id}>"

    # identity ---------------------------------------------------------

    @property
    def handle(self) -> int:
        """The current public handle, without registering one."""
        return self._id

    @handle.setter
    def handle(self, value: int) -> None:
        self._id = value

    def is_public(self) -> bool:
        return self._id != NULL_HANDLE

    def public_id(self) -> int:
        """Register (or return the registered) public handle; never prolongs lifetime."""
        if self._id == NULL_HANDLE:
            with self.lock:
                if self._id == NULL_HANDLE:
                    self._id = self.context().registry.register_new_object_id(self)
        return self._id

    def uid(self) -> int:
        """Register (or return) the public handle, prolonging lifetime of unowned objects."""
        if self._id == NULL_HANDLE:
            with self.lock:
                if self._id == NULL_HANDLE:
                    self._id = self.context().registry.register_new_object_id(self)
                    if not self._ref_count:
                        self.prolong_lifetime()
        return self._id

    # ownership --------------------------------------------------------

    def ref_count(self) -> int:
        return (
            self._ref_count
            + self._tes_ref_count
            + self._stack_ref_count
            + self._aqueue_ref_count
        )

    def no_owners(self) -> bool:
        return (
            self._ref_count <= 0
            and self._tes_ref_count <= 0
            and self._aqueue_ref_count <= 0
            and self._stack_ref_count <= 0
        )

    def is_user_retained(self) -> bool:
        return self._tes_ref_count > 0

    def is_in_aqueue(self) -> bool:
        return self._aqueue_ref_count > 0

    def retain(self) -> ObjectBase:
        """Take a reference on behalf of another object."""
        self._ref_count += 1
        return self

    def release(self) -> None:
        """Drop a reference held by another object."""
        if self._ref_count > 0:
            self._ref_count -= 1
            if self.no_owners():
                # During loading the context may not be attached yet; the
                # garbage collector takes care of such objects later.
                self._try_prolong_lifetime()

    def tes_retain(self) -> ObjectBase:
        """Take a reference on behalf of a user script."""
        self._tes_ref_count += 1
        self.context().aqueue.not_prolong_lifetime(self)
        return self

    def tes_release(self) -> None:
        if self._tes_ref_count > 0:
            self._tes_ref_count -= 1
            if self.no_owners():
                self.context().aqueue.prolong_lifetime(self, True)

    def stack_retain(self) -> None:
        self._stack_ref_count += 1

    def stack_release(self) -> None:
        if self._stack_ref_count > 0:
            self._stack_ref_count -= 1
            if self.no_owners():
                self.prolong_lifetime()

    @contextmanager
    def stack_ref(self) -> Iterator[ObjectBase]:
        """Hold a stack reference for the duration of a ``with`` block."""
        self.stack_retain()
        try:
            yield self
        finally:
            self.stack_release()

    def aqueue_retain(self) -> None:
        self._aqueue_ref_count += 1

    def aqueue_release(self) -> bool:
        """Drop the queue's reference; delete the object if the queue was its only owner.

        Returns True when the object was deleted.
        """
        if self.ref_count() <= 1:
            self._aqueue_ref_count = 0
            self.delete_self()
            return True
        self._aqueue_ref_count -= 1
        return False

    def prolong_lifetime(self) -> ObjectBase:
        """Hand the object to the autorelease queue, which owns it for a while."""
        self.context().aqueue.prolong_lifetime(self, self.is_public())
        return self

    def zero_lifetime(self) -> ObjectBase:
        self.context().aqueue.not_prolong_lifetime(self)
        return self

    def _try_prolong_lifetime(self) -> None:
        if self._context is not None:
            self.prolong_lifetime()

    def delete_self(self) -> None:
        """Remove the object from its registry."""
        self.context().registry.remove_object(self)

    # context ----------------------------------------------------------

    def set_context(self, context: Any) -> None:
        if self._context is not None:
            raise RuntimeError("object already has a context")
        self._context = context

    def context(self) -> Any:
        if self._context is None:
            raise RuntimeError("object has no context")
        return self._context

    def register_self(self) -> None:
        self.context().registry.register_new_object(self)

    # content ----------------------------------------------------------

    @abstractmethod
    def clear(self) -> None:
        """Remove every item."""

    @abstractmethod
    def count(self) -> int:
        """Number of items held."""

    @abstractmethod
    def nullify_objects(self) -> None:
        """Drop references to other objects without releasing them."""

    def on_loaded(self) -> None:
        """Hook called once the whole object graph has been loaded.

        By default it checks that the object has been attached to a context.
        """
        self.context()

    def referenced_objects(self) -> Iterable[ObjectBase]:
        """Objects this one references; none by default."""
        return ()

    def visit_referenced_objects(self, visitor: Callable[[ObjectBase], None]) -> None:
        """Call ``visitor`` for every object this one references."""
        for obj in self.referenced_objects():
            visitor(obj)

    def locked_count(self) -> int:
        with self.lock:
            return self.count()

    def locked_clear(self) -> None:
        with self.lock:
            self.clear()

    # tag --------------------------------------------------------------

    def set_tag(self, tag: Optional[str]) -> None:
        with self.lock:
            self.tag = IString(tag) if tag is not None else IString("")

    def has_equal_tag(self, tag: Optional[str]) -> bool:
        if tag is None:
            return False
        with self.lock:
            return self.tag == tag