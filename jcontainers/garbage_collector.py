"""Collector of objects that no root can reach."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jcontainers.object_base import ObjectBase


@dataclass(frozen=True)
class CollectionResult:
    """Outcome of a collection pass."""

    garbage_total: int
    part_of_graphs: int
    root_count: int = 0


def _find_roots(registry: Any) -> list[ObjectBase]:
    # Stack references are not persistent and so do not make an object a root.
    return [
        obj
        for obj in registry.all_objects()
        if obj.is_user_retained() or obj.is_in_aqueue()
    ]


def _find_unreachable(registry: Any, roots: list[ObjectBase]) -> set[ObjectBase]:
    not_reachable = set(registry.all_objects())
    not_reachable.difference_update(roots)
    to_visit = list(roots)

    def visitor(referenced: ObjectBase) -> None:
        if referenced in not_reachable:
            not_reachable.discard(referenced)
            to_visit.append(referenced)

    while to_visit:
        batch, to_visit = to_visit, []
        for obj in batch:
            obj.visit_referenced_objects(visitor)

    return not_reachable


def collect(registry: Any, aqueue: Any) -> CollectionResult:
    """Delete unreachable objects and break unreachable cycles.

    Objects still owned by other garbage are cleared, so that their reference
    counts drop and the autorelease queue takes them over.
    """
    roots = _find_roots(registry)
    garbage = _find_unreachable(registry, roots)

    part_of_graphs = 0
    for obj in garbage:
        if not obj.no_owners():
            obj.clear()
            part_of_graphs += 1
        else:
            obj.delete_self()

    return CollectionResult(len(garbage), part_of_graphs, len(roots))