"""Inheritance/interface distance between an ancestor type and a concrete type.

Each superclass or interface edge counts as one step. Interface ancestors are
searched through the whole multiple-inheritance lattice and the minimum over
every path is reported. A virtual subclass (ABC registration) with no declared
edge counts as one step, so ``distance`` agrees with ``is_assignable``.
``UNRELATED`` means no path exists. Results are advisory: the converter
dispatcher ranks its handlers with them and owns tie breaking.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from graphmeta.constants import UNRELATED
from graphmeta.domain.models import TypeDescriptor
from graphmeta.reflection.descriptor import describe, same_type

T = TypeVar("T", bound="type | TypeDescriptor")


def distance(ancestor: type | TypeDescriptor, concrete: type | TypeDescriptor) -> int:
    to = describe(ancestor)
    start = describe(concrete)
    if not to.is_interface:
        steps = _superclass_steps(to, start)
        if steps != UNRELATED:
            return steps
    # Class ancestors reached only through a secondary base use the lattice too.
    return _lattice_distance(to, start)


def is_assignable(ancestor: type | TypeDescriptor, concrete: type | TypeDescriptor) -> bool:
    return describe(ancestor).is_assignable_from(describe(concrete))


def closest(candidates: Iterable[T], concrete: type | TypeDescriptor) -> T | None:
    """Return the candidate ancestor nearest to ``concrete``; earlier candidates win ties."""
    target = describe(concrete)
    best: T | None = None
    best_distance = UNRELATED
    for candidate in candidates:
        measured = distance(candidate, target)
        if measured < best_distance:
            best, best_distance = candidate, measured
    return best


def _superclass_steps(to: TypeDescriptor, start: TypeDescriptor) -> int:
    steps = 0
    current: TypeDescriptor | None = start
    while current is not None and not same_type(current, to):
        current = current.superclass
        steps += 1
    return steps if current is not None else UNRELATED


def _lattice_distance(to: TypeDescriptor, start: TypeDescriptor) -> int:
    if same_type(to, start):
        return 0

    candidates: list[TypeDescriptor] = []
    for interface in start.interfaces:
        if same_type(to, interface):
            return 1
        if to.is_assignable_from(interface):
            candidates.append(interface)

    superclass = start.superclass
    if superclass is not None and to.is_assignable_from(superclass):
        candidates.append(superclass)

    minimum = UNRELATED
    for candidate in candidates:
        measured = _lattice_distance(to, candidate)
        if measured != UNRELATED and measured + 1 < minimum:
            minimum = measured + 1
    if minimum == UNRELATED and to.is_assignable_from(start):
        # ABC registration or __subclasshook__: no declared edge, one step.
        return 1
    return minimum


__all__ = [
    "closest",
    "distance",
    "is_assignable",
]
