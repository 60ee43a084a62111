"""Known container shapes answered without constructor probing.

Read-only and abstract container types cannot be filled field by field, so
``instantiate`` maps them to a fresh, empty, mutable counterpart. ``exact``
shapes match only the registered type itself; the others also match
subclasses. Hosts needing sorted shapes register them through
:meth:`KnownShapes.with_shape`.
"""

from __future__ import annotations

import collections.abc
import types
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Final

from graphmeta.domain.models import TypeDescriptor
from graphmeta.reflection.descriptor import describe, type_key


def _empty_tuple() -> tuple[()]:
    return ()


@dataclass(frozen=True, slots=True)
class KnownShape:
    kind: type | TypeDescriptor
    factory: Callable[[], object]
    exact: bool = False

    def matches(self, descriptor: TypeDescriptor) -> bool:
        key = type_key(descriptor)
        kind_key = self.kind if isinstance(self.kind, type) else type_key(self.kind)
        if key is kind_key:
            return True
        if self.exact or not isinstance(key, type) or not isinstance(kind_key, type):
            return False
        return issubclass(key, kind_key)


DEFAULT_SHAPES: Final[tuple[KnownShape, ...]] = (
    KnownShape(types.MappingProxyType, dict),
    KnownShape(collections.abc.Mapping, dict, exact=True),
    KnownShape(collections.abc.MutableMapping, dict, exact=True),
    KnownShape(frozenset, set),
    KnownShape(collections.abc.Set, set, exact=True),
    KnownShape(collections.abc.MutableSet, set, exact=True),
    KnownShape(collections.abc.Sequence, list, exact=True),
    KnownShape(collections.abc.MutableSequence, list, exact=True),
    KnownShape(collections.abc.Collection, list, exact=True),
    KnownShape(collections.abc.Iterable, list, exact=True),
    KnownShape(tuple, _empty_tuple, exact=True),
)


class KnownShapes:
    """Ordered shape table; the first matching shape wins."""

    __slots__ = ("_shapes",)

    def __init__(self, shapes: Iterable[KnownShape] = DEFAULT_SHAPES) -> None:
        self._shapes: tuple[KnownShape, ...] = tuple(shapes)

    def with_shape(
        self, kind: type | TypeDescriptor, factory: Callable[[], object], *, exact: bool = False
    ) -> KnownShapes:
        """Return a new table with ``kind`` checked ahead of the existing shapes."""
        return KnownShapes((KnownShape(kind, factory, exact), *self._shapes))

    def match(self, target: type | TypeDescriptor) -> KnownShape | None:
        descriptor = describe(target)
        for shape in self._shapes:
            if shape.matches(descriptor):
                return shape
        return None

    def __iter__(self) -> Iterator[KnownShape]:
        return iter(self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)


__all__ = [
    "DEFAULT_SHAPES",
    "KnownShape",
    "KnownShapes",
]
