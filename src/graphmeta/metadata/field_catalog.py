"""
graphmeta — field catalog

File: src/graphmeta/metadata/field_catalog.py
Last updated: 2026-10-18

Purpose
- Flatten a type's instance fields across its inheritance chain into one
  ordered, collision-free name -> FieldEntry map.

Rules
- Most-derived level first (the full MRO for native classes, so abstract
  bases and mixins count), declaration order within a level.
- Static fields, dunder names and enum bookkeeping fields are skipped.
- A name already taken by a more-derived level is published as
  ``"<OwnerSimpleName>.<name>"``.
- Non-public fields are forced accessible on a best-effort basis; a failure
  leaves the field as-is.

Non-functional requirements
- One computation per type for the process lifetime; callers get copies.
"""

from __future__ import annotations

import enum
from contextlib import suppress
from types import MappingProxyType
from typing import TYPE_CHECKING

from graphmeta.constants import ENUM_BOOKKEEPING_FIELDS, SHADOWED_FIELD_SEPARATOR
from graphmeta.domain.errors import FieldAssignmentDenied
from graphmeta.domain.models import FieldEntry, FieldHandle, TypeDescriptor
from graphmeta.reflection.descriptor import describe, field_levels, type_key
from graphmeta.utils.concurrency import MemoStore

if TYPE_CHECKING:
    from collections.abc import Mapping

FieldMap = dict[str, FieldEntry]


class FieldCatalog:
    """Per-type, inheritance-flattened field maps backed by a memo store."""

    def __init__(
        self, *, store: MemoStore[object, Mapping[str, FieldEntry]] | None = None
    ) -> None:
        self._store: MemoStore[object, Mapping[str, FieldEntry]] = (
            store if store is not None else MemoStore("field_catalog")
        )

    @property
    def store(self) -> MemoStore[object, Mapping[str, FieldEntry]]:
        return self._store

    def fields(self, target: type | TypeDescriptor) -> FieldMap:
        """Return a copy of the cached field map for ``target``."""
        return dict(self._cached(describe(target)))

    def get_field(self, target: type | TypeDescriptor, name: str) -> FieldEntry | None:
        return self._cached(describe(target)).get(name)

    def assign(self, entry: FieldEntry, instance: object, value: object) -> None:
        assign_field(entry, instance, value)

    def _cached(self, descriptor: TypeDescriptor) -> Mapping[str, FieldEntry]:
        return self._store.get_or_compute(
            type_key(descriptor), lambda _key: MappingProxyType(build_field_map(descriptor))
        )


def build_field_map(descriptor: TypeDescriptor) -> FieldMap:
    catalog: FieldMap = {}
    for level in field_levels(descriptor):
        enum_level = _is_enum_level(level)
        for handle in level.declared_fields():
            if handle.is_static or _is_runtime_internal(handle.name, enum_level=enum_level):
                continue
            published = _published_name(catalog, level, handle.name)
            catalog[published] = FieldEntry(name=published, owner=level, handle=handle)
            if not handle.is_public:
                _try_make_accessible(handle)
    return catalog


def assign_field(entry: FieldEntry, instance: object, value: object) -> None:
    """Write ``value`` straight into ``instance`` through the entry's handle."""
    if instance is None:
        raise FieldAssignmentDenied(
            f"attempting to set field {entry.name!r} on a None instance",
            type_name=entry.owner.name,
            field_name=entry.name,
        )
    try:
        entry.handle.set(instance, value)
    except (AttributeError, TypeError, PermissionError) as exc:
        instance_type = type(instance)
        type_name = f"{instance_type.__module__}.{instance_type.__qualname__}"
        raise FieldAssignmentDenied(
            f"cannot set field {entry.name!r} on {type_name}: the runtime rejected the write. "
            f"Register an explicit factory for {type_name} so instances arrive fully built.",
            type_name=type_name,
            field_name=entry.name,
        ) from exc


def _published_name(catalog: FieldMap, level: TypeDescriptor, name: str) -> str:
    if name not in catalog:
        return name
    renamed = f"{level.simple_name}{SHADOWED_FIELD_SEPARATOR}{name}"
    if renamed not in catalog:
        return renamed
    return f"{level.name}{SHADOWED_FIELD_SEPARATOR}{name}"


def _is_enum_level(level: TypeDescriptor) -> bool:
    python_type = level.python_type
    return python_type is not None and issubclass(python_type, enum.Enum)


def _is_runtime_internal(name: str, *, enum_level: bool) -> bool:
    if name.startswith("__") and name.endswith("__"):
        return True
    return enum_level and name in ENUM_BOOKKEEPING_FIELDS


def _try_make_accessible(handle: FieldHandle) -> bool:
    with suppress(Exception):
        return bool(handle.make_accessible())
    return False


__all__ = [
    "FieldCatalog",
    "FieldMap",
    "assign_field",
    "build_field_map",
]
