"""
graphmeta — runtime composition root

File: src/graphmeta/runtime.py
Last updated: 2026-10-18

Purpose
- Build one coherent set of components (coercer, guard, field catalog,
  constructor resolver) from a loaded config, owning their memo stores.
- Back the module-level convenience functions with a lazily built default
  runtime.

Functional requirements
- The default runtime is built on first use, never at import time.
- Toggling unsafe allocation on a runtime affects every later instantiation
  made through it; in-flight calls may observe either state.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from graphmeta.config.loader import load_config
from graphmeta.config.schema import GraphMetaConfig, assert_valid_config, default_config
from graphmeta.construction.coercion import TypeCoercer
from graphmeta.construction.resolver import ConstructorResolver
from graphmeta.construction.shapes import KnownShapes
from graphmeta.domain.models import FieldEntry, PrimitiveKind, TypeDescriptor
from graphmeta.metadata.field_catalog import FieldCatalog, FieldMap
from graphmeta.metadata.type_distance import distance as _distance
from graphmeta.security.guard import SecurityGuard
from graphmeta.utils.concurrency import AtomicFlag


@dataclass(slots=True)
class MetaRuntime:
    """Components sharing one config, one set of memo stores and one unsafe flag."""

    config: GraphMetaConfig
    coercer: TypeCoercer
    guard: SecurityGuard
    catalog: FieldCatalog
    resolver: ConstructorResolver
    logger: Any = field(repr=False)

    def instantiate(self, target: type | TypeDescriptor) -> object:
        return self.resolver.instantiate(target)

    def fields(self, target: type | TypeDescriptor) -> FieldMap:
        return self.catalog.fields(target)

    def get_field(self, target: type | TypeDescriptor, name: str) -> FieldEntry | None:
        return self.catalog.get_field(target, name)

    def assign(self, entry: FieldEntry, instance: object, value: object) -> None:
        self.catalog.assign(entry, instance, value)

    def distance(self, ancestor: type | TypeDescriptor, concrete: type | TypeDescriptor) -> int:
        return _distance(ancestor, concrete)

    def coerce(self, target: PrimitiveKind | type | TypeDescriptor, raw: object) -> object:
        return self.coercer.coerce(target, raw)

    @property
    def unsafe_allocation_enabled(self) -> bool:
        return self.resolver.unsafe.enabled

    def enable_unsafe_allocation(self) -> None:
        self.resolver.set_unsafe_allocation(True)

    def disable_unsafe_allocation(self) -> None:
        self.resolver.set_unsafe_allocation(False)

    def snapshot(self) -> dict[str, object]:
        return {
            "resolved_constructors": len(self.resolver.cache),
            "field_catalogs": len(self.catalog.store),
            "unsafe_allocation": self.unsafe_allocation_enabled,
        }


def build_runtime(
    config: Mapping[str, object] | None = None,
    *,
    shapes: KnownShapes | None = None,
    logger: Any | None = None,
) -> MetaRuntime:
    """Wire a runtime from ``config`` (validated; defaults when omitted)."""
    effective = assert_valid_config(config if config is not None else default_config())
    section = effective["instantiation"]
    log = logger if logger is not None else structlog.get_logger("graphmeta")

    coercer = TypeCoercer()
    guard = SecurityGuard(extra_names=section["extra_forbidden_types"], logger=log)
    resolver = ConstructorResolver(
        coercer=coercer,
        guard=guard,
        unsafe=AtomicFlag(section["allow_unsafe_allocation"]),
        shapes=shapes,
        logger=log,
    )
    return MetaRuntime(
        config=effective,
        coercer=coercer,
        guard=guard,
        catalog=FieldCatalog(),
        resolver=resolver,
        logger=log,
    )


_default_lock = threading.Lock()
_default_runtime: MetaRuntime | None = None


def default_runtime() -> MetaRuntime:
    """Return the process-wide runtime, loading config on first use."""
    global _default_runtime
    with _default_lock:
        if _default_runtime is None:
            _default_runtime = build_runtime(load_config())
        return _default_runtime


def reset_default_runtime(runtime: MetaRuntime | None = None) -> None:
    """Replace (or drop) the process-wide runtime; the next call rebuilds it when dropped."""
    global _default_runtime
    with _default_lock:
        _default_runtime = runtime


def instantiate(target: type | TypeDescriptor) -> object:
    return default_runtime().instantiate(target)


def fields(target: type | TypeDescriptor) -> FieldMap:
    return default_runtime().fields(target)


def distance(ancestor: type | TypeDescriptor, concrete: type | TypeDescriptor) -> int:
    return _distance(ancestor, concrete)


def coerce(target: PrimitiveKind | type | TypeDescriptor, raw: object) -> object:
    return default_runtime().coerce(target, raw)


def enable_unsafe_allocation() -> None:
    default_runtime().enable_unsafe_allocation()


def disable_unsafe_allocation() -> None:
    default_runtime().disable_unsafe_allocation()


__all__ = [
    "MetaRuntime",
    "build_runtime",
    "coerce",
    "default_runtime",
    "disable_unsafe_allocation",
    "distance",
    "enable_unsafe_allocation",
    "fields",
    "instantiate",
    "reset_default_runtime",
]
