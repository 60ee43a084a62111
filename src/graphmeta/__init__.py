"""
graphmeta — object construction and type metadata for JSON object-graph codecs

File: src/graphmeta/__init__.py
Last updated: 2026-10-18

Purpose
- Package root. Builds live instances of arbitrary types, reports their
  assignable fields across the inheritance chain and measures inheritance
  distance for converter dispatch.

Import boundary rules
- Must not have side effects at import time (no config loading, no logging init).
  The default runtime is built on the first module-level call.
"""

from graphmeta.construction import ConstructorResolver, KnownShapes, TypeCoercer
from graphmeta.domain import (
    CoercionFailed,
    ConfigLoadError,
    FieldAssignmentDenied,
    FieldEntry,
    GraphMetaError,
    InstantiationError,
    NoConstructorFound,
    PrimitiveKind,
    SecurityDenied,
    TypeDescriptor,
    UnsupportedInterface,
    Visibility,
)
from graphmeta.metadata import FieldCatalog, closest, is_assignable
from graphmeta.reflection import DeclaredField, DeclaredType, PythonType, type_for_name
from graphmeta.runtime import (
    MetaRuntime,
    build_runtime,
    coerce,
    default_runtime,
    disable_unsafe_allocation,
    distance,
    enable_unsafe_allocation,
    fields,
    instantiate,
    reset_default_runtime,
)
from graphmeta.security import SecurityGuard

__version__ = "0.1.0"

__all__ = [
    "CoercionFailed",
    "ConfigLoadError",
    "ConstructorResolver",
    "DeclaredField",
    "DeclaredType",
    "FieldAssignmentDenied",
    "FieldCatalog",
    "FieldEntry",
    "GraphMetaError",
    "InstantiationError",
    "KnownShapes",
    "MetaRuntime",
    "NoConstructorFound",
    "PrimitiveKind",
    "PythonType",
    "SecurityDenied",
    "SecurityGuard",
    "TypeCoercer",
    "TypeDescriptor",
    "UnsupportedInterface",
    "Visibility",
    "__version__",
    "build_runtime",
    "closest",
    "coerce",
    "default_runtime",
    "disable_unsafe_allocation",
    "distance",
    "enable_unsafe_allocation",
    "fields",
    "instantiate",
    "is_assignable",
    "reset_default_runtime",
]
