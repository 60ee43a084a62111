"""
graphmeta — domain types

File: src/graphmeta/domain/__init__.py
Last updated: 2026-10-18

Purpose
- Capability protocols (TypeDescriptor, FieldHandle), value objects and the
  classified error hierarchy shared by every layer.

Functional requirements
- No reflection or caching logic lives here; only shapes and errors.
"""

from graphmeta.domain.errors import (
    CoercionFailed,
    ConfigLoadError,
    FieldAssignmentDenied,
    GraphMetaError,
    InstantiationError,
    NoConstructorFound,
    SecurityDenied,
    UnsupportedInterface,
)
from graphmeta.domain.models import (
    ArgumentPolicy,
    ConstructorCandidate,
    FieldEntry,
    FieldHandle,
    PrimitiveKind,
    ResolvedConstructor,
    TypeDescriptor,
    Visibility,
)

__all__ = [
    "ArgumentPolicy",
    "CoercionFailed",
    "ConfigLoadError",
    "ConstructorCandidate",
    "FieldAssignmentDenied",
    "FieldEntry",
    "FieldHandle",
    "GraphMetaError",
    "InstantiationError",
    "NoConstructorFound",
    "PrimitiveKind",
    "ResolvedConstructor",
    "SecurityDenied",
    "TypeDescriptor",
    "UnsupportedInterface",
    "Visibility",
]
