"""
graphmeta — reflection layer

File: src/graphmeta/reflection/__init__.py
Last updated: 2026-10-18

Purpose
- TypeDescriptor implementations: native Python introspection (PythonType) and
  explicit registration tables (DeclaredType).
- Lattice helpers and wire type-name resolution.

Functional requirements
- Never mutate the described types; descriptors are read-only views.
"""

from graphmeta.reflection.declared import DeclaredConstructor, DeclaredField, DeclaredType
from graphmeta.reflection.descriptor import (
    describe,
    field_levels,
    lattice_assignable,
    lineage,
    parents,
    same_type,
    type_key,
)
from graphmeta.reflection.names import enum_type_of, type_for_name
from graphmeta.reflection.native import AttributeField, PythonType, descriptor_for_annotation

__all__ = [
    "AttributeField",
    "DeclaredConstructor",
    "DeclaredField",
    "DeclaredType",
    "PythonType",
    "describe",
    "descriptor_for_annotation",
    "enum_type_of",
    "field_levels",
    "lattice_assignable",
    "lineage",
    "parents",
    "same_type",
    "type_for_name",
    "type_key",
]
