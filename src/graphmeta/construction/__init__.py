"""Instance construction: argument synthesis, known shapes and constructor resolution."""

from graphmeta.construction.coercion import (
    TypeCoercer,
    is_logical_primitive,
    is_primitive,
    strip_quotes,
    zero_value,
)
from graphmeta.construction.resolver import ConstructorResolver, rank_constructors
from graphmeta.construction.shapes import DEFAULT_SHAPES, KnownShape, KnownShapes

__all__ = [
    "DEFAULT_SHAPES",
    "ConstructorResolver",
    "KnownShape",
    "KnownShapes",
    "TypeCoercer",
    "is_logical_primitive",
    "is_primitive",
    "rank_constructors",
    "strip_quotes",
    "zero_value",
]
