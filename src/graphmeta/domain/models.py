"""Capability protocols and value objects shared by every graphmeta layer."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, runtime_checkable


class Visibility(StrEnum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    PACKAGE = "package"

    @property
    def rank(self) -> int:
        """Sort rank; private and package constructors share the last rank."""
        return _VISIBILITY_RANK[self]


_VISIBILITY_RANK: dict[Visibility, int] = {
    Visibility.PUBLIC: 0,
    Visibility.PROTECTED: 1,
    Visibility.PRIVATE: 2,
    Visibility.PACKAGE: 2,
}


class PrimitiveKind(StrEnum):
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"


class ArgumentPolicy(StrEnum):
    """Argument synthesis policy used while probing constructors."""

    NULL_PREFERRING = "null_preferring"
    POPULATE = "populate"

    @property
    def prefer_empty(self) -> bool:
        return self is ArgumentPolicy.NULL_PREFERRING


@runtime_checkable
class FieldHandle(Protocol):
    """Storage handle for one declared instance field."""

    @property
    def name(self) -> str: ...

    @property
    def attribute(self) -> str: ...

    @property
    def field_type(self) -> TypeDescriptor | None: ...

    @property
    def is_static(self) -> bool: ...

    @property
    def is_public(self) -> bool: ...

    def make_accessible(self) -> bool: ...

    def get(self, instance: object) -> object: ...

    def set(self, instance: object, value: object) -> None: ...


@runtime_checkable
class TypeDescriptor(Protocol):
    """Read-only view of a runtime type.

    The metadata and construction layers only talk to this surface; native
    introspection (:class:`graphmeta.reflection.PythonType`) and explicit
    registration tables (:class:`graphmeta.reflection.DeclaredType`) both
    implement it.
    """

    @property
    def name(self) -> str: ...

    @property
    def simple_name(self) -> str: ...

    @property
    def python_type(self) -> type | None: ...

    @property
    def primitive_kind(self) -> PrimitiveKind | None: ...

    @property
    def nullable(self) -> bool: ...

    @property
    def superclass(self) -> TypeDescriptor | None: ...

    @property
    def interfaces(self) -> tuple[TypeDescriptor, ...]: ...

    @property
    def is_interface(self) -> bool: ...

    @property
    def is_primitive(self) -> bool: ...

    @property
    def is_array(self) -> bool: ...

    def declared_constructors(self) -> tuple[ConstructorCandidate, ...]: ...

    def declared_fields(self) -> tuple[FieldHandle, ...]: ...

    def is_assignable_from(self, other: TypeDescriptor) -> bool: ...

    def allocate(self) -> object: ...


def _always_accessible() -> bool:
    return True


@dataclass(frozen=True, slots=True)
class ConstructorCandidate:
    """One constructor of ``owner`` with its ranking inputs."""

    owner: TypeDescriptor
    parameter_types: tuple[TypeDescriptor, ...]
    visibility: Visibility
    factory: Callable[..., object] = field(repr=False, compare=False)
    label: str = "__init__"
    grant_access: Callable[[], bool] = field(
        default=_always_accessible, repr=False, compare=False
    )

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def sort_key(self) -> tuple[int, int, tuple[str, ...]]:
        """Visibility rank, then parameter count, then parameter type names."""
        return (
            self.visibility.rank,
            self.arity,
            tuple(param.name for param in self.parameter_types),
        )

    def make_accessible(self) -> bool:
        return self.grant_access()

    def invoke(self, args: Sequence[object] = ()) -> object:
        return self.factory(*args)


@dataclass(frozen=True, slots=True)
class FieldEntry:
    """Catalog entry: the published name, the declaring type and its handle."""

    name: str
    owner: TypeDescriptor
    handle: FieldHandle = field(compare=False)

    @property
    def attribute(self) -> str:
        return self.handle.attribute

    @property
    def field_type(self) -> TypeDescriptor | None:
        return self.handle.field_type

    def get(self, instance: object) -> object:
        return self.handle.get(instance)


@dataclass(frozen=True, slots=True)
class ResolvedConstructor:
    """Cached outcome of constructor resolution for one type.

    ``constructor is None`` records that the instance came from raw
    allocation; ``use_null_args`` is ``None`` in that case.
    """

    constructor: ConstructorCandidate | None
    use_null_args: bool | None

    @property
    def raw_allocation(self) -> bool:
        return self.constructor is None

    @property
    def policy(self) -> ArgumentPolicy | None:
        if self.use_null_args is None:
            return None
        return ArgumentPolicy.NULL_PREFERRING if self.use_null_args else ArgumentPolicy.POPULATE


__all__ = [
    "ArgumentPolicy",
    "ConstructorCandidate",
    "FieldEntry",
    "FieldHandle",
    "PrimitiveKind",
    "ResolvedConstructor",
    "TypeDescriptor",
    "Visibility",
]
