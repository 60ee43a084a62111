"""Registration-table type descriptors.

A :class:`DeclaredType` describes a type explicitly instead of through
introspection: its superclass, interfaces, constructors (with visibility and
whether access to them can be granted), fields and an optional raw allocator.
Hosts without usable runtime reflection register their types this way; the
tests use it to model visibility-ranked constructor sets and interface lattices.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from graphmeta.domain.models import (
    ConstructorCandidate,
    FieldHandle,
    PrimitiveKind,
    TypeDescriptor,
    Visibility,
)
from graphmeta.reflection.descriptor import lattice_assignable


@dataclass(eq=False, slots=True)
class DeclaredConstructor:
    parameter_types: tuple[TypeDescriptor, ...]
    factory: Callable[..., object]
    visibility: Visibility = Visibility.PUBLIC
    accessible: bool = True
    label: str = "<init>"


@dataclass(eq=False, slots=True)
class DeclaredField:
    """Field handle for a registered type; writes go through ``object.__setattr__``."""

    name: str
    field_type: TypeDescriptor | None = None
    is_static: bool = False
    is_public: bool = True
    accessible: bool = True
    attribute: str = ""
    forced: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        if not self.attribute:
            self.attribute = self.name

    def make_accessible(self) -> bool:
        if not self.accessible:
            raise PermissionError(f"access to field {self.name!r} cannot be granted")
        self.forced = True
        return True

    def get(self, instance: object) -> object:
        self._check_access()
        return getattr(instance, self.attribute)

    def set(self, instance: object, value: object) -> None:
        self._check_access()
        object.__setattr__(instance, self.attribute, value)

    def _check_access(self) -> None:
        if not (self.is_public or self.forced):
            raise PermissionError(f"field {self.name!r} is not accessible")


class DeclaredType:
    """TypeDescriptor populated from an explicit registration table.

    Identity is object identity: two tables with the same name are different
    types.
    """

    __slots__ = (
        "_allocator",
        "_constructors",
        "_fields",
        "_interfaces",
        "_is_array",
        "_is_interface",
        "_name",
        "_nullable",
        "_primitive_kind",
        "_superclass",
    )

    def __init__(
        self,
        name: str,
        *,
        superclass: TypeDescriptor | None = None,
        interfaces: Sequence[TypeDescriptor] = (),
        is_interface: bool = False,
        is_array: bool = False,
        primitive_kind: PrimitiveKind | None = None,
        nullable: bool = False,
        allocator: Callable[[], object] | None = None,
    ) -> None:
        if not name.strip():
            raise ValueError("name must be a non-empty string")
        self._name = name
        self._superclass = superclass
        self._interfaces = tuple(interfaces)
        self._is_interface = is_interface
        self._is_array = is_array
        self._primitive_kind = primitive_kind
        self._nullable = nullable
        self._allocator = allocator
        self._constructors: list[DeclaredConstructor] = []
        self._fields: list[DeclaredField] = []

    @classmethod
    def primitive(cls, kind: PrimitiveKind, *, nullable: bool = False) -> DeclaredType:
        return cls(kind.value, primitive_kind=kind, nullable=nullable)

    def with_constructor(
        self,
        parameter_types: Sequence[TypeDescriptor],
        factory: Callable[..., object],
        *,
        visibility: Visibility = Visibility.PUBLIC,
        accessible: bool = True,
        label: str = "<init>",
    ) -> DeclaredType:
        self._constructors.append(
            DeclaredConstructor(
                parameter_types=tuple(parameter_types),
                factory=factory,
                visibility=visibility,
                accessible=accessible,
                label=label,
            )
        )
        return self

    def with_field(self, declared: DeclaredField) -> DeclaredType:
        self._fields.append(declared)
        return self

    @property
    def name(self) -> str:
        return self._name

    @property
    def simple_name(self) -> str:
        return self._name.rsplit(".", 1)[-1].rsplit("$", 1)[-1]

    @property
    def python_type(self) -> None:
        return None

    @property
    def primitive_kind(self) -> PrimitiveKind | None:
        return self._primitive_kind

    @property
    def nullable(self) -> bool:
        return self._nullable

    @property
    def superclass(self) -> TypeDescriptor | None:
        return self._superclass

    @property
    def interfaces(self) -> tuple[TypeDescriptor, ...]:
        return self._interfaces

    @property
    def is_interface(self) -> bool:
        return self._is_interface

    @property
    def is_primitive(self) -> bool:
        return self._primitive_kind is not None and not self._nullable

    @property
    def is_array(self) -> bool:
        return self._is_array

    def declared_constructors(self) -> tuple[ConstructorCandidate, ...]:
        return tuple(self._candidate(declared) for declared in self._constructors)

    def declared_fields(self) -> tuple[FieldHandle, ...]:
        return tuple(self._fields)

    def is_assignable_from(self, other: TypeDescriptor) -> bool:
        return lattice_assignable(self, other)

    def allocate(self) -> object:
        if self._allocator is None:
            raise TypeError(f"{self._name} does not support raw allocation")
        return self._allocator()

    def __repr__(self) -> str:
        return f"DeclaredType({self._name!r})"

    def _candidate(self, declared: DeclaredConstructor) -> ConstructorCandidate:
        granted = [declared.visibility is Visibility.PUBLIC]

        def grant_access() -> bool:
            if declared.accessible:
                granted[0] = True
            return declared.accessible

        def factory(*args: object) -> object:
            if not granted[0]:
                raise PermissionError(
                    f"{declared.visibility.value} constructor of {self._name} is not accessible"
                )
            return declared.factory(*args)

        return ConstructorCandidate(
            owner=self,
            parameter_types=declared.parameter_types,
            visibility=declared.visibility,
            factory=factory,
            label=declared.label,
            grant_access=grant_access,
        )


__all__ = [
    "DeclaredConstructor",
    "DeclaredField",
    "DeclaredType",
]
