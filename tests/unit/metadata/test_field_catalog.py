"""
graphmeta — unit tests for the field catalog

File: tests/unit/metadata/test_field_catalog.py
Last updated: 2026-10-18

What this test file should cover
- Inheritance flattening order (abstract and secondary bases included) and
  shadowed-name renaming.
- Exclusion of static, dunder and enum bookkeeping fields.
- Direct assignment bypassing frozen guards and name mangling.
- Per-type caching; callers receive copies.
"""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from types import SimpleNamespace
from typing import ClassVar, Protocol

import pytest

from graphmeta.constants import ENUM_BOOKKEEPING_FIELDS
from graphmeta.domain.errors import FieldAssignmentDenied
from graphmeta.metadata.field_catalog import FieldCatalog, assign_field, build_field_map
from graphmeta.reflection import DeclaredField, DeclaredType, PythonType


class Base:
    name: str
    count: int
    registry: ClassVar[list[str]] = []

    def __init__(self) -> None:
        self.name = "base"
        self.count = 0


class Derived(Base):
    name: str
    extra: float

    def __init__(self) -> None:
        super().__init__()
        self.extra = 1.5


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class Slotted:
    __slots__ = ("alpha", "__beta", "__weakref__")

    def __init__(self) -> None:
        self.alpha = 1
        self.__beta = 2


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Entity(abc.ABC):
    ident: int

    @abc.abstractmethod
    def kind(self) -> str: ...


class Tagged:
    tag: str
    ident: str


class Row(Entity, Tagged):
    value: float

    def kind(self) -> str:
        return "row"


class Named(Protocol):
    name: str


class Badge(Named):
    label: str


def test_fields_are_flattened_most_derived_first_with_renamed_duplicates() -> None:
    catalog = FieldCatalog()

    fields = catalog.fields(Derived)

    assert list(fields) == ["name", "extra", "Base.name", "count"]
    assert fields["name"].owner == PythonType(Derived)
    assert fields["Base.name"].owner == PythonType(Base)
    assert fields["Base.name"].attribute == "name"
    assert fields["extra"].field_type == PythonType(float)


def test_static_and_runtime_internal_fields_are_excluded() -> None:
    catalog = FieldCatalog()

    assert "registry" not in catalog.fields(Base)
    assert list(catalog.fields(Slotted)) == ["alpha", "__beta"]
    assert not ENUM_BOOKKEEPING_FIELDS & set(catalog.fields(Color))


def test_assign_writes_through_frozen_dataclass_guards() -> None:
    catalog = FieldCatalog()
    point = Point(1, 2)
    entry = catalog.get_field(Point, "x")
    assert entry is not None

    catalog.assign(entry, point, 5)

    assert point.x == 5
    assert entry.get(point) == 5


def test_assign_uses_the_mangled_attribute_for_private_slots() -> None:
    catalog = FieldCatalog()
    slotted = Slotted()
    entry = catalog.get_field(Slotted, "__beta")
    assert entry is not None
    assert entry.attribute == "_Slotted__beta"

    catalog.assign(entry, slotted, 9)

    assert slotted._Slotted__beta == 9  # type: ignore[attr-defined]


def test_fields_are_cached_and_callers_receive_copies() -> None:
    catalog = FieldCatalog()

    first = catalog.fields(Derived)
    first.pop("name")
    second = catalog.fields(Derived)

    assert "name" in second
    assert len(catalog.store) == 1
    assert catalog.get_field(Derived, "missing") is None


def test_declared_types_rename_with_simple_then_qualified_names() -> None:
    grand = DeclaredType("b.Node").with_field(DeclaredField("id"))
    parent = DeclaredType("a.Node", superclass=grand).with_field(DeclaredField("id"))
    child = DeclaredType("com.acme.Child", superclass=parent).with_field(DeclaredField("id"))

    fields = build_field_map(child)

    assert list(fields) == ["id", "Node.id", "b.Node.id"]
    assert fields["b.Node.id"].owner is grand


def test_static_declared_fields_are_skipped_and_private_ones_forced() -> None:
    hidden = DeclaredField("secret", is_public=False)
    shared = DeclaredField("shared", is_static=True)
    vault = DeclaredType("com.acme.Vault").with_field(hidden).with_field(shared)

    fields = build_field_map(vault)

    assert list(fields) == ["secret"]
    assert hidden.forced is True


def test_rejected_writes_advise_registering_a_factory() -> None:
    locked = DeclaredField("pin", is_public=False, accessible=False)
    vault = DeclaredType("com.acme.Vault").with_field(locked)
    entry = build_field_map(vault)["pin"]

    with pytest.raises(FieldAssignmentDenied, match="Register an explicit factory") as excinfo:
        assign_field(entry, SimpleNamespace(), 1234)

    assert excinfo.value.field_name == "pin"
    assert excinfo.value.type_name == "types.SimpleNamespace"
    assert isinstance(excinfo.value.__cause__, PermissionError)


def test_assigning_to_none_is_rejected() -> None:
    entry = FieldCatalog().fields(Derived)["extra"]

    with pytest.raises(FieldAssignmentDenied, match="None instance"):
        assign_field(entry, None, 2.0)


def test_abstract_bases_and_secondary_bases_contribute_fields() -> None:
    catalog = FieldCatalog()

    fields = catalog.fields(Row)

    assert list(fields) == ["value", "ident", "tag", "Tagged.ident"]
    assert fields["ident"].owner == PythonType(Entity)
    assert fields["tag"].owner == PythonType(Tagged)

    row = Row()
    catalog.assign(fields["tag"], row, "hot")
    assert row.tag == "hot"


def test_protocol_annotations_are_not_instance_fields() -> None:
    assert list(FieldCatalog().fields(Badge)) == ["label"]
