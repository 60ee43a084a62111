"""
graphmeta — native Python type descriptors

File: src/graphmeta/reflection/native.py
Last updated: 2026-10-18

Purpose
- Implement the TypeDescriptor surface on top of Python's own introspection.

Mapping rules
- superclass: first base that is not an interface, else ``object``; ``object``
  and interfaces have none.
- interfaces: every other base (Protocols, abstract bases, mixins).
- interface: ``typing.Protocol`` classes and abstract classes.
- constructors: ``__init__`` (through ``inspect.signature(cls)``) plus every
  classmethod annotated to return the class. ``_name`` is protected, ``__name``
  private, anything else public. Only required parameters are synthesized.
- fields: the class's own annotations (``ClassVar`` marks static) followed by
  its own ``__slots__``. Abstract classes declare fields like any other class;
  Protocols declare none.
- raw allocation: ``cls.__new__(cls)``, skipping ``__init__``.
"""

from __future__ import annotations

import abc
import array
import inspect
import sys
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar, Final

from graphmeta.constants import EXCLUDED_SLOT_NAMES
from graphmeta.domain.models import (
    ConstructorCandidate,
    FieldHandle,
    PrimitiveKind,
    TypeDescriptor,
    Visibility,
)
from graphmeta.reflection.descriptor import lattice_assignable

_PRIMITIVE_KINDS: Final[dict[type, PrimitiveKind]] = {
    bool: PrimitiveKind.BOOLEAN,
    int: PrimitiveKind.LONG,
    float: PrimitiveKind.DOUBLE,
}
_NOISE_BASES: Final[frozenset[object]] = frozenset(
    {object, typing.Protocol, typing.Generic, abc.ABC}
)
_ARRAY_TYPES: Final[tuple[type, ...]] = (list, tuple, array.array)
_SELF_ANNOTATIONS: Final[frozenset[str]] = frozenset(
    {"Self", "typing.Self", "typing_extensions.Self"}
)
_HINT_ERRORS: Final[tuple[type[Exception], ...]] = (
    NameError,
    AttributeError,
    TypeError,
    SyntaxError,
)


@dataclass(frozen=True, slots=True)
class PythonType:
    """TypeDescriptor backed by a live Python class."""

    cls: type
    nullable: bool = False

    @classmethod
    def of(cls, target: type, *, nullable: bool = False) -> PythonType:
        return cls(target, nullable)

    @property
    def name(self) -> str:
        return f"{self.cls.__module__}.{self.cls.__qualname__}"

    @property
    def simple_name(self) -> str:
        return self.cls.__name__

    @property
    def python_type(self) -> type:
        return self.cls

    @property
    def primitive_kind(self) -> PrimitiveKind | None:
        return _PRIMITIVE_KINDS.get(self.cls)

    @property
    def is_primitive(self) -> bool:
        return not self.nullable and self.cls in _PRIMITIVE_KINDS

    @property
    def is_interface(self) -> bool:
        return _is_interface(self.cls)

    @property
    def is_array(self) -> bool:
        return issubclass(self.cls, _ARRAY_TYPES)

    @property
    def superclass(self) -> PythonType | None:
        if self.cls is object or self.is_interface:
            return None
        for base in self.cls.__bases__:
            if base not in _NOISE_BASES and not _is_interface(base):
                return PythonType(base)
        return PythonType(object)

    @property
    def interfaces(self) -> tuple[PythonType, ...]:
        superclass = self.superclass
        primary = superclass.cls if superclass is not None else None
        return tuple(
            PythonType(base)
            for base in self.cls.__bases__
            if base not in _NOISE_BASES and base is not primary
        )

    def declared_constructors(self) -> tuple[ConstructorCandidate, ...]:
        if self.is_interface:
            return ()
        candidates = [self._init_candidate()]
        for attr_name, raw in vars(self.cls).items():
            if not isinstance(raw, classmethod) or not _returns_owner(raw.__func__, self.cls):
                continue
            bound = getattr(self.cls, attr_name)
            candidate = _candidate_from_callable(
                self, bound, label=attr_name, visibility=_visibility_for(self.cls, attr_name)
            )
            if candidate is not None:
                candidates.append(candidate)
        return tuple(candidates)

    def declared_fields(self) -> tuple[FieldHandle, ...]:
        if _is_protocol(self.cls):
            return ()
        annotations = inspect.get_annotations(self.cls)
        hints = _resolved_hints(self.cls)
        frozen = _is_frozen_dataclass(self.cls)
        owner_private = self.cls.__name__.startswith("_")

        handles: list[FieldHandle] = []
        seen: set[str] = set()
        for name, annotation in annotations.items():
            seen.add(name)
            handles.append(
                AttributeField(
                    name=name,
                    attribute=_mangle(self.cls, name),
                    field_type=descriptor_for_annotation(hints.get(name, annotation)),
                    is_static=_is_classvar(annotation),
                    is_public=not (name.startswith("_") or owner_private or frozen),
                )
            )

        raw_slots = vars(self.cls).get("__slots__", ())
        slots = (raw_slots,) if isinstance(raw_slots, str) else tuple(raw_slots)
        for name in slots:
            if name in seen or name in EXCLUDED_SLOT_NAMES:
                continue
            seen.add(name)
            handles.append(
                AttributeField(
                    name=name,
                    attribute=_mangle(self.cls, name),
                    field_type=None,
                    is_static=False,
                    is_public=not (name.startswith("_") or owner_private or frozen),
                )
            )
        return tuple(handles)

    def is_assignable_from(self, other: TypeDescriptor) -> bool:
        other_type = other.python_type
        if other_type is not None:
            try:
                return issubclass(other_type, self.cls)
            except TypeError:
                # Protocols without @runtime_checkable refuse issubclass.
                pass
        return lattice_assignable(self, other)

    def allocate(self) -> object:
        return self.cls.__new__(self.cls)

    def _init_candidate(self) -> ConstructorCandidate:
        candidate = _candidate_from_callable(
            self, self.cls, label="__init__", visibility=Visibility.PUBLIC
        )
        if candidate is not None:
            return candidate
        # Builtins without an introspectable signature are tried with no arguments.
        return ConstructorCandidate(
            owner=self,
            parameter_types=(),
            visibility=Visibility.PUBLIC,
            factory=self.cls,
        )


@dataclass(slots=True)
class AttributeField:
    """Field handle writing straight to an instance attribute."""

    name: str
    attribute: str
    field_type: TypeDescriptor | None
    is_static: bool
    is_public: bool
    forced: bool = field(default=False, compare=False)

    def make_accessible(self) -> bool:
        self.forced = True
        return True

    def get(self, instance: object) -> object:
        return getattr(instance, self.attribute)

    def set(self, instance: object, value: object) -> None:
        if self.forced:
            object.__setattr__(instance, self.attribute, value)
        else:
            setattr(instance, self.attribute, value)


def descriptor_for_annotation(annotation: object) -> PythonType:
    """Map a resolved (or unresolvable) annotation to a parameter/field descriptor."""
    if annotation is inspect.Parameter.empty or annotation is Any or annotation is None:
        return PythonType(object)
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(annotation)
        members = [arg for arg in args if arg is not type(None)]
        if not members:
            return PythonType(object, nullable=True)
        inner = descriptor_for_annotation(members[0])
        return PythonType(inner.cls, nullable=len(members) < len(args) or inner.nullable)
    if origin is typing.Annotated:
        return descriptor_for_annotation(typing.get_args(annotation)[0])
    if origin is typing.Literal:
        values = typing.get_args(annotation)
        return PythonType(type(values[0])) if values else PythonType(object)
    if isinstance(origin, type):
        return PythonType(origin)
    if isinstance(annotation, typing.TypeVar):
        bound = annotation.__bound__
        return descriptor_for_annotation(bound) if bound is not None else PythonType(object)
    if isinstance(annotation, type):
        return PythonType(annotation)
    return PythonType(object)


def _candidate_from_callable(
    owner: PythonType,
    target: Callable[..., object],
    *,
    label: str,
    visibility: Visibility,
) -> ConstructorCandidate | None:
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        return None

    hints = _resolved_hints(owner.cls) if label == "__init__" else {}
    hints.update(_resolved_hints(owner.cls.__init__ if label == "__init__" else target))

    positional: list[str] = []
    keywords: list[str] = []
    parameter_types: list[TypeDescriptor] = []
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        if parameter.default is not parameter.empty:
            continue
        if parameter.kind is parameter.KEYWORD_ONLY:
            keywords.append(parameter.name)
        else:
            positional.append(parameter.name)
        parameter_types.append(
            descriptor_for_annotation(hints.get(parameter.name, parameter.annotation))
        )

    return ConstructorCandidate(
        owner=owner,
        parameter_types=tuple(parameter_types),
        visibility=visibility,
        factory=_bind_factory(target, len(positional), tuple(keywords)),
        label=label,
    )


def _bind_factory(
    target: Callable[..., object], positional_count: int, keywords: tuple[str, ...]
) -> Callable[..., object]:
    if not keywords:
        return target

    def factory(*args: object) -> object:
        named = dict(zip(keywords, args[positional_count:], strict=True))
        return target(*args[:positional_count], **named)

    return factory


def _resolved_hints(target: object) -> dict[str, object]:
    """Resolve annotations, degrading only the names that fail to evaluate.

    ``get_type_hints`` is all-or-nothing: one name imported under
    ``TYPE_CHECKING`` would discard every hint. On failure each annotation is
    evaluated on its own and an unresolvable one stays a string.
    """
    try:
        return dict(typing.get_type_hints(target))
    except _HINT_ERRORS:
        pass
    if isinstance(target, type):
        hints: dict[str, object] = {}
        for base in reversed(target.__mro__):
            module = sys.modules.get(base.__module__)
            namespace = vars(module) if module is not None else {}
            hints.update(
                _evaluate_each(inspect.get_annotations(base), namespace, dict(vars(base)))
            )
        return hints
    function = inspect.unwrap(getattr(target, "__func__", target))  # type: ignore[arg-type]
    try:
        annotations = inspect.get_annotations(function)
    except TypeError:
        return {}
    return _evaluate_each(annotations, getattr(function, "__globals__", {}), None)


def _evaluate_each(
    annotations: dict[str, object],
    globalns: dict[str, Any],
    localns: dict[str, Any] | None,
) -> dict[str, object]:
    resolved: dict[str, object] = {}
    for name, annotation in annotations.items():
        if not isinstance(annotation, str):
            resolved[name] = annotation
            continue
        try:
            resolved[name] = eval(annotation, globalns, localns)  # noqa: S307
        except _HINT_ERRORS:
            resolved[name] = annotation
    return resolved


def _returns_owner(func: Callable[..., object], owner: type) -> bool:
    try:
        annotation = inspect.get_annotations(func).get("return")
    except TypeError:
        return False
    if annotation is None:
        return False
    if isinstance(annotation, str):
        text = annotation.strip("'\"")
        return text in _SELF_ANNOTATIONS or text in {owner.__name__, owner.__qualname__}
    return annotation is owner or annotation is typing.Self


def _visibility_for(cls: type, name: str) -> Visibility:
    if name.startswith(f"_{cls.__name__.lstrip('_')}__") or (
        name.startswith("__") and not name.endswith("__")
    ):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _is_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False))


def _is_interface(cls: type) -> bool:
    return _is_protocol(cls) or inspect.isabstract(cls)


def _is_frozen_dataclass(cls: type) -> bool:
    params = vars(cls).get("__dataclass_params__")
    return params is not None and bool(params.frozen)


def _is_classvar(annotation: object) -> bool:
    if isinstance(annotation, str):
        text = annotation.strip("'\"")
        return text.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or typing.get_origin(annotation) is ClassVar


def _mangle(cls: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{cls.__name__.lstrip('_')}{name}"
    return name


__all__ = [
    "AttributeField",
    "PythonType",
    "descriptor_for_annotation",
]
