"""Descriptor lookup and lattice queries shared by all descriptor implementations."""

from __future__ import annotations

from collections.abc import Iterator

from graphmeta.domain.models import TypeDescriptor


def describe(target: type | TypeDescriptor) -> TypeDescriptor:
    """Return the descriptor for a Python class, or ``target`` itself if it is one."""
    if isinstance(target, type):
        from graphmeta.reflection.native import PythonType

        return PythonType.of(target)
    if isinstance(target, TypeDescriptor):
        return target
    raise TypeError(f"expected a class or TypeDescriptor, got {type(target).__name__}")


def type_key(descriptor: TypeDescriptor) -> object:
    """Identity key used by the memo stores and lattice walks."""
    python_type = descriptor.python_type
    return python_type if python_type is not None else descriptor


def same_type(left: TypeDescriptor, right: TypeDescriptor) -> bool:
    return type_key(left) is type_key(right)


def lineage(descriptor: TypeDescriptor) -> Iterator[TypeDescriptor]:
    """Yield ``descriptor`` and then each successive superclass up to the root."""
    current: TypeDescriptor | None = descriptor
    while current is not None:
        yield current
        current = current.superclass


def field_levels(descriptor: TypeDescriptor) -> Iterator[TypeDescriptor]:
    """Yield every level that can declare instance fields, most-derived first.

    Registered types contribute their superclass chain. A native class
    contributes its whole MRO, so abstract bases and mixins are walked too;
    ``object`` and Protocol classes hold no instance state and are skipped.
    """
    for level in lineage(descriptor):
        python_type = level.python_type
        if python_type is None:
            yield level
            continue
        for cls in python_type.__mro__:
            if cls is object or getattr(cls, "_is_protocol", False):
                continue
            yield level if cls is python_type else describe(cls)
        return


def parents(descriptor: TypeDescriptor) -> tuple[TypeDescriptor, ...]:
    superclass = descriptor.superclass
    if superclass is None:
        return descriptor.interfaces
    return (*descriptor.interfaces, superclass)


def lattice_assignable(ancestor: TypeDescriptor, concrete: TypeDescriptor) -> bool:
    """Return whether ``concrete`` reaches ``ancestor`` through superclass/interface edges."""
    target = type_key(ancestor)
    seen: set[int] = set()
    stack: list[TypeDescriptor] = [concrete]
    while stack:
        current = stack.pop()
        key = type_key(current)
        if key is target:
            return True
        if id(key) in seen:
            continue
        seen.add(id(key))
        stack.extend(parents(current))
    return False


__all__ = [
    "describe",
    "field_levels",
    "lattice_assignable",
    "lineage",
    "parents",
    "same_type",
    "type_key",
]
