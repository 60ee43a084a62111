"""Classified failures surfaced by the metadata and construction layers."""

from __future__ import annotations


class GraphMetaError(Exception):
    """Base class for every error raised by graphmeta.

    ``type_name`` is the fully qualified name of the offending type, or
    ``None`` when the failure is not tied to one type.
    """

    def __init__(self, message: str, *, type_name: str | None = None) -> None:
        super().__init__(message)
        self.type_name = type_name


class InstantiationError(GraphMetaError):
    """Raised when an instance of a requested type cannot be produced."""


class SecurityDenied(InstantiationError):
    """The type is assignable to a member of the instantiation deny-list."""


class UnsupportedInterface(InstantiationError):
    """A bare interface with no known container shape was requested."""


class NoConstructorFound(InstantiationError):
    """Every construction strategy, raw allocation included, was exhausted."""


class CoercionFailed(GraphMetaError, ValueError):
    """A raw scalar or text value could not be converted to the target type."""

    def __init__(self, message: str, *, type_name: str, raw: object) -> None:
        super().__init__(message, type_name=type_name)
        self.raw = raw


class ConfigLoadError(GraphMetaError, ValueError):
    """Raised when config cannot be loaded, validated or coerced."""


class FieldAssignmentDenied(GraphMetaError):
    """A direct field write was rejected by the runtime."""

    def __init__(self, message: str, *, type_name: str | None, field_name: str) -> None:
        super().__init__(message, type_name=type_name)
        self.field_name = field_name


__all__ = [
    "CoercionFailed",
    "ConfigLoadError",
    "FieldAssignmentDenied",
    "GraphMetaError",
    "InstantiationError",
    "NoConstructorFound",
    "SecurityDenied",
    "UnsupportedInterface",
]
