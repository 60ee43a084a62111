"""Instantiation deny-list."""

from graphmeta.security.guard import DENIED_TYPES, SecurityGuard

__all__ = [
    "DENIED_TYPES",
    "SecurityGuard",
]
