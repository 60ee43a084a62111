"""
graphmeta — instantiation deny-list

File: src/graphmeta/security/guard.py
Last updated: 2026-10-18

Purpose
- Refuse to instantiate types that start processes, load code or expose
  interpreter internals, whatever the input graph asks for.

Functional requirements
- A type is forbidden when it is assignable to any denied base, or when its
  qualified name (or an ancestor's) is on the name deny-list.
- ``check`` raises SecurityDenied before any constructor is attempted.
"""

from __future__ import annotations

import asyncio.subprocess
import importlib.abc
import multiprocessing.process
import subprocess
import types
from collections.abc import Iterable
from typing import Any, Final

import structlog

from graphmeta.constants import FORBIDDEN_TYPE_NAMES
from graphmeta.domain.errors import SecurityDenied
from graphmeta.domain.models import TypeDescriptor
from graphmeta.reflection.descriptor import describe, lineage

DENIED_TYPES: Final[tuple[type, ...]] = (
    subprocess.Popen,
    asyncio.subprocess.Process,
    multiprocessing.process.BaseProcess,
    importlib.abc.Loader,
    importlib.abc.MetaPathFinder,
    importlib.abc.PathEntryFinder,
    types.ModuleType,
    types.CodeType,
    types.FunctionType,
    types.MethodType,
    types.FrameType,
)


class SecurityGuard:
    """Deny-list check run ahead of every instantiation."""

    def __init__(
        self,
        *,
        denied_types: Iterable[type | TypeDescriptor] = DENIED_TYPES,
        extra_names: Iterable[str] = (),
        logger: Any | None = None,
    ) -> None:
        self._denied = tuple(describe(denied) for denied in denied_types)
        self._names = FORBIDDEN_TYPE_NAMES | frozenset(name.strip() for name in extra_names)
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def denied_names(self) -> frozenset[str]:
        return self._names

    def is_forbidden(self, target: type | TypeDescriptor) -> bool:
        return self._denial_reason(describe(target)) is not None

    def check(self, target: type | TypeDescriptor) -> None:
        descriptor = describe(target)
        reason = self._denial_reason(descriptor)
        if reason is None:
            return
        self._logger.warning(
            "graphmeta_security_denied",
            type_name=descriptor.name,
            denied_by=reason,
        )
        raise SecurityDenied(
            f"for security reasons, graphmeta does not allow instantiation of: {descriptor.name}",
            type_name=descriptor.name,
        )

    def _denial_reason(self, descriptor: TypeDescriptor) -> str | None:
        for level in lineage(descriptor):
            if level.name in self._names:
                return level.name
        for denied in self._denied:
            if denied.is_assignable_from(descriptor):
                return denied.name
        return None


__all__ = [
    "DENIED_TYPES",
    "SecurityGuard",
]
