"""
graphmeta — constructor resolution

File: src/graphmeta/construction/resolver.py
Last updated: 2026-10-18

Purpose
- Produce a live instance of an arbitrary type so the caller can hydrate its
  fields directly, even when the type has no usable public constructor.

Resolution order (first success wins, winning strategy cached per type)
1. Deny-list check.
2. Known container shapes.
3. Interfaces fail.
4. Cached strategy replay.
5. Public zero-argument constructors, in declaration order.
6. Brute force over every constructor ranked by visibility, arity and
   parameter type names: a null-preferring pass, then a populate pass.
7. Raw allocation, only while the unsafe-allocation flag is enabled.

Non-functional requirements
- Individual constructor trials are expected to fail; failures are logged at
  debug level and never surfaced. Only exhaustion is an error.
- Raw allocation skips ``__init__`` and can leave instances without the
  invariants their constructor establishes. It stays off unless enabled.
"""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import suppress
from typing import Any

import structlog

from graphmeta.construction.coercion import TypeCoercer
from graphmeta.construction.shapes import KnownShapes
from graphmeta.domain.errors import NoConstructorFound, UnsupportedInterface
from graphmeta.domain.models import (
    ArgumentPolicy,
    ConstructorCandidate,
    ResolvedConstructor,
    TypeDescriptor,
    Visibility,
)
from graphmeta.reflection.descriptor import describe, type_key
from graphmeta.security.guard import SecurityGuard
from graphmeta.utils.concurrency import AtomicFlag, MemoStore

_Attempt = tuple[object, ResolvedConstructor]


def rank_constructors(
    candidates: Iterable[ConstructorCandidate],
) -> list[ConstructorCandidate]:
    """Public before protected before private/package; fewer parameters first."""
    return sorted(candidates, key=ConstructorCandidate.sort_key)


class ConstructorResolver:
    """Instantiates types through cached, ranked constructor trials."""

    def __init__(
        self,
        *,
        coercer: TypeCoercer | None = None,
        guard: SecurityGuard | None = None,
        cache: MemoStore[object, ResolvedConstructor] | None = None,
        unsafe: AtomicFlag | None = None,
        shapes: KnownShapes | None = None,
        logger: Any | None = None,
    ) -> None:
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._coercer = coercer if coercer is not None else TypeCoercer()
        self._guard = guard if guard is not None else SecurityGuard(logger=self._logger)
        self._cache: MemoStore[object, ResolvedConstructor] = (
            cache if cache is not None else MemoStore("resolved_constructors")
        )
        self._unsafe = unsafe if unsafe is not None else AtomicFlag()
        self._shapes = shapes if shapes is not None else KnownShapes()

    @property
    def cache(self) -> MemoStore[object, ResolvedConstructor]:
        return self._cache

    @property
    def unsafe(self) -> AtomicFlag:
        return self._unsafe

    @property
    def shapes(self) -> KnownShapes:
        return self._shapes

    def set_unsafe_allocation(self, enabled: bool) -> None:
        self._unsafe.set(enabled)
        self._logger.info("graphmeta_unsafe_allocation_toggled", enabled=bool(enabled))

    def cached_strategy(self, target: type | TypeDescriptor) -> ResolvedConstructor | None:
        return self._cache.get(type_key(describe(target)))

    def instantiate(self, target: type | TypeDescriptor) -> object:
        """Return a new instance of ``target``.

        Raises SecurityDenied, UnsupportedInterface or NoConstructorFound.
        """
        descriptor = describe(target)
        self._guard.check(descriptor)

        shape = self._shapes.match(descriptor)
        if shape is not None:
            return shape.factory()

        if descriptor.is_interface:
            raise UnsupportedInterface(
                f"cannot instantiate unknown interface: {descriptor.name}",
                type_name=descriptor.name,
            )

        key = type_key(descriptor)
        cached = self._cache.get(key)
        if cached is not None:
            return self._replay(descriptor, cached)

        instance, resolved = self._resolve(descriptor)
        self._cache.put(key, resolved)
        self._log_resolution(descriptor, resolved)
        return instance

    def _replay(self, descriptor: TypeDescriptor, resolved: ResolvedConstructor) -> object:
        constructor = resolved.constructor
        if constructor is None:
            if not self._unsafe.enabled:
                raise NoConstructorFound(
                    f"no constructor found to instantiate {descriptor.name}",
                    type_name=descriptor.name,
                )
            try:
                return descriptor.allocate()
            except Exception as exc:
                raise NoConstructorFound(
                    f"could not instantiate {descriptor.name}", type_name=descriptor.name
                ) from exc

        args = self._coercer.fill_args(constructor.parameter_types, bool(resolved.use_null_args))
        try:
            return constructor.invoke(args)
        except Exception as exc:
            # The cached constructor succeeded once already for this type.
            raise NoConstructorFound(
                f"could not instantiate {descriptor.name}", type_name=descriptor.name
            ) from exc

    def _resolve(self, descriptor: TypeDescriptor) -> _Attempt:
        candidates = descriptor.declared_constructors()

        for candidate in candidates:
            if candidate.visibility is Visibility.PUBLIC and candidate.arity == 0:
                attempt = self._try(descriptor, candidate, ArgumentPolicy.NULL_PREFERRING)
                if attempt is not None:
                    return attempt

        if not candidates:
            allocated = self._allocate_raw(descriptor)
            if allocated is not None:
                return allocated
            raise NoConstructorFound(
                f"cannot instantiate {descriptor.name}: primitive, interface, array or void",
                type_name=descriptor.name,
            )

        ranked = rank_constructors(candidates)
        for candidate in ranked:
            with suppress(Exception):
                candidate.make_accessible()
            attempt = self._try(descriptor, candidate, ArgumentPolicy.NULL_PREFERRING)
            if attempt is not None:
                return attempt

        for candidate in ranked:
            try:
                granted = candidate.make_accessible()
            except Exception:  # noqa: BLE001
                continue
            if not granted:
                continue
            attempt = self._try(descriptor, candidate, ArgumentPolicy.POPULATE)
            if attempt is not None:
                return attempt

        allocated = self._allocate_raw(descriptor)
        if allocated is not None:
            return allocated
        raise NoConstructorFound(
            f"could not instantiate {descriptor.name} using any constructor",
            type_name=descriptor.name,
        )

    def _try(
        self,
        descriptor: TypeDescriptor,
        candidate: ConstructorCandidate,
        policy: ArgumentPolicy,
    ) -> _Attempt | None:
        args = self._coercer.fill_args(candidate.parameter_types, policy.prefer_empty)
        try:
            instance = candidate.invoke(args)
        except Exception as exc:  # noqa: BLE001
            self._logger.debug(
                "graphmeta_constructor_trial_failed",
                type_name=descriptor.name,
                constructor=candidate.label,
                parameter_types=[param.name for param in candidate.parameter_types],
                policy=policy.value,
                error=repr(exc),
            )
            return None
        return instance, ResolvedConstructor(candidate, policy.prefer_empty)

    def _allocate_raw(self, descriptor: TypeDescriptor) -> _Attempt | None:
        if not self._unsafe.enabled:
            return None
        try:
            instance = descriptor.allocate()
        except Exception as exc:  # noqa: BLE001
            self._logger.debug(
                "graphmeta_constructor_trial_failed",
                type_name=descriptor.name,
                constructor=None,
                policy=None,
                error=repr(exc),
            )
            return None
        self._logger.warning("graphmeta_raw_allocation", type_name=descriptor.name)
        return instance, ResolvedConstructor(None, None)

    def _log_resolution(self, descriptor: TypeDescriptor, resolved: ResolvedConstructor) -> None:
        constructor = resolved.constructor
        policy = resolved.policy
        self._logger.info(
            "graphmeta_constructor_resolved",
            type_name=descriptor.name,
            strategy="raw_allocation" if constructor is None else "constructor",
            constructor=None if constructor is None else constructor.label,
            arity=None if constructor is None else constructor.arity,
            policy=None if policy is None else policy.value,
        )


__all__ = [
    "ConstructorResolver",
    "rank_constructors",
]
