"""Shared doubles for construction tests: counted factories and a recording logger."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


class Built:
    """Instance produced by registered test constructors."""

    def __init__(self, label: str, args: tuple[object, ...]) -> None:
        self.label = label
        self.args = args


@dataclass
class InvocationLog:
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)

    def factory(
        self,
        label: str,
        *,
        fail: bool = False,
        reject_none: bool = False,
    ) -> Callable[..., Built]:
        def build(*args: object) -> Built:
            self.calls.append((label, args))
            if fail:
                raise ValueError(f"{label} always fails")
            if reject_none and any(arg is None for arg in args):
                raise ValueError(f"{label} rejects None arguments")
            return Built(label, args)

        return build

    def count(self, label: str | None = None) -> int:
        if label is None:
            return len(self.calls)
        return sum(1 for called, _ in self.calls if called == label)

    def labels(self) -> list[str]:
        return [label for label, _ in self.calls]


@dataclass
class RecordingLogger:
    events: list[tuple[str, str, dict[str, Any]]] = field(default_factory=list)

    def _record(self, level: str, event: str, **fields: Any) -> None:
        self.events.append((level, event, fields))

    def debug(self, event: str, **fields: Any) -> None:
        self._record("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self._record("info", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._record("warning", event, **fields)

    def named(self, event: str) -> list[dict[str, Any]]:
        return [fields for _, name, fields in self.events if name == event]
