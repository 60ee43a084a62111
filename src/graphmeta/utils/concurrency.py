"""Thread-safe primitives backing the process-wide metadata stores."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoStore(Generic[K, V]):
    """Unbounded lock-protected memo map.

    Entries are written once per key in practice. Two threads computing the
    same key concurrently may both store a value; the last write wins, which
    is fine for values that are pure functions of the key.
    """

    __slots__ = ("_entries", "_lock", "_name")

    def __init__(self, name: str = "memo") -> None:
        self._name = name
        self._lock = threading.Lock()
        self._entries: dict[K, V] = {}

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = value

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        # compute runs outside the lock so a slow key never blocks other keys.
        existing = self.get(key)
        if existing is not None:
            return existing
        value = compute(key)
        self.put(key, value)
        return value

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def snapshot(self) -> dict[str, int]:
        return {"entries": len(self)}


class AtomicFlag:
    """Process-wide boolean capability toggled by explicit enable/disable calls."""

    __slots__ = ("_lock", "_value")

    def __init__(self, initial: bool = False) -> None:
        self._lock = threading.Lock()
        self._value = bool(initial)

    def enable(self) -> None:
        self.set(True)

    def disable(self) -> None:
        self.set(False)

    def set(self, state: bool) -> None:
        with self._lock:
            self._value = bool(state)

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._value

    def __bool__(self) -> bool:
        return self.enabled


__all__ = [
    "AtomicFlag",
    "MemoStore",
]
