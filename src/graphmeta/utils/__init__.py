"""Utility exports for thread-safe stores and flags."""

from graphmeta.utils.concurrency import AtomicFlag, MemoStore

__all__ = [
    "AtomicFlag",
    "MemoStore",
]
