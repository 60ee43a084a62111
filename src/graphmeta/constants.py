"""Stable constants shared across the metadata and construction layers."""

from __future__ import annotations

import sys
from typing import Final

# Type distance sentinel for types with no inheritance path between them.
UNRELATED: Final[int] = sys.maxsize

# Field names never reported by the field catalog.
EXCLUDED_SLOT_NAMES: Final[frozenset[str]] = frozenset({"__dict__", "__weakref__"})
ENUM_BOOKKEEPING_FIELDS: Final[frozenset[str]] = frozenset({"_name_", "_value_", "_sort_order_"})

# Separator used when a shadowed ancestor field is renamed.
SHADOWED_FIELD_SEPARATOR: Final[str] = "."

# Qualified names refused regardless of importability on the current platform.
FORBIDDEN_TYPE_NAMES: Final[frozenset[str]] = frozenset(
    {
        "os._wrap_close",
        "subprocess.Popen",
        "asyncio.subprocess.Process",
        "multiprocessing.process.BaseProcess",
    }
)

# Configuration.
DEFAULT_CONFIG_FILE: Final[str] = "graphmeta.toml"
CONFIG_TABLE: Final[str] = "instantiation"
ENV_PREFIX: Final[str] = "GRAPHMETA_"

__all__ = [
    "CONFIG_TABLE",
    "DEFAULT_CONFIG_FILE",
    "ENUM_BOOKKEEPING_FIELDS",
    "ENV_PREFIX",
    "EXCLUDED_SLOT_NAMES",
    "FORBIDDEN_TYPE_NAMES",
    "SHADOWED_FIELD_SEPARATOR",
    "UNRELATED",
]
