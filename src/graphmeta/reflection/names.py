"""Resolve wire type names to Python classes."""

from __future__ import annotations

import datetime
import enum
import importlib
from typing import Final

_ALIASES: Final[dict[str, type]] = {
    "string": str,
    "boolean": bool,
    "char": str,
    "byte": int,
    "short": int,
    "int": int,
    "long": int,
    "float": float,
    "double": float,
    "date": datetime.datetime,
    "class": type,
}


def type_for_name(name: str | None) -> type | None:
    """Return the class named by ``name``, or ``None`` when it cannot be resolved.

    Short wire aliases (``string``, ``long``, ``date`` ...) are checked first,
    then ``module.Qualified.Name`` paths are imported, trying successively
    shorter module prefixes so nested classes resolve.
    """
    if not name:
        return None
    text = name.strip()
    alias = _ALIASES.get(text)
    if alias is not None:
        return alias
    if "." not in text:
        text = f"builtins.{text}"

    parts = text.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = importlib.import_module(module_name)
        except (ImportError, ValueError):
            continue
        resolved: object = module
        for attr in parts[split:]:
            resolved = getattr(resolved, attr, None)
            if resolved is None:
                break
        if isinstance(resolved, type):
            return resolved
    return None


def enum_type_of(cls: type) -> type[enum.Enum] | None:
    """Return the enum class for an enum type or for a class nested in one."""
    if isinstance(cls, enum.EnumMeta):
        return cls
    qualname = cls.__qualname__
    if "." not in qualname:
        return None
    enclosing = type_for_name(f"{cls.__module__}.{qualname.rsplit('.', 1)[0]}")
    if enclosing is not None and isinstance(enclosing, enum.EnumMeta):
        return enclosing
    return None


__all__ = [
    "enum_type_of",
    "type_for_name",
]
