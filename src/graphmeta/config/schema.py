"""
graphmeta — configuration schema and validation.

File: src/graphmeta/config/schema.py
Last updated: 2026-10-18

Purpose
- Define the built-in defaults and strict validation of the ``[instantiation]``
  table.

Functional requirements
- Validate config payloads and return structured issues (field path + message).
- Reject unknown keys so typos do not silently fall back to defaults.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, TypedDict

from graphmeta.constants import CONFIG_TABLE
from graphmeta.domain.errors import ConfigLoadError


class InstantiationConfig(TypedDict):
    allow_unsafe_allocation: bool
    extra_forbidden_types: list[str]


class GraphMetaConfig(TypedDict):
    instantiation: InstantiationConfig


DEFAULT_CONFIG: Final[GraphMetaConfig] = {
    "instantiation": {
        "allow_unsafe_allocation": False,
        "extra_forbidden_types": [],
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


class ConfigValidationError(ConfigLoadError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


def default_config() -> GraphMetaConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto a copy of ``base``."""

    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key in sorted(overlay):
        value = overlay[key]
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_config(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def validate_config(config: Mapping[str, object] | object) -> tuple[ConfigValidationIssue, ...]:
    """Return every validation issue found in ``config``; empty means valid."""

    issues: list[ConfigValidationIssue] = []
    if not isinstance(config, Mapping):
        return (ConfigValidationIssue("<root>", "config root must be an object"),)

    for key in sorted(config):
        if key != CONFIG_TABLE:
            issues.append(ConfigValidationIssue(str(key), "unknown key"))

    section = config.get(CONFIG_TABLE)
    if not isinstance(section, Mapping):
        issues.append(ConfigValidationIssue(CONFIG_TABLE, "section must be an object"))
        return tuple(issues)

    allowed = set(InstantiationConfig.__annotations__)
    for key in sorted(section):
        if key not in allowed:
            issues.append(ConfigValidationIssue(f"{CONFIG_TABLE}.{key}", "unknown key"))

    unsafe = section.get("allow_unsafe_allocation")
    if not isinstance(unsafe, bool):
        issues.append(
            ConfigValidationIssue(f"{CONFIG_TABLE}.allow_unsafe_allocation", "must be a boolean")
        )

    extra = section.get("extra_forbidden_types")
    path = f"{CONFIG_TABLE}.extra_forbidden_types"
    if not isinstance(extra, list):
        issues.append(ConfigValidationIssue(path, "must be a list of qualified type names"))
    else:
        for index, name in enumerate(extra):
            if not isinstance(name, str) or not name.strip():
                issues.append(
                    ConfigValidationIssue(f"{path}[{index}]", "must be a non-empty string")
                )

    return tuple(issues)


def assert_valid_config(config: Mapping[str, object] | object) -> GraphMetaConfig:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    issues = validate_config(config)
    if issues:
        raise ConfigValidationError(issues)
    section: Mapping[str, Any] = config[CONFIG_TABLE]  # type: ignore[index]
    return {
        "instantiation": {
            "allow_unsafe_allocation": bool(section["allow_unsafe_allocation"]),
            "extra_forbidden_types": [name.strip() for name in section["extra_forbidden_types"]],
        },
    }


__all__ = [
    "DEFAULT_CONFIG",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "GraphMetaConfig",
    "InstantiationConfig",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "validate_config",
]
