"""
graphmeta config package public API.

File: src/graphmeta/config/__init__.py
Last updated: 2026-10-18

Purpose
- Export config loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``graphmeta.toml`` + ``GRAPHMETA_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from graphmeta.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    env_name_for,
    load_config,
)
from graphmeta.config.schema import (
    DEFAULT_CONFIG,
    ConfigValidationError,
    ConfigValidationIssue,
    GraphMetaConfig,
    InstantiationConfig,
    assert_valid_config,
    default_config,
    merge_config,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "GraphMetaConfig",
    "InstantiationConfig",
    "assert_valid_config",
    "default_config",
    "dump_effective_config",
    "env_name_for",
    "load_config",
    "merge_config",
    "validate_config",
]
