"""Configuration loading and schema.

- YAML-first configuration under configs/*.yaml
- Strict ${ENV_VAR} expansion (missing/empty env vars are errors)
- Typed, validated sections built from the raw mapping
"""

from __future__ import annotations

from gitversion_report.config.loader import DEFAULT_CONFIG_PATH, load_config, resolve_config_paths
from gitversion_report.config.model import (
    AppConfig,
    AppSection,
    GitConfig,
    LoggingConfig,
    ReportConfig,
    VersionConfig,
    build_app_config,
)
from gitversion_report.errors import ConfigError

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AppConfig",
    "AppSection",
    "ConfigError",
    "GitConfig",
    "LoggingConfig",
    "ReportConfig",
    "VersionConfig",
    "build_app_config",
    "load_config",
    "resolve_config_paths",
]
