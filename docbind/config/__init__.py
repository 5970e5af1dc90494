"""Configuration system for docbind."""

from docbind.config.loader import (
    ConfigLoadError,
    YAMLConfigLoader,
    environment_overrides,
    load_config,
    merge_layers,
)
from docbind.config.models import DEFAULT_CONNECTION_STRING_SETTING, DocBindConfig, LoggingConfig

__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONNECTION_STRING_SETTING",
    "DocBindConfig",
    "LoggingConfig",
    "YAMLConfigLoader",
    "environment_overrides",
    "load_config",
    "merge_layers",
]
