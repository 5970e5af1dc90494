"""Layered configuration: docbind.yaml, then DOCBIND_* variables, then runtime overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from docbind.config.models import DocBindConfig

CONFIG_PATH_ENV = "DOCBIND_CONFIG"


class ConfigLoadError(ValueError):
    """Raised when a configuration file cannot be parsed."""


class YAMLConfigLoader:
    """Locate and read docbind.yaml."""

    DEFAULT_FILENAME = "docbind.yaml"

    @classmethod
    def resolve_path(cls, cli_path: str | None = None) -> Path:
        """``DOCBIND_CONFIG`` wins over an explicit path; the cwd default comes last."""
        for candidate in (os.environ.get(CONFIG_PATH_ENV, ""), cli_path or ""):
            if candidate.strip():
                return Path(candidate.strip())
        return Path.cwd() / cls.DEFAULT_FILENAME

    @classmethod
    def load_dict(cls, path: str | Path | None = None) -> dict[str, Any]:
        """Read the file as a mapping; a missing or blank file is an empty mapping."""
        target = cls.resolve_path() if path is None else Path(path)
        if not target.is_file():
            return {}
        try:
            data = yaml.safe_load(target.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            where = f"{target}:{mark.line + 1}:{mark.column + 1}" if mark is not None else str(target)
            raise ConfigLoadError(f"Invalid YAML at {where}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Config root must be mapping: {target}")
        return data


def merge_layers(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge mappings left to right; nested mappings merge, anything else is replaced."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, Mapping):
                merged[key] = merge_layers(current, value)
            else:
                merged[key] = value
    return merged


def _parse_env_value(raw: str) -> Any:
    text = raw.strip()
    if text.lower() not in {"true", "false"} and text[:1] not in {"[", "{"}:
        return raw
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return raw


def environment_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Turn ``DOCBIND_A__B=value`` variables into ``{"a": {"b": value}}``.

    Field names are matched case-insensitively. Names under ``secrets`` keep
    their case and their raw string value since they back ``${NAME}`` lookups.
    """
    source = os.environ if environ is None else environ
    prefix = str(DocBindConfig.model_config.get("env_prefix", "DOCBIND_"))
    delimiter = str(DocBindConfig.model_config.get("env_nested_delimiter", "__"))
    overrides: dict[str, Any] = {}
    for name, raw in source.items():
        if not name.upper().startswith(prefix) or name == CONFIG_PATH_ENV:
            continue
        parts = [part for part in name[len(prefix) :].split(delimiter) if part]
        if not parts:
            continue
        path = [parts[0].lower()]
        if path[0] == "secrets":
            if len(parts) != 2:
                continue
            path.append(parts[1])
            value: Any = raw
        else:
            path.extend(part.lower() for part in parts[1:])
            value = _parse_env_value(raw)
        layer: dict[str, Any] = {path[-1]: value}
        for key in reversed(path[:-1]):
            layer = {key: layer}
        overrides = merge_layers(overrides, layer)
    return overrides


def load_config(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> DocBindConfig:
    """Build the effective configuration from file, environment and explicit overrides."""
    file_layer = YAMLConfigLoader.load_dict(config_path)
    return DocBindConfig.model_validate(merge_layers(file_layer, environment_overrides(), overrides or {}))
