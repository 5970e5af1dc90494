"""Connection-string resolution for declarative bindings."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Protocol

from docbind.exceptions import ConfigurationError

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def resolve_connection_string(
    attribute_override: str | None,
    configured_default: str | None,
    process_default: str | None,
) -> str:
    """Return the first non-empty of override, configured default, process default."""
    for candidate in (attribute_override, configured_default, process_default):
        if candidate:
            return candidate
    return ""


class NameResolver(Protocol):
    """Resolve a setting name to its value, or ``None`` when unset."""

    def resolve(self, name: str) -> str | None: ...


class EnvironmentNameResolver:
    """Resolve setting names from the environment, a .env file, then config secrets."""

    def __init__(self, env_file: Path | str | None = None, config_secrets: dict[str, str] | None = None) -> None:
        self._env_file = Path(env_file) if env_file else None
        self._config_secrets = config_secrets or {}
        self._env_file_values = self._load_env_file(self._env_file)

    def resolve(self, name: str) -> str | None:
        if name in os.environ:
            return os.environ[name]
        if name in self._env_file_values:
            return self._env_file_values[name]
        return self._config_secrets.get(name)

    def expand(self, value: str) -> str:
        """Replace ``${NAME}`` references; a missing name is a configuration error."""
        return expand_references(value, self)

    @staticmethod
    def _load_env_file(path: Path | None) -> dict[str, str]:
        if path is None or not path.exists():
            return {}
        values: dict[str, str] = {}
        for line in path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or "=" not in stripped:
                continue
            key, raw_value = stripped.split("=", 1)
            values[key.strip()] = raw_value.strip().strip("'\"")
        return values


def expand_references(value: str, name_resolver: NameResolver) -> str:
    """Expand ``${NAME}`` references in a connection string through a name resolver."""

    def _replace(match: re.Match[str]) -> str:
        var_name = match.group(1)
        resolved = name_resolver.resolve(var_name)
        if resolved is None:
            raise ConfigurationError(
                f"Missing connection reference: {var_name}. "
                "Set it in the environment, the .env file, or docbind.yaml secrets."
            )
        return resolved

    return ENV_VAR_PATTERN.sub(_replace, value)
