"""Redaction helpers for connection strings in logs and error messages."""

from __future__ import annotations

import logging
import re
from typing import Any

_SENSITIVE_KEYS = ("accountkey", "sharedaccesskey", "password", "pwd", "token", "secret")
_CONNECTION_SECRET_PATTERN = re.compile(
    r"(?i)\b(AccountKey|SharedAccessKey|SharedAccessSignature|Password|Pwd)\s*=\s*([^;]+)"
)
_KEY_VALUE_PATTERN = re.compile(r"(?i)\b(token|api[_-]?key|secret)\b\s*([:=])\s*([^\s,;]+)")


def redact_connection_string(value: str) -> str:
    """Mask key material in a ``Key=Value;`` style connection string."""
    redacted = _CONNECTION_SECRET_PATTERN.sub(lambda match: f"{match.group(1)}=***", value)
    return _KEY_VALUE_PATTERN.sub(lambda match: f"{match.group(1)}{match.group(2)}***", redacted)


def redact_sensitive_data(value: Any) -> Any:
    """Recursively redact sensitive fields from nested data."""
    if isinstance(value, dict):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            key_lower = str(key).lower()
            if any(marker in key_lower for marker in _SENSITIVE_KEYS):
                redacted[key] = "***"
                continue
            redacted[key] = redact_sensitive_data(item)
        return redacted
    if isinstance(value, list):
        return [redact_sensitive_data(item) for item in value]
    if isinstance(value, tuple):
        return tuple(redact_sensitive_data(item) for item in value)
    if isinstance(value, str):
        return redact_connection_string(value)
    return value


class SensitiveDataLogFilter(logging.Filter):
    """Logging filter that redacts connection secrets from messages and arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, (tuple, dict)) and record.args:
            safe_args = redact_sensitive_data(record.args)
            try:
                rendered = str(record.msg) % safe_args
            except (TypeError, ValueError):
                rendered = f"{record.msg} {safe_args!r}"
            record.msg = redact_connection_string(rendered)
            record.args = ()
        else:
            record.msg = redact_connection_string(str(record.msg))
        return True
