"""Logging setup for the docbind CLI and embedding hosts."""

from __future__ import annotations

import logging

from docbind.config.models import LoggingConfig
from docbind.security import SensitiveDataLogFilter

_HANDLER_NAME = "docbind-console"


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Attach a single console handler to the ``docbind`` logger."""
    cfg = config or LoggingConfig()
    root = logging.getLogger("docbind")
    root.setLevel(cfg.level.upper())
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(cfg.format))
    if cfg.redact_secrets:
        handler.addFilter(SensitiveDataLogFilter())
    root.addHandler(handler)
    return root
