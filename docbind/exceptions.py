"""Binding-related exceptions for docbind.

Messages never carry account keys; connection strings are redacted before
they are embedded.
"""

from __future__ import annotations

from collections.abc import Sequence


class DocBindError(Exception):
    """Base exception for binding operations."""

    pass


class ConfigurationError(DocBindError):
    """Raised when no usable connection string can be resolved."""

    pass


class ShapeValidationError(DocBindError):
    """Raised when attribute fields are incompatible with the parameter shape."""

    def __init__(self, rule: str, fields: Sequence[str], message: str) -> None:
        self.rule = rule
        self.fields = tuple(fields)
        super().__init__(message)


class ServiceConstructionError(DocBindError):
    """Raised when the service factory fails to build a handle for a key."""

    def __init__(self, connection_string: str, message: str) -> None:
        self.connection_string = connection_string
        super().__init__(f"Failed to create document service for '{connection_string}': {message}")


class UnknownBindingShapeError(DocBindError):
    """Raised when no strategy is registered for a parameter shape."""

    def __init__(self, shape: str, available: Sequence[str]) -> None:
        self.shape = shape
        supported = ", ".join(sorted(available)) or "<none>"
        super().__init__(f"Unknown binding shape '{shape}'. Available shapes: {supported}")
