"""Binding context and the factory that builds one per request."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from docbind.bindings.attribute import BindingAttribute
from docbind.bindings.cache import ServiceCache
from docbind.bindings.resolver import NameResolver, expand_references, resolve_connection_string
from docbind.exceptions import ConfigurationError
from docbind.services.base import DocumentService

DEFAULT_TRACE = logging.getLogger("docbind.trace")


@dataclass(frozen=True, slots=True)
class BindingContext:
    """Everything a binding strategy needs for one request."""

    service: DocumentService
    resolved_attribute: BindingAttribute
    trace: Any = DEFAULT_TRACE
    connection_string: str = field(default="", repr=False)


class ContextFactory:
    """Resolve the connection, fetch the shared service, package a fresh context."""

    def __init__(
        self,
        cache: ServiceCache,
        *,
        configured_default: str | None = None,
        process_default: str | None = None,
        name_resolver: NameResolver | None = None,
        trace: Any = None,
    ) -> None:
        self._cache = cache
        self._configured_default = configured_default or ""
        self._process_default = process_default or ""
        self._name_resolver = name_resolver
        self._trace = trace if trace is not None else DEFAULT_TRACE

    @property
    def cache(self) -> ServiceCache:
        return self._cache

    def resolve_connection_string(self, attribute_override: str | None) -> str:
        """Pick the effective connection string and expand ``${NAME}`` references."""
        resolved = resolve_connection_string(attribute_override, self._configured_default, self._process_default)
        if resolved and self._name_resolver is not None:
            resolved = expand_references(resolved, self._name_resolver)
        return resolved

    def get_service(self, connection_string: str) -> DocumentService:
        return self._cache.get_or_create(connection_string)

    def require_connection_string(self, attribute: BindingAttribute) -> str:
        """Resolve and expand the attribute's connection string; empty is an error."""
        connection_string = self.resolve_connection_string(attribute.connection)
        if not connection_string:
            raise ConfigurationError(
                "No connection string resolved for binding "
                f"'{attribute.database_name}/{attribute.collection_name}'. "
                "Check the attribute connection and the setting it references."
            )
        return connection_string

    def create_context(self, attribute: BindingAttribute) -> BindingContext:
        connection_string = self.require_connection_string(attribute)
        return self._package(attribute, connection_string, self.get_service(connection_string))

    async def create_context_async(self, attribute: BindingAttribute) -> BindingContext:
        connection_string = self.require_connection_string(attribute)
        service = await self._cache.get_or_create_async(connection_string)
        return self._package(attribute, connection_string, service)

    def _package(
        self, attribute: BindingAttribute, connection_string: str, service: DocumentService
    ) -> BindingContext:
        return BindingContext(
            service=service,
            resolved_attribute=attribute,
            trace=self._trace,
            connection_string=connection_string,
        )
