"""Binding extension: registration-time gates and per-request binding."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from docbind.bindings.attribute import BindingAttribute
from docbind.bindings.cache import ServiceCache
from docbind.bindings.context import BindingContext, ContextFactory
from docbind.bindings.dispatcher import BindingDispatcher, BindingStrategy
from docbind.bindings.resolver import EnvironmentNameResolver, NameResolver
from docbind.bindings.shapes import ParameterShape
from docbind.bindings.validator import SELECTOR_VALIDATED_SHAPES, validate_connection, validate_input_binding
from docbind.config.loader import load_config
from docbind.config.models import DocBindConfig
from docbind.services.base import ServiceFactory
from docbind.services.cosmos import CosmosServiceFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BindingRule:
    """A validated binding: attribute, target type and the strategy that serves it."""

    attribute: BindingAttribute
    declared_type: Any
    shape: ParameterShape
    strategy: BindingStrategy
    context_factory: ContextFactory

    async def bind(self) -> Any:
        """Create a fresh context and produce the runtime value."""
        context = await self.context_factory.create_context_async(self.attribute)
        return await self.strategy.bind(context, self.declared_type)


class DocumentBindingExtension:
    """Wires resolver, cache, validator and dispatcher for one host.

    The service cache is injected so several extensions (or tests) can share
    or isolate it; it is never a module-level singleton.
    """

    def __init__(
        self,
        config: DocBindConfig | None = None,
        *,
        name_resolver: NameResolver | None = None,
        service_factory: ServiceFactory | None = None,
        service_cache: ServiceCache | None = None,
        dispatcher: BindingDispatcher | None = None,
        trace: Any = None,
    ) -> None:
        self._config = config if config is not None else load_config()
        self._name_resolver = name_resolver or EnvironmentNameResolver(
            env_file=Path(self._config.env_file) if self._config.env_file else None,
            config_secrets=self._config.secrets,
        )
        if service_cache is None:
            service_cache = ServiceCache(service_factory if service_factory is not None else CosmosServiceFactory())
        self._cache = service_cache
        self._dispatcher = dispatcher
        self._trace = trace
        self._default_connection_string: str | None = None
        self._context_factory: ContextFactory | None = None

    @property
    def config(self) -> DocBindConfig:
        return self._config

    @property
    def service_cache(self) -> ServiceCache:
        return self._cache

    @property
    def default_connection_string(self) -> str:
        self._ensure_initialized()
        return self._default_connection_string or ""

    def initialize(self) -> None:
        """Resolve the process-wide default once and build the dispatcher."""
        setting = self._config.connection_string_setting
        self._default_connection_string = self._name_resolver.resolve(setting) or ""
        if self._dispatcher is None:
            self._dispatcher = BindingDispatcher.default()
        self._context_factory = ContextFactory(
            self._cache,
            configured_default=self._config.connection_string,
            process_default=self._default_connection_string,
            name_resolver=self._name_resolver,
            trace=self._trace,
        )
        logger.debug(
            "binding extension initialized (setting=%s, process default %s)",
            setting,
            "set" if self._default_connection_string else "unset",
        )

    def _ensure_initialized(self) -> ContextFactory:
        if self._context_factory is None:
            self.initialize()
        assert self._context_factory is not None
        return self._context_factory

    def validate_connection(self, attribute: BindingAttribute) -> None:
        self._ensure_initialized()
        validate_connection(
            attribute,
            self._config.connection_string,
            self._default_connection_string,
            setting_name=self._config.connection_string_setting,
        )

    def validate_binding(self, attribute: BindingAttribute, shape: ParameterShape) -> None:
        """Run every registration-time gate for an attribute and shape."""
        factory = self._ensure_initialized()
        self.validate_connection(attribute)
        if shape in SELECTOR_VALIDATED_SHAPES:
            validate_input_binding(attribute, shape)
        # unresolvable or empty ${NAME} references fail here, not per request
        factory.require_connection_string(attribute)

    def register_binding(self, attribute: BindingAttribute, declared_type: Any) -> BindingRule:
        """Classify, validate and attach a strategy; raises before any I/O."""
        factory = self._ensure_initialized()
        assert self._dispatcher is not None
        shape, strategy = self._dispatcher.select(declared_type)
        self.validate_binding(attribute, shape)
        logger.debug(
            "registered %s binding for %s/%s", shape.value, attribute.database_name, attribute.collection_name
        )
        return BindingRule(
            attribute=attribute,
            declared_type=declared_type,
            shape=shape,
            strategy=strategy,
            context_factory=factory,
        )

    def resolve_connection_string(self, attribute_override: str | None) -> str:
        return self._ensure_initialized().resolve_connection_string(attribute_override)

    def get_service(self, connection_string: str) -> Any:
        return self._cache.get_or_create(connection_string)

    def create_context(self, attribute: BindingAttribute) -> BindingContext:
        return self._ensure_initialized().create_context(attribute)

    def bind_for_client(self, attribute: BindingAttribute) -> Any:
        """Return the shared SDK client for the attribute's connection."""
        return self.create_context(attribute).service.get_client()
