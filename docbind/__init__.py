"""docbind: declarative document-store bindings with a create-once service cache."""

from docbind.bindings import (
    BindingAttribute,
    BindingContext,
    BindingDispatcher,
    BindingStrategy,
    ContextFactory,
    DocumentArray,
    DocumentCollector,
    EnvironmentNameResolver,
    ParameterShape,
    ServiceCache,
    classify_parameter_type,
    resolve_connection_string,
    validate_connection,
    validate_input_binding,
)
from docbind.config import DocBindConfig, load_config
from docbind.exceptions import (
    ConfigurationError,
    DocBindError,
    ServiceConstructionError,
    ShapeValidationError,
    UnknownBindingShapeError,
)
from docbind.extension import BindingRule, DocumentBindingExtension

__all__ = [
    "BindingAttribute",
    "BindingContext",
    "BindingDispatcher",
    "BindingRule",
    "BindingStrategy",
    "ConfigurationError",
    "ContextFactory",
    "DocBindConfig",
    "DocBindError",
    "DocumentArray",
    "DocumentBindingExtension",
    "DocumentCollector",
    "EnvironmentNameResolver",
    "ParameterShape",
    "ServiceCache",
    "ServiceConstructionError",
    "ShapeValidationError",
    "UnknownBindingShapeError",
    "classify_parameter_type",
    "load_config",
    "resolve_connection_string",
    "validate_connection",
    "validate_input_binding",
]
