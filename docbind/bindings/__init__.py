"""Declarative bindings: attributes, resolution, caching, validation, dispatch."""

from docbind.bindings.attribute import BindingAttribute, parse_binding_attribute, validate_binding_attribute
from docbind.bindings.cache import ServiceCache
from docbind.bindings.collector import DocumentCollector
from docbind.bindings.context import BindingContext, ContextFactory
from docbind.bindings.dispatcher import BindingDispatcher, BindingStrategy
from docbind.bindings.resolver import (
    EnvironmentNameResolver,
    NameResolver,
    expand_references,
    resolve_connection_string,
)
from docbind.bindings.shapes import DocumentArray, ParameterShape, classify_parameter_type
from docbind.bindings.strategies import (
    ArrayBindingStrategy,
    ClientBindingStrategy,
    CollectorBindingStrategy,
    EnumerableBindingStrategy,
    ItemBindingStrategy,
    default_strategies,
)
from docbind.bindings.validator import (
    RULE_AMBIGUOUS_SELECTOR,
    RULE_ID_ON_SEQUENCE,
    RULE_ID_REQUIRED,
    SELECTOR_VALIDATED_SHAPES,
    validate_connection,
    validate_input_binding,
)

__all__ = [
    "ArrayBindingStrategy",
    "BindingAttribute",
    "BindingContext",
    "BindingDispatcher",
    "BindingStrategy",
    "ClientBindingStrategy",
    "CollectorBindingStrategy",
    "ContextFactory",
    "DocumentArray",
    "DocumentCollector",
    "EnumerableBindingStrategy",
    "EnvironmentNameResolver",
    "ItemBindingStrategy",
    "NameResolver",
    "ParameterShape",
    "RULE_AMBIGUOUS_SELECTOR",
    "RULE_ID_ON_SEQUENCE",
    "RULE_ID_REQUIRED",
    "SELECTOR_VALIDATED_SHAPES",
    "ServiceCache",
    "classify_parameter_type",
    "default_strategies",
    "expand_references",
    "parse_binding_attribute",
    "resolve_connection_string",
    "validate_binding_attribute",
    "validate_connection",
    "validate_input_binding",
]
