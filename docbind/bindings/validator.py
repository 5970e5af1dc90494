"""Registration-time gates for binding attributes."""

from __future__ import annotations

from docbind.bindings.attribute import BindingAttribute
from docbind.bindings.shapes import ParameterShape
from docbind.config.models import DEFAULT_CONNECTION_STRING_SETTING
from docbind.exceptions import ConfigurationError, ShapeValidationError

RULE_AMBIGUOUS_SELECTOR = "ambiguous-selector"
RULE_ID_ON_SEQUENCE = "id-on-sequence"
RULE_ID_REQUIRED = "id-required"

# shapes that read documents and therefore need a selector check
SELECTOR_VALIDATED_SHAPES = frozenset({ParameterShape.SINGULAR, ParameterShape.SEQUENCE})


def validate_input_binding(attribute: BindingAttribute, shape: ParameterShape) -> None:
    """Reject selector combinations the target shape cannot honour."""
    if attribute.has_id and attribute.has_sql_query:
        raise ShapeValidationError(
            RULE_AMBIGUOUS_SELECTOR,
            ("id", "sql_query"),
            "Ambiguous selector: only one of 'sql_query' and 'id' can be specified.",
        )
    if shape is ParameterShape.SEQUENCE:
        if attribute.has_id:
            raise ShapeValidationError(
                RULE_ID_ON_SEQUENCE,
                ("id",),
                "'id' is not valid for a sequence target; use 'sql_query' or bind the whole collection.",
            )
        return
    if not attribute.has_id and not attribute.has_sql_query:
        raise ShapeValidationError(
            RULE_ID_REQUIRED,
            ("id", "sql_query"),
            f"'id' is required when binding to a {shape.value} target.",
        )


def validate_connection(
    attribute: BindingAttribute,
    configured_default: str | None,
    process_default: str | None,
    setting_name: str = DEFAULT_CONNECTION_STRING_SETTING,
) -> None:
    """Reject bindings that cannot resolve any connection string."""
    if not attribute.connection and not configured_default and not process_default:
        raise ConfigurationError(
            "The document-store connection string must be set either via a "
            f"'{setting_name}' app setting, via the BindingAttribute.connection field "
            "or via DocBindConfig.connection_string."
        )
