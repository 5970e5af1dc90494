from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from docbind.bindings import (
    RULE_AMBIGUOUS_SELECTOR,
    RULE_ID_ON_SEQUENCE,
    RULE_ID_REQUIRED,
    BindingAttribute,
    ParameterShape,
    validate_connection,
    validate_input_binding,
)
from docbind.exceptions import ConfigurationError, ShapeValidationError

_selector = st.text(min_size=1, max_size=16)


@given(shape=st.sampled_from(list(ParameterShape)), doc_id=_selector, query=_selector)
def test_property_id_and_query_rejected_for_every_shape(shape: ParameterShape, doc_id: str, query: str) -> None:
    attribute = BindingAttribute(database_name="db", collection_name="c", id=doc_id, sql_query=query)
    with pytest.raises(ShapeValidationError) as exc_info:
        validate_input_binding(attribute, shape)
    assert exc_info.value.rule == RULE_AMBIGUOUS_SELECTOR
    assert exc_info.value.fields == ("id", "sql_query")


def test_id_only_singular_passes() -> None:
    validate_input_binding(BindingAttribute(id="42"), ParameterShape.SINGULAR)


def test_id_and_query_rejected_with_message_naming_both_fields() -> None:
    with pytest.raises(ShapeValidationError, match="'sql_query' and 'id'"):
        validate_input_binding(BindingAttribute(id="42", sql_query="SELECT *"), ParameterShape.SINGULAR)


def test_id_on_sequence_rejected() -> None:
    with pytest.raises(ShapeValidationError) as exc_info:
        validate_input_binding(BindingAttribute(id="42"), ParameterShape.SEQUENCE)
    assert exc_info.value.rule == RULE_ID_ON_SEQUENCE
    assert "sequence" in str(exc_info.value)


def test_singular_without_selector_rejected() -> None:
    with pytest.raises(ShapeValidationError) as exc_info:
        validate_input_binding(BindingAttribute(), ParameterShape.SINGULAR)
    assert exc_info.value.rule == RULE_ID_REQUIRED


def test_sequence_without_selector_passes() -> None:
    validate_input_binding(BindingAttribute(), ParameterShape.SEQUENCE)


def test_singular_with_query_only_passes() -> None:
    validate_input_binding(BindingAttribute(sql_query="SELECT * FROM c"), ParameterShape.SINGULAR)


def test_empty_strings_count_as_unset() -> None:
    validate_input_binding(BindingAttribute(id="", sql_query="SELECT * FROM c"), ParameterShape.SEQUENCE)


def test_connection_gate_rejects_when_everything_empty() -> None:
    with pytest.raises(ConfigurationError, match="AzureWebJobsCosmosDBConnectionString"):
        validate_connection(BindingAttribute(), "", None)


@pytest.mark.parametrize(
    ("override", "configured", "process_default"),
    [("conn", "", ""), (None, "conn", None), (None, None, "conn")],
)
def test_connection_gate_accepts_any_tier(
    override: str | None, configured: str | None, process_default: str | None
) -> None:
    validate_connection(BindingAttribute(connection=override), configured, process_default)


def test_connection_gate_names_custom_setting() -> None:
    with pytest.raises(ConfigurationError, match="MY_SETTING"):
        validate_connection(BindingAttribute(), None, None, setting_name="MY_SETTING")
