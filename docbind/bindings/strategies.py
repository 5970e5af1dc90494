"""Default binding strategies, one per parameter shape."""

from __future__ import annotations

import collections.abc
import inspect
from typing import Any, get_args, get_origin

from pydantic import BaseModel

from docbind.bindings.collector import DocumentCollector
from docbind.bindings.context import BindingContext
from docbind.bindings.dispatcher import BindingStrategy
from docbind.bindings.shapes import DocumentArray, ParameterShape

READ_ALL_QUERY = "SELECT * FROM c"


def _convert(document: dict[str, Any] | None, target: Any) -> Any:
    if document is None:
        return None
    if inspect.isclass(target) and issubclass(target, BaseModel):
        return target.model_validate(document)
    return document


def _element_type(declared_type: Any) -> Any:
    args = get_args(declared_type)
    return args[0] if args else Any


async def _run_query(context: BindingContext, query: str) -> list[dict[str, Any]]:
    attribute = context.resolved_attribute
    return await context.service.query_documents(
        attribute.database_name,
        attribute.collection_name,
        query,
        parameters=attribute.query_parameters() or None,
        partition_key=attribute.partition_key,
    )


class ItemBindingStrategy(BindingStrategy):
    """Single document by id, or the first result of the query."""

    async def bind(self, context: BindingContext, declared_type: Any) -> Any:
        attribute = context.resolved_attribute
        if attribute.has_id:
            document = await context.service.read_document(
                attribute.database_name,
                attribute.collection_name,
                str(attribute.id),
                partition_key=attribute.partition_key,
            )
        else:
            matches = await _run_query(context, str(attribute.sql_query))
            document = matches[0] if matches else None
        if document is None:
            context.trace.info(
                "no document matched binding for %s/%s", attribute.database_name, attribute.collection_name
            )
        return _convert(document, declared_type)


class EnumerableBindingStrategy(BindingStrategy):
    """Every document matching the query, or the whole collection."""

    async def bind(self, context: BindingContext, declared_type: Any) -> Any:
        attribute = context.resolved_attribute
        documents = await _run_query(context, attribute.sql_query or READ_ALL_QUERY)
        element_type = _element_type(declared_type)
        converted = [_convert(document, element_type) for document in documents]
        if get_origin(declared_type) is collections.abc.Iterator:
            return iter(converted)
        return converted


class ClientBindingStrategy(BindingStrategy):
    """Hands out the shared SDK client."""

    async def bind(self, context: BindingContext, declared_type: Any) -> Any:
        return context.service.get_client()


class ArrayBindingStrategy(BindingStrategy):
    """Query results as raw JSON documents."""

    async def bind(self, context: BindingContext, declared_type: Any) -> DocumentArray:
        attribute = context.resolved_attribute
        return DocumentArray(await _run_query(context, attribute.sql_query or READ_ALL_QUERY))


class CollectorBindingStrategy(BindingStrategy):
    """Output sink writing through the shared service."""

    async def bind(self, context: BindingContext, declared_type: Any) -> DocumentCollector[Any]:
        attribute = context.resolved_attribute
        if attribute.create_if_not_exists:
            await context.service.create_database_and_collection_if_not_exists(
                attribute.database_name,
                attribute.collection_name,
                partition_key_path=attribute.partition_key,
                throughput=attribute.collection_throughput,
            )
        return DocumentCollector(context)


def default_strategies() -> dict[ParameterShape, BindingStrategy]:
    return {
        ParameterShape.SINGULAR: ItemBindingStrategy(),
        ParameterShape.SEQUENCE: EnumerableBindingStrategy(),
        ParameterShape.RAW_CLIENT: ClientBindingStrategy(),
        ParameterShape.SERIALIZED_ARRAY: ArrayBindingStrategy(),
        ParameterShape.OUTPUT_SINK: CollectorBindingStrategy(),
    }
