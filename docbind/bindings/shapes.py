"""Parameter shapes and the registration-time type classifier."""

from __future__ import annotations

import collections.abc
import json
from enum import Enum
from typing import Any, get_origin

from docbind.bindings.collector import DocumentCollector
from docbind.services.base import DocumentService
from docbind.services.cosmos import DocumentClient


class ParameterShape(str, Enum):
    """Closed set of target shapes a binding can produce."""

    SINGULAR = "singular"
    SEQUENCE = "sequence"
    RAW_CLIENT = "raw_client"
    SERIALIZED_ARRAY = "serialized_array"
    OUTPUT_SINK = "output_sink"


class DocumentArray(list):  # type: ignore[type-arg]
    """Query results kept as raw JSON documents."""

    def to_json(self) -> str:
        return json.dumps(list(self), ensure_ascii=False, default=str)


_DESIGNATED_TYPES: dict[Any, ParameterShape] = {
    DocumentClient: ParameterShape.RAW_CLIENT,
    DocumentService: ParameterShape.RAW_CLIENT,
    DocumentArray: ParameterShape.SERIALIZED_ARRAY,
    DocumentCollector: ParameterShape.OUTPUT_SINK,
}

_SEQUENCE_ORIGINS = frozenset(
    {
        collections.abc.Iterable,
        collections.abc.Iterator,
        collections.abc.Sequence,
        collections.abc.Collection,
        list,
    }
)


def classify_parameter_type(declared_type: Any) -> ParameterShape:
    """Map a declared parameter type to its shape.

    Only parameterized sequence types count as sequences, so ``list[Order]``
    is a sequence while a bare ``list`` stays singular.
    """
    designated = _DESIGNATED_TYPES.get(declared_type)
    if designated is not None:
        return designated
    origin = get_origin(declared_type)
    if origin is None:
        return ParameterShape.SINGULAR
    if origin is DocumentCollector:
        return ParameterShape.OUTPUT_SINK
    if origin in _SEQUENCE_ORIGINS:
        return ParameterShape.SEQUENCE
    return ParameterShape.SINGULAR
