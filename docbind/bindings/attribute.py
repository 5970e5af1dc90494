"""Declarative binding attribute and parsing helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ATTRIBUTE_FIELDS = (
    "database_name",
    "collection_name",
    "id",
    "sql_query",
    "connection",
    "partition_key",
    "create_if_not_exists",
    "collection_throughput",
    "sql_query_parameters",
)


@dataclass(frozen=True, slots=True)
class BindingAttribute:
    """Which collection, which connection, which query or id.

    ``connection`` overrides the configured connection string for this
    binding only and may be a ``${NAME}`` reference.
    """

    database_name: str = ""
    collection_name: str = ""
    id: str | None = None
    sql_query: str | None = None
    connection: str | None = None
    partition_key: str | None = None
    create_if_not_exists: bool = False
    collection_throughput: int = 0
    sql_query_parameters: dict[str, Any] = field(default_factory=dict)

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    @property
    def has_sql_query(self) -> bool:
        return bool(self.sql_query)

    def query_parameters(self) -> list[dict[str, Any]]:
        """Render ``sql_query_parameters`` as ``[{"name": "@x", "value": ...}]``."""
        rendered: list[dict[str, Any]] = []
        for name, value in self.sql_query_parameters.items():
            key = name if name.startswith("@") else f"@{name}"
            rendered.append({"name": key, "value": value})
        return rendered


def parse_binding_attribute(data: dict[str, Any]) -> BindingAttribute:
    """Parse a typed attribute from a plain dict."""
    validate_binding_attribute(data)
    return BindingAttribute(
        database_name=str(data.get("database_name", "")),
        collection_name=str(data.get("collection_name", "")),
        id=_to_optional_str(data.get("id")),
        sql_query=_to_optional_str(data.get("sql_query")),
        connection=_to_optional_str(data.get("connection")),
        partition_key=_to_optional_str(data.get("partition_key")),
        create_if_not_exists=bool(data.get("create_if_not_exists", False)),
        collection_throughput=int(data.get("collection_throughput", 0)),
        sql_query_parameters=dict(data.get("sql_query_parameters") or {}),
    )


def validate_binding_attribute(data: dict[str, Any]) -> None:
    """Validate field types of a raw attribute declaration."""
    errors: list[str] = []
    unknown = sorted(set(data) - set(ATTRIBUTE_FIELDS))
    if unknown:
        errors.append(f"unknown attribute fields: {unknown}")
    for name in ("database_name", "collection_name", "id", "sql_query", "connection", "partition_key"):
        value = data.get(name)
        if value is not None and not isinstance(value, (str, int)):
            errors.append(f"attribute.{name} must be a string")
    throughput = data.get("collection_throughput", 0)
    if isinstance(throughput, bool) or not isinstance(throughput, int) or throughput < 0:
        errors.append("attribute.collection_throughput must be int >= 0")
    parameters = data.get("sql_query_parameters")
    if parameters is not None and not isinstance(parameters, dict):
        errors.append("attribute.sql_query_parameters must be object")
    if errors:
        raise ValueError("; ".join(errors))


def _to_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None
