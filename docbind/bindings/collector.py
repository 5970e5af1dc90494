"""Output sink handed to functions bound with the output-sink shape."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from docbind.bindings.context import BindingContext

T = TypeVar("T")


class DocumentCollector(Generic[T]):
    """Writes each added item to the bound collection via upsert."""

    def __init__(self, context: BindingContext) -> None:
        self._context = context
        self._written = 0

    @property
    def written(self) -> int:
        return self._written

    async def add(self, item: T) -> dict[str, Any]:
        attribute = self._context.resolved_attribute
        document = _to_document(item)
        stored = await self._context.service.upsert_document(
            attribute.database_name,
            attribute.collection_name,
            document,
        )
        self._written += 1
        return stored


def _to_document(item: Any) -> dict[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json", by_alias=True)
    if isinstance(item, dict):
        return dict(item)
    raise TypeError(f"Cannot write {type(item).__name__} as a document; expected dict or pydantic model")
