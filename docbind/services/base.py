"""Document service and factory protocols."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DocumentService(Protocol):
    """Opened connection to one document-store account."""

    def get_client(self) -> Any:
        """Return the underlying SDK client."""
        ...

    async def read_document(
        self,
        database_name: str,
        collection_name: str,
        document_id: str,
        partition_key: str | None = None,
    ) -> dict[str, Any] | None:
        """Read one document by id; ``None`` when it does not exist."""
        ...

    async def query_documents(
        self,
        database_name: str,
        collection_name: str,
        query: str,
        parameters: list[dict[str, Any]] | None = None,
        partition_key: str | None = None,
    ) -> list[dict[str, Any]]:
        """Run a query and return every matching document."""
        ...

    async def upsert_document(
        self,
        database_name: str,
        collection_name: str,
        document: dict[str, Any],
    ) -> dict[str, Any]:
        """Insert or replace a document."""
        ...

    async def create_database_and_collection_if_not_exists(
        self,
        database_name: str,
        collection_name: str,
        partition_key_path: str | None = None,
        throughput: int = 0,
    ) -> None:
        """Ensure the database and collection exist."""
        ...


class ServiceFactory(Protocol):
    """Builds a document service for a resolved connection string."""

    def create(self, connection_string: str) -> DocumentService: ...
