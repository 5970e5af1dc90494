"""In-memory document service for local testing and CI."""

from __future__ import annotations

import copy
import threading
import time
from collections.abc import Callable
from typing import Any

QueryHandler = Callable[[str, list[dict[str, Any]], list[dict[str, Any]]], list[dict[str, Any]]]


class InMemoryDocumentService:
    """Dict-backed service; queries return every stored document unless a handler is supplied."""

    def __init__(self, connection_string: str, query_handler: QueryHandler | None = None) -> None:
        self.connection_string = connection_string
        self._query_handler = query_handler
        self._collections: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self.queries: list[tuple[str, list[dict[str, Any]]]] = []
        self.created_collections: list[tuple[str, str, str | None, int]] = []

    def get_client(self) -> InMemoryDocumentService:
        return self

    async def read_document(
        self,
        database_name: str,
        collection_name: str,
        document_id: str,
        partition_key: str | None = None,
    ) -> dict[str, Any] | None:
        with self._lock:
            document = self._collections.get((database_name, collection_name), {}).get(document_id)
            return copy.deepcopy(document) if document is not None else None

    async def query_documents(
        self,
        database_name: str,
        collection_name: str,
        query: str,
        parameters: list[dict[str, Any]] | None = None,
        partition_key: str | None = None,
    ) -> list[dict[str, Any]]:
        params = list(parameters or [])
        with self._lock:
            self.queries.append((query, params))
            documents = [copy.deepcopy(doc) for doc in self._collections.get((database_name, collection_name), {}).values()]
        if self._query_handler is not None:
            return self._query_handler(query, params, documents)
        return documents

    async def upsert_document(
        self,
        database_name: str,
        collection_name: str,
        document: dict[str, Any],
    ) -> dict[str, Any]:
        if "id" not in document:
            raise ValueError("document requires an 'id' field")
        stored = copy.deepcopy(document)
        with self._lock:
            self._collections.setdefault((database_name, collection_name), {})[str(stored["id"])] = stored
        return copy.deepcopy(stored)

    async def create_database_and_collection_if_not_exists(
        self,
        database_name: str,
        collection_name: str,
        partition_key_path: str | None = None,
        throughput: int = 0,
    ) -> None:
        with self._lock:
            self.created_collections.append((database_name, collection_name, partition_key_path, throughput))
            self._collections.setdefault((database_name, collection_name), {})

    def seed(self, database_name: str, collection_name: str, documents: list[dict[str, Any]]) -> None:
        with self._lock:
            target = self._collections.setdefault((database_name, collection_name), {})
            for document in documents:
                target[str(document["id"])] = copy.deepcopy(document)

    def documents(self, database_name: str, collection_name: str) -> list[dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(doc) for doc in self._collections.get((database_name, collection_name), {}).values()]


class InMemoryServiceFactory:
    """Factory double recording every construction attempt.

    ``failures`` maps a connection string to the number of initial attempts
    that raise ``ConnectionError`` before construction succeeds.
    """

    def __init__(
        self,
        *,
        delay_seconds: float = 0.0,
        failures: dict[str, int] | None = None,
        query_handler: QueryHandler | None = None,
    ) -> None:
        self._delay_seconds = delay_seconds
        self._failures = dict(failures or {})
        self._query_handler = query_handler
        self._lock = threading.Lock()
        self.created: list[str] = []

    def create(self, connection_string: str) -> InMemoryDocumentService:
        with self._lock:
            self.created.append(connection_string)
            remaining = self._failures.get(connection_string, 0)
            if remaining > 0:
                self._failures[connection_string] = remaining - 1
        if self._delay_seconds:
            time.sleep(self._delay_seconds)
        if remaining > 0:
            raise ConnectionError(f"simulated connection failure ({remaining} remaining)")
        return InMemoryDocumentService(connection_string, query_handler=self._query_handler)

    def calls_for(self, connection_string: str) -> int:
        with self._lock:
            return self.created.count(connection_string)
