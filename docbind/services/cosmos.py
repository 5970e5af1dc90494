"""Azure Cosmos DB backed document service."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceNotFoundError

logger = logging.getLogger(__name__)

DocumentClient = CosmosClient

DEFAULT_PARTITION_KEY_PATH = "/id"
_READ_BY_ID_QUERY = "SELECT * FROM c WHERE c.id = @id"


class CosmosDocumentService:
    """Document service over one ``azure.cosmos.aio.CosmosClient``."""

    def __init__(
        self,
        connection_string: str,
        *,
        client_builder: Callable[[str], CosmosClient] | None = None,
    ) -> None:
        builder = client_builder or CosmosClient.from_connection_string
        self._client = builder(connection_string)

    def get_client(self) -> CosmosClient:
        return self._client

    async def read_document(
        self,
        database_name: str,
        collection_name: str,
        document_id: str,
        partition_key: str | None = None,
    ) -> dict[str, Any] | None:
        container = self._container(database_name, collection_name)
        if partition_key is None:
            # point reads require a partition key
            matches = await self.query_documents(
                database_name,
                collection_name,
                _READ_BY_ID_QUERY,
                parameters=[{"name": "@id", "value": document_id}],
            )
            return matches[0] if matches else None
        try:
            return await container.read_item(item=document_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            logger.debug("document %s not found in %s/%s", document_id, database_name, collection_name)
            return None

    async def query_documents(
        self,
        database_name: str,
        collection_name: str,
        query: str,
        parameters: list[dict[str, Any]] | None = None,
        partition_key: str | None = None,
    ) -> list[dict[str, Any]]:
        container = self._container(database_name, collection_name)
        options: dict[str, Any] = {}
        if parameters:
            options["parameters"] = parameters
        if partition_key is not None:
            options["partition_key"] = partition_key
        return [item async for item in container.query_items(query=query, **options)]

    async def upsert_document(
        self,
        database_name: str,
        collection_name: str,
        document: dict[str, Any],
    ) -> dict[str, Any]:
        container = self._container(database_name, collection_name)
        return await container.upsert_item(body=document)

    async def create_database_and_collection_if_not_exists(
        self,
        database_name: str,
        collection_name: str,
        partition_key_path: str | None = None,
        throughput: int = 0,
    ) -> None:
        offer_throughput = throughput if throughput > 0 else None
        database = await self._client.create_database_if_not_exists(id=database_name)
        await database.create_container_if_not_exists(
            id=collection_name,
            partition_key=PartitionKey(path=partition_key_path or DEFAULT_PARTITION_KEY_PATH),
            offer_throughput=offer_throughput,
        )

    def _container(self, database_name: str, collection_name: str) -> Any:
        return self._client.get_database_client(database_name).get_container_client(collection_name)


class CosmosServiceFactory:
    """Default factory creating one Cosmos service per connection string."""

    def __init__(self, client_builder: Callable[[str], CosmosClient] | None = None) -> None:
        self._client_builder = client_builder

    def create(self, connection_string: str) -> CosmosDocumentService:
        return CosmosDocumentService(connection_string, client_builder=self._client_builder)
