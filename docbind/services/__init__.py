"""Document services and factories consumed by the binding engine."""

from docbind.services.base import DocumentService, ServiceFactory
from docbind.services.cosmos import CosmosDocumentService, CosmosServiceFactory, DocumentClient
from docbind.services.memory import InMemoryDocumentService, InMemoryServiceFactory

__all__ = [
    "CosmosDocumentService",
    "CosmosServiceFactory",
    "DocumentClient",
    "DocumentService",
    "InMemoryDocumentService",
    "InMemoryServiceFactory",
    "ServiceFactory",
]
