"""Shared test fixtures and collection-time service gating for docbind."""

from __future__ import annotations

import logging
import os
import socket
from urllib.parse import urlparse

import pytest

from docbind.bindings import ServiceCache
from docbind.config import DocBindConfig
from docbind.extension import DocumentBindingExtension
from docbind.services import InMemoryServiceFactory

COSMOS_CONNECTION_ENV = "DOCBIND_TEST_COSMOS_CONNECTION_STRING"


def _is_port_open(host: str, port: int, timeout: float = 0.5) -> bool:
    """Return True when host:port accepts TCP connections."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(timeout)
        return sock.connect_ex((host, port)) == 0


def _cosmos_endpoint(connection_string: str) -> tuple[str, int]:
    for part in connection_string.split(";"):
        key, _, value = part.partition("=")
        if key.strip().lower() == "accountendpoint":
            parsed = urlparse(value.strip())
            return parsed.hostname or "localhost", parsed.port or 443
    return "localhost", 8081


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip Cosmos-dependent tests when no account is reachable."""
    connection_string = os.getenv(COSMOS_CONNECTION_ENV, "")
    if connection_string:
        host, port = _cosmos_endpoint(connection_string)
        available = _is_port_open(host, port)
        reason = f"Cosmos DB is not reachable on {host}:{port}"
    else:
        available = False
        reason = f"{COSMOS_CONNECTION_ENV} is not set"
    if available:
        return
    for item in items:
        if item.get_closest_marker("requires_cosmos") is not None:
            item.add_marker(pytest.mark.skip(reason=reason))


@pytest.fixture
def service_factory() -> InMemoryServiceFactory:
    return InMemoryServiceFactory()


@pytest.fixture
def service_cache(service_factory: InMemoryServiceFactory) -> ServiceCache:
    """Isolated cache per test."""
    return ServiceCache(service_factory)


@pytest.fixture
def extension(
    service_cache: ServiceCache,
    monkeypatch: pytest.MonkeyPatch,
) -> DocumentBindingExtension:
    """Extension with a configured default connection and an in-memory backend."""
    monkeypatch.delenv("AzureWebJobsCosmosDBConnectionString", raising=False)
    config = DocBindConfig(connection_string="AccountEndpoint=https://configured.example/;AccountKey=abc==;")
    return DocumentBindingExtension(
        config,
        service_cache=service_cache,
        trace=logging.getLogger("docbind.test"),
    )
