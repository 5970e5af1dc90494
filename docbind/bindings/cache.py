"""Process-wide create-once cache of document services."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future

from docbind.exceptions import DocBindError, ServiceConstructionError
from docbind.security import redact_connection_string
from docbind.services.base import DocumentService, ServiceFactory

logger = logging.getLogger(__name__)


class ServiceCache:
    """Map connection strings to services, constructing each at most once.

    Each key gets a future cell inserted atomically under a short map lock.
    The caller that inserts the cell runs the factory outside the lock;
    concurrent callers for the same key wait on the cell, callers for other
    keys never wait. ``get_or_create_async`` does the same from an event loop
    without blocking it. A failed cell is dropped so the next call retries.
    Successful services are kept for the lifetime of the cache.
    """

    def __init__(self, factory: ServiceFactory) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._cells: dict[str, Future[DocumentService]] = {}

    def get_or_create(self, connection_string: str) -> DocumentService:
        cell, owner = self._claim(connection_string)
        if not owner:
            return cell.result()
        return self._construct(connection_string, cell)

    async def get_or_create_async(self, connection_string: str) -> DocumentService:
        """Event-loop variant: construction and waiting happen off the loop."""
        cell, owner = self._claim(connection_string)
        if not owner:
            # a cancelled waiter must not cancel the shared cell
            return await asyncio.shield(asyncio.wrap_future(cell))
        return await asyncio.to_thread(self._construct, connection_string, cell)

    def _claim(self, connection_string: str) -> tuple[Future[DocumentService], bool]:
        with self._lock:
            cell = self._cells.get(connection_string)
            if cell is not None:
                return cell, False
            cell = Future()
            self._cells[connection_string] = cell
            return cell, True

    def _construct(self, connection_string: str, cell: Future[DocumentService]) -> DocumentService:
        redacted = redact_connection_string(connection_string)
        try:
            service = self._factory.create(connection_string)
        except Exception as exc:
            self._discard(connection_string, cell)
            reason = redact_connection_string(str(exc))
            error = exc if isinstance(exc, DocBindError) else ServiceConstructionError(redacted, reason)
            cell.set_exception(error)
            logger.warning("document service construction failed for %s: %s", redacted, reason)
            if error is exc:
                raise
            raise error from exc
        except BaseException:
            self._discard(connection_string, cell)
            cell.cancel()
            raise
        cell.set_result(service)
        logger.info("document service created for %s", redacted)
        return service

    def _discard(self, connection_string: str, cell: Future[DocumentService]) -> None:
        with self._lock:
            if self._cells.get(connection_string) is cell:
                del self._cells[connection_string]

    def __contains__(self, connection_string: object) -> bool:
        with self._lock:
            cell = self._cells.get(connection_string)  # type: ignore[arg-type]
        return cell is not None and cell.done() and not cell.cancelled() and cell.exception() is None

    def __len__(self) -> int:
        with self._lock:
            cells = list(self._cells.values())
        return sum(1 for cell in cells if cell.done() and not cell.cancelled() and cell.exception() is None)
