"""Document Store — single-writer unit of work around the ledger document.

Invariants:
    - At most one with_document() unit runs at a time (one asyncio.Lock around
      load -> mutate -> persist), so concurrent mutations never lose updates
    - The op receives a private Document built from the stored snapshot; if the
      op raises, nothing is persisted and the error propagates unchanged
    - read_document() takes no lock and sees the last committed snapshot
    - Missing or corrupt storage is a PersistenceError; an empty document is
      only ever created by initialize()
    - Every backend call is bounded by io_timeout_seconds; a write that times
      out still holds the gate until it really ends (no late overwrite)

Design Decisions:
    - asyncio.Lock over a readers-writer lock: single-process uvicorn, and the
      backends commit atomically, so reads need no gate
    - No retries: PersistenceError goes straight back to the caller
    - Singleton store initialized on startup, like db_manager
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from app.core.document import Document
from app.core.document_snapshot import (
    document_from_snapshot, document_to_snapshot, empty_snapshot,
)
from app.core.errors import PersistenceError
from app.core.repository_protocols import DocumentRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentStore:
    """Owns the persisted ledger document and serializes its mutations."""

    def __init__(self, repository: DocumentRepository, io_timeout_seconds: float = 5.0):
        self._repository = repository
        self._timeout = io_timeout_seconds
        self._write_gate = asyncio.Lock()

    async def _bounded(self, call: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error(
                f"Document {operation} timed out after {self._timeout}s",
                extra={"operation": operation},
            )
            raise PersistenceError(
                f"timed out after {self._timeout}s", operation,
            ) from e

    async def _load(self) -> Document:
        snapshot = await self._bounded(self._repository.load(), "load")
        if snapshot is None:
            raise PersistenceError("document has not been initialized", "load")
        return document_from_snapshot(snapshot)

    async def _write_gated(self, call: Awaitable[T], operation: str) -> T:
        """Run a backend write; the caller holds the gate, this releases it.

        The write is shielded from the timeout: a timed-out write keeps
        running (worker threads cannot be cancelled), and the gate stays
        held until it ends, so it can never land on top of a later unit.
        """
        pending = asyncio.ensure_future(call)
        try:
            return await self._bounded(asyncio.shield(pending), operation)
        finally:
            if pending.done():
                self._write_gate.release()
            else:
                logger.warning(
                    f"Document {operation} outlived its timeout, write gate held until it ends",
                    extra={"operation": operation},
                )
                pending.add_done_callback(
                    lambda task: self._release_after_late_write(task, operation),
                )

    def _release_after_late_write(self, task: asyncio.Future, operation: str) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                f"Late document {operation} failed: {task.exception()}",
                extra={"operation": operation},
            )
        else:
            logger.warning(
                f"Late document {operation} finished", extra={"operation": operation},
            )
        self._write_gate.release()

    async def initialize(self) -> bool:
        """Create the empty document if storage has none. True if created."""
        await self._write_gate.acquire()
        created = await self._write_gated(
            self._repository.initialize(empty_snapshot()), "initialize",
        )
        if created:
            logger.info("Initialized empty ledger document")
        return created

    async def read_document(self) -> Document:
        """Consistent snapshot for read paths. No exclusive access taken."""
        return await self._load()

    async def with_document(self, op: Callable[[Document], T]) -> T:
        """Run op against the current document and persist the result atomically."""
        await self._write_gate.acquire()
        try:
            document = await self._load()
            result = op(document)
            snapshot = document_to_snapshot(document)
        except BaseException:
            self._write_gate.release()
            raise
        await self._write_gated(self._repository.save(snapshot), "save")
        return result

    async def health_check(self) -> bool:
        """Readiness: the document can be loaded."""
        try:
            await self._load()
            return True
        except PersistenceError as e:
            logger.error(f"Document store health check failed: {e.message}")
            return False


# Singleton (initialized on startup)
document_store: DocumentStore | None = None


def init_document_store(
    repository: DocumentRepository, io_timeout_seconds: float = 5.0,
) -> DocumentStore:
    global document_store
    document_store = DocumentStore(repository, io_timeout_seconds)
    return document_store


def get_document_store() -> DocumentStore:
    """FastAPI dependency for the ledger document store."""
    if not document_store:
        raise RuntimeError("Document store not initialized")
    return document_store
