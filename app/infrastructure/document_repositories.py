"""Document Repositories — database and JSON-file backends for the ledger document.

Invariants:
    - load() returns None only when no document has been initialized
    - save() replaces the stored snapshot atomically
    - initialize() never overwrites an existing document
    - IO failures surface as PersistenceError (never an empty document)

Design Decisions:
    - SqlDocumentRepository: one row in ledger_documents, updated in a single transaction
    - JsonFileDocumentRepository: write temp file + os.replace, the same on-disk
      layout as a plain JSON database file
    - File IO runs in a worker thread (asyncio.to_thread) to keep the loop free
"""

import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import select

from app.core.errors import PersistenceError
from app.infrastructure.database import DatabaseSessionManager
from app.models.ledger_document import LedgerDocument


logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_NAME = "default"


class SqlDocumentRepository:
    """Persists the document as one JSON row via SQLAlchemy."""

    def __init__(
        self, manager: DatabaseSessionManager, name: str = DEFAULT_DOCUMENT_NAME,
    ):
        self._manager = manager
        self._name = name

    async def load(self) -> dict | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(LedgerDocument).where(LedgerDocument.name == self._name),
            )
            row = result.scalar_one_or_none()
            return row.snapshot if row else None

    async def save(self, snapshot: dict) -> None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(LedgerDocument)
                .where(LedgerDocument.name == self._name)
                .with_for_update(),
            )
            row = result.scalar_one_or_none()
            if row is None:
                raise PersistenceError("document has not been initialized", "save")
            row.snapshot = snapshot
            row.version += 1
            row.updated_at = datetime.now(timezone.utc)
            await db.commit()
            logger.debug(
                "Ledger document saved", extra={"version": row.version},
            )

    async def initialize(self, snapshot: dict) -> bool:
        async with self._manager.session() as db:
            result = await db.execute(
                select(LedgerDocument.name).where(LedgerDocument.name == self._name),
            )
            if result.scalar_one_or_none() is not None:
                return False
            db.add(LedgerDocument(name=self._name, snapshot=snapshot, version=1))
            await db.commit()
            return True


class JsonFileDocumentRepository:
    """Persists the document as a pretty-printed JSON file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def _read(self) -> dict | None:
        if not self._path.exists():
            return None
        try:
            with self._path.open(encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"file is not valid JSON ({e.msg})", "load") from e
        except UnicodeDecodeError as e:
            raise PersistenceError(f"file is not valid UTF-8 ({e.reason})", "load") from e
        except OSError as e:
            raise PersistenceError(f"cannot read {self._path.name}", "load") from e

    def _write(self, snapshot: dict) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self._path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"cannot write {self._path.name}", "save") from e

    async def load(self) -> dict | None:
        return await asyncio.to_thread(self._read)

    async def save(self, snapshot: dict) -> None:
        if not self._path.exists():
            raise PersistenceError("document has not been initialized", "save")
        await asyncio.to_thread(self._write, snapshot)

    async def initialize(self, snapshot: dict) -> bool:
        if self._path.exists():
            return False
        await asyncio.to_thread(self._write, snapshot)
        return True
