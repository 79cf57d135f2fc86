"""Database Session Manager — async engine and sessions behind the SQL document backend.

Invariants:
    - A session that raises is rolled back before the error leaves session()
    - SQLAlchemy exceptions leave as PersistenceError, tagged with the stage
      (commit / execute / query) that failed
    - Stale pooled connections are pinged before use

Design Decisions:
    - Singleton db_manager built by init_db() in the FastAPI lifespan
    - expire_on_commit=False: rows stay readable after the session closes
    - SQLite URLs get no pool sizing (aiosqlite brings its own pool class)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core.errors import PersistenceError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_STAGES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "commit", "Integrity constraint violated"),
    (OperationalError, "execute", "Connection or operational error"),
    (DBAPIError, "query", "Database driver error"),
    (SQLAlchemyError, "unknown", "Database operation failed"),
)


def _as_persistence_error(error: SQLAlchemyError) -> PersistenceError:
    for error_type, stage, message in _ERROR_STAGES:
        if isinstance(error, error_type):
            return PersistenceError(message, stage)
    return PersistenceError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the async engine; hands out sessions that map failures to PersistenceError."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            await db.rollback()
            mapped = _as_persistence_error(e)
            logger.error(
                f"{type(e).__name__} during ledger {mapped.operation}: {e}",
                extra={"operation": mapped.operation},
            )
            raise mapped from e
        finally:
            await db.close()

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
