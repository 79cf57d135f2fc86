"""Service test fixtures — document stores, services, and the FastAPI test client.

Invariants:
    - Every test gets a freshly initialized store (no state leaks between tests)
    - FakeRepository yields to the event loop on every IO call, so missing
      serialization would show up as lost updates
    - get_document_store dependency overridden to use the test store

Design Decisions:
    - Fake repository for store semantics (timeouts, save failures); SQLite
      in-memory and tmp_path files for the real backends
    - StepClock advances one second per call: distinct, ordered timestamps
"""

import asyncio
import copy
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.errors import PersistenceError
from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.document_repositories import (
    JsonFileDocumentRepository, SqlDocumentRepository,
)
from app.infrastructure.document_store import DocumentStore, get_document_store
from app.main import app
from app.services.account_service import AccountService
from app.services.goal_ledger_service import GoalLedgerService


class FakeRepository:
    """In-memory DocumentRepository with knobs for failure injection."""

    def __init__(self):
        self.snapshot: dict | None = None
        self.saves = 0
        self.load_delay = 0.0
        self.save_delay = 0.0
        self.fail_save = False

    async def load(self) -> dict | None:
        await asyncio.sleep(self.load_delay)
        return copy.deepcopy(self.snapshot)

    async def save(self, snapshot: dict) -> None:
        await asyncio.sleep(self.save_delay)
        if self.fail_save:
            raise PersistenceError("disk full", "save")
        self.snapshot = copy.deepcopy(snapshot)
        self.saves += 1

    async def initialize(self, snapshot: dict) -> bool:
        if self.snapshot is not None:
            return False
        self.snapshot = copy.deepcopy(snapshot)
        return True


class StepClock:
    """Deterministic clock: each call returns one second later than the last."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def fake_repo():
    return FakeRepository()


@pytest.fixture
async def store(fake_repo):
    s = DocumentStore(fake_repo, io_timeout_seconds=1.0)
    await s.initialize()
    return s


@pytest.fixture
def clock():
    return StepClock(datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def ledger(store, clock):
    return GoalLedgerService(store, currency_symbol="₹", clock=clock)


@pytest.fixture
def account_service(store, clock):
    return AccountService(store, min_password_length=6, clock=clock)


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
def sql_repo(db_manager):
    return SqlDocumentRepository(db_manager)


@pytest.fixture
def file_repo(tmp_path):
    return JsonFileDocumentRepository(tmp_path / "ledger.json")


@pytest.fixture
async def client(store):
    """FastAPI test client with the document store overridden."""
    app.dependency_overrides[get_document_store] = lambda: store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
