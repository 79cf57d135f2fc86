"""Route Dependencies — wires services onto the singleton document store.

Invariants:
    - Every request gets services bound to the same DocumentStore (one write gate per process)
    - Tests override get_document_store to point at a test store
"""

from fastapi import Depends

from app.config import Settings, get_settings
from app.infrastructure.document_store import DocumentStore, get_document_store
from app.services.account_service import AccountService
from app.services.goal_ledger_service import GoalLedgerService


def get_ledger_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> GoalLedgerService:
    return GoalLedgerService(store, currency_symbol=settings.currency_symbol)


def get_account_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(store, min_password_length=settings.min_password_length)
