"""Database Viewer Routes — sanitized export and collection counts.

Invariants:
    - Read-only; password hashes never leave the service
"""

from fastapi import APIRouter, Depends

from app.infrastructure.document_store import DocumentStore, get_document_store
from app.services.document_inspection import collect_stats, export_document

router = APIRouter(prefix="/api/v1/database", tags=["database"])


@router.get("")
async def get_database(store: DocumentStore = Depends(get_document_store)):
    """Whole ledger document without credentials."""
    return await export_document(store)


@router.get("/stats")
async def get_database_stats(store: DocumentStore = Depends(get_document_store)):
    return await collect_stats(store)
