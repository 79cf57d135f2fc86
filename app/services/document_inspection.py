"""Document Inspection — read-only export and statistics for the ledger document.

Invariants:
    - Never mutates; reads through read_document()
    - Exports never contain password hashes
"""

from app.core.document_snapshot import document_stats, sanitized_snapshot
from app.infrastructure.document_store import DocumentStore


async def export_document(store: DocumentStore) -> dict:
    return sanitized_snapshot(await store.read_document())


async def collect_stats(store: DocumentStore) -> dict:
    return document_stats(await store.read_document())
