"""Identifier Allocator — next unique integer id per document collection.

Invariants:
    - next_id is strictly greater than every id present in the collection
    - next_id is strictly greater than every id previously issued for it
    - Empty, never-used collection starts at 1

Design Decisions:
    - High-water mark kept in Document.sequences: deleting the newest goal
      must not hand its id to the next goal
    - Pure function of the borrowed snapshot; no independent state
"""

from app.core.document import Document
from app.core.domain_types import Collection


def next_id(document: Document, collection: Collection) -> int:
    """Issue the next id for collection and record it as issued."""
    records = getattr(document, collection.value)
    highest_present = max((record.id for record in records), default=0)
    issued = max(highest_present, document.sequences.get(collection.value, 0)) + 1
    document.sequences[collection.value] = issued
    return issued
