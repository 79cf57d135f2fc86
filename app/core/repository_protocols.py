"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the ledger functions that run between load and save never are
"""

from typing import Protocol


class DocumentRepository(Protocol):
    """Contract for whole-document persistence — implemented by shell.

    load() returns None only when storage holds no document at all.
    save() must replace the stored snapshot atomically (readers never see a torn write).
    """
    async def load(self) -> dict | None: ...
    async def save(self, snapshot: dict) -> None: ...
    async def initialize(self, snapshot: dict) -> bool: ...
