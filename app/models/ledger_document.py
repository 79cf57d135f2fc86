"""LedgerDocument ORM — one row holds the whole ledger document as a JSON snapshot.

Invariants:
    - name is the primary key; the service uses a single row ("default")
    - snapshot is the full document (users, goals, activities, sequences)
    - version increments by exactly 1 on every save

Design Decisions:
    - JSON column over per-row tables: the aggregate is persisted as a unit,
      and a single-row UPDATE commits atomically so readers never see a torn document
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class LedgerDocument(Base):
    """Persisted ledger document."""
    __tablename__ = "ledger_documents"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
