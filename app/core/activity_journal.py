"""Activity Journal — append-only, per-owner log of ledger mutations.

Invariants:
    - record() appends exactly one entry with a fresh id; entries are never edited
    - list_for_owner() is newest first (timestamp, then id, both descending)
    - list_for_owner() never mutates the document; full history stays stored

Design Decisions:
    - Timestamp passed in by the caller: core stays deterministic and testable
    - describe_age() renders the "n minutes ago" labels of the activity feed
"""

from datetime import datetime

from app.core.document import ActivityEntry, Document
from app.core.domain_types import (
    DEFAULT_ACTIVITY_LIMIT, ActivityId, ActivityKind, Collection, GoalId, UserId,
)
from app.core.errors import ValidationError
from app.core.identifiers import next_id

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY


def record(
    document: Document,
    owner_id: UserId,
    kind: ActivityKind,
    description: str,
    now: datetime,
    goal_id: GoalId | None = None,
) -> ActivityEntry:
    """Append one entry to the document's journal."""
    entry = ActivityEntry(
        id=ActivityId(next_id(document, Collection.ACTIVITIES)),
        owner_id=owner_id,
        kind=kind,
        description=description,
        timestamp=now,
        goal_id=goal_id,
    )
    document.activities.append(entry)
    return entry


def list_for_owner(
    document: Document, owner_id: UserId, limit: int = DEFAULT_ACTIVITY_LIMIT,
) -> list[ActivityEntry]:
    """Most recent entries for owner_id, at most limit of them."""
    if limit <= 0:
        raise ValidationError("limit must be greater than 0", field="limit")
    owned = [a for a in document.activities if a.owner_id == owner_id]
    owned.sort(key=lambda a: (a.timestamp, a.id), reverse=True)
    return owned[:limit]


def count_for_owner(document: Document, owner_id: UserId) -> int:
    return sum(1 for a in document.activities if a.owner_id == owner_id)


def describe_age(timestamp: datetime, now: datetime) -> str:
    """Human label for how long ago timestamp was, relative to now."""
    seconds = max((now - timestamp).total_seconds(), 0)
    if seconds < _HOUR:
        return f"{int(seconds // _MINUTE)} minutes ago"
    if seconds < _DAY:
        return f"{int(seconds // _HOUR)} hours ago"
    if seconds < _WEEK:
        return f"{int(seconds // _DAY)} days ago"
    return timestamp.date().isoformat()
