"""Document Snapshot — serialization / deserialization for the ledger Document.

Invariants:
    - document_to_snapshot produces a JSON-safe dict (ISO datetimes, enum values)
    - document_from_snapshot builds a fresh Document; callers mutate it freely
    - A snapshot missing a collection or carrying malformed records is corrupt:
      PersistenceError, never a silently empty document
    - Collection order is preserved both ways

Design Decisions:
    - Field tuples per record type keep serialization DRY
    - Missing "sequences" falls back to {} (ids still never collide with present ones)
"""

import json
from datetime import datetime

from app.core.document import ActivityEntry, Document, Goal, UserRecord
from app.core.domain_types import ActivityId, ActivityKind, Collection, GoalId, UserId
from app.core.errors import PersistenceError

_GOAL_DATETIME_FIELDS: tuple[str, ...] = ("created_at", "updated_at")
_USER_DATETIME_FIELDS: tuple[str, ...] = ("created_at", "last_login")


def empty_snapshot() -> dict:
    return {"users": [], "goals": [], "activities": [], "sequences": {}}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None


def _goal_to_dict(goal: Goal) -> dict:
    return {
        "id": goal.id,
        "owner_id": goal.owner_id,
        "name": goal.name,
        "target": goal.target,
        "current": goal.current,
        "created_at": _iso(goal.created_at),
        "updated_at": _iso(goal.updated_at),
    }


def _activity_to_dict(entry: ActivityEntry) -> dict:
    return {
        "id": entry.id,
        "owner_id": entry.owner_id,
        "kind": entry.kind.value,
        "description": entry.description,
        "timestamp": _iso(entry.timestamp),
        "goal_id": entry.goal_id,
    }


def _user_to_dict(user: UserRecord) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "password_hash": user.password_hash,
        "created_at": _iso(user.created_at),
        "last_login": _iso(user.last_login),
    }


def document_to_snapshot(document: Document) -> dict:
    """Serialize Document to JSON-safe dict. Pure, no IO."""
    return {
        "users": [_user_to_dict(u) for u in document.users],
        "goals": [_goal_to_dict(g) for g in document.goals],
        "activities": [_activity_to_dict(a) for a in document.activities],
        "sequences": dict(document.sequences),
    }


def _goal_from_dict(data: dict) -> Goal:
    fields = {k: _parse_dt(data[k]) for k in _GOAL_DATETIME_FIELDS}
    return Goal(
        id=GoalId(int(data["id"])),
        owner_id=UserId(int(data["owner_id"])),
        name=str(data["name"]),
        target=float(data["target"]),
        current=float(data["current"]),
        **fields,
    )


def _activity_from_dict(data: dict) -> ActivityEntry:
    goal_id = data.get("goal_id")
    return ActivityEntry(
        id=ActivityId(int(data["id"])),
        owner_id=UserId(int(data["owner_id"])),
        kind=ActivityKind(data["kind"]),
        description=str(data["description"]),
        timestamp=_parse_dt(data["timestamp"]),
        goal_id=GoalId(int(goal_id)) if goal_id is not None else None,
    )


def _user_from_dict(data: dict) -> UserRecord:
    fields = {k: _parse_dt(data.get(k)) for k in _USER_DATETIME_FIELDS}
    return UserRecord(
        id=UserId(int(data["id"])),
        name=str(data["name"]),
        email=str(data["email"]),
        password_hash=str(data["password_hash"]),
        **fields,
    )


def document_from_snapshot(data: dict) -> Document:
    """Reconstruct a Document from a snapshot dict. Pure, no IO.

    Raises PersistenceError if the snapshot is not a well-formed document.
    """
    if not isinstance(data, dict):
        raise PersistenceError("snapshot is not an object", "load")
    missing = [c.value for c in Collection if not isinstance(data.get(c.value), list)]
    if missing:
        raise PersistenceError(
            f"snapshot missing collections: {', '.join(missing)}", "load",
        )
    try:
        return Document(
            users=[_user_from_dict(u) for u in data["users"]],
            goals=[_goal_from_dict(g) for g in data["goals"]],
            activities=[_activity_from_dict(a) for a in data["activities"]],
            sequences={str(k): int(v) for k, v in (data.get("sequences") or {}).items()},
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise PersistenceError(f"snapshot is corrupt ({e})", "load") from e


def sanitized_snapshot(document: Document) -> dict:
    """Whole document for export, without password hashes."""
    snapshot = document_to_snapshot(document)
    for user in snapshot["users"]:
        user.pop("password_hash", None)
    return snapshot


def document_stats(document: Document) -> dict:
    return {
        "total_users": len(document.users),
        "total_goals": len(document.goals),
        "total_activities": len(document.activities),
        "document_size_bytes": len(
            json.dumps(document_to_snapshot(document), ensure_ascii=False).encode("utf-8"),
        ),
    }
