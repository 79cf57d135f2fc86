"""Document Snapshot tests — serialization, corruption detection, export views.

Invariants:
    - A populated document survives to_snapshot -> from_snapshot
    - Malformed snapshots raise PersistenceError instead of yielding an empty document
    - Exports drop password hashes
"""

import json
from datetime import datetime, timezone

import pytest

from app.core import accounts, goal_ledger
from app.core.document import Document
from app.core.document_snapshot import (
    document_from_snapshot, document_stats, document_to_snapshot,
    empty_snapshot, sanitized_snapshot,
)
from app.core.domain_types import ActivityKind
from app.core.errors import PersistenceError

NOW = datetime(2026, 2, 14, 18, 30, tzinfo=timezone.utc)


def _populated():
    doc = Document()
    accounts.register(doc, "John Doe", "john@example.com", "$2b$12$hash", NOW)
    goal = goal_ledger.create(doc, 1, "Emergency Fund", 50_000, NOW, 15_000)
    goal_ledger.add_money(doc, goal.id, 5_000, NOW)
    doomed = goal_ledger.create(doc, 1, "Old Plan", 10, NOW)
    goal_ledger.delete(doc, doomed.id, NOW)
    return doc


def test_snapshot_is_json_safe():
    snapshot = document_to_snapshot(_populated())
    assert json.loads(json.dumps(snapshot)) == snapshot
    assert snapshot["activities"][1]["kind"] == "add_money"
    assert snapshot["goals"][0]["created_at"] == NOW.isoformat()


def test_populated_document_survives_roundtrip():
    original = _populated()
    restored = document_from_snapshot(document_to_snapshot(original))

    assert restored.goals == original.goals
    assert restored.activities == original.activities
    assert restored.users == original.users
    assert restored.sequences == {"users": 1, "goals": 2, "activities": 4}
    assert restored.activities[0].kind is ActivityKind.CREATE_GOAL


def test_from_snapshot_builds_independent_copy():
    snapshot = document_to_snapshot(_populated())
    doc = document_from_snapshot(snapshot)
    doc.goals[0].current = 0
    assert snapshot["goals"][0]["current"] == 20_000


def test_empty_snapshot_loads_as_empty_document():
    doc = document_from_snapshot(empty_snapshot())
    assert doc == Document()


def test_missing_sequences_defaults_to_empty():
    snapshot = {"users": [], "goals": [], "activities": []}
    assert document_from_snapshot(snapshot).sequences == {}


@pytest.mark.parametrize(
    "snapshot",
    [
        None,
        [],
        {},
        {"users": [], "goals": []},
        {"users": [], "goals": "oops", "activities": []},
        {"users": [], "goals": [{"id": 1}], "activities": []},
        {
            "users": [], "goals": [],
            "activities": [{
                "id": 1, "owner_id": 1, "kind": "withdraw", "description": "x",
                "timestamp": NOW.isoformat(),
            }],
        },
        {
            "users": [], "activities": [],
            "goals": [{
                "id": 1, "owner_id": 1, "name": "x", "target": 10, "current": 0,
                "created_at": "not-a-date", "updated_at": NOW.isoformat(),
            }],
        },
    ],
)
def test_corrupt_snapshot_raises_persistence_error(snapshot):
    with pytest.raises(PersistenceError):
        document_from_snapshot(snapshot)


def test_sanitized_snapshot_hides_password_hashes():
    doc = _populated()
    exported = sanitized_snapshot(doc)
    assert exported["users"][0]["email"] == "john@example.com"
    assert "password_hash" not in exported["users"][0]
    assert doc.users[0].password_hash == "$2b$12$hash"


def test_document_stats():
    stats = document_stats(_populated())
    assert stats["total_users"] == 1
    assert stats["total_goals"] == 1
    assert stats["total_activities"] == 4
    assert stats["document_size_bytes"] > 0
