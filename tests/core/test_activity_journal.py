"""Activity Journal tests — recording, per-owner feed ordering, age labels."""

from datetime import datetime, timedelta, timezone

import pytest

from app.core import activity_journal
from app.core.document import Document
from app.core.domain_types import ActivityKind
from app.core.errors import ValidationError

T0 = datetime(2026, 5, 10, 8, 0, tzinfo=timezone.utc)


def _record(doc, owner_id, minutes, text="event"):
    return activity_journal.record(
        doc, owner_id, ActivityKind.ADD_MONEY, text, T0 + timedelta(minutes=minutes),
    )


def test_record_appends_entry_with_fresh_id():
    doc = Document()
    first = _record(doc, 1, 0)
    second = _record(doc, 2, 1)
    assert (first.id, second.id) == (1, 2)
    assert doc.activities == [first, second]


def test_list_for_owner_newest_first_and_scoped():
    doc = Document()
    _record(doc, 1, 0, "oldest")
    _record(doc, 2, 5, "other owner")
    _record(doc, 1, 10, "newest")
    _record(doc, 1, 3, "middle")

    feed = activity_journal.list_for_owner(doc, 1, limit=10)

    assert [a.description for a in feed] == ["newest", "middle", "oldest"]


def test_list_for_owner_breaks_timestamp_ties_by_descending_id():
    doc = Document()
    a = _record(doc, 1, 0)
    b = _record(doc, 1, 0)
    c = _record(doc, 1, 0)
    feed = activity_journal.list_for_owner(doc, 1, limit=10)
    assert [e.id for e in feed] == [c.id, b.id, a.id]


def test_list_for_owner_truncates_but_keeps_full_history():
    doc = Document()
    for i in range(15):
        _record(doc, 1, i)

    feed = activity_journal.list_for_owner(doc, 1, limit=10)

    assert len(feed) == 10
    assert feed[0].timestamp == T0 + timedelta(minutes=14)
    assert len(doc.activities) == 15


@pytest.mark.parametrize("limit", [0, -1])
def test_list_for_owner_rejects_non_positive_limit(limit):
    with pytest.raises(ValidationError):
        activity_journal.list_for_owner(Document(), 1, limit)


def test_list_for_owner_does_not_mutate_journal():
    doc = Document()
    _record(doc, 1, 5)
    _record(doc, 1, 0)
    order_before = [a.id for a in doc.activities]
    activity_journal.list_for_owner(doc, 1, limit=1)
    assert [a.id for a in doc.activities] == order_before


def test_count_for_owner():
    doc = Document()
    _record(doc, 1, 0)
    _record(doc, 1, 1)
    _record(doc, 2, 2)
    assert activity_journal.count_for_owner(doc, 1) == 2
    assert activity_journal.count_for_owner(doc, 3) == 0


@pytest.mark.parametrize(
    "elapsed,expected",
    [
        (timedelta(seconds=30), "0 minutes ago"),
        (timedelta(minutes=42), "42 minutes ago"),
        (timedelta(hours=5, minutes=59), "5 hours ago"),
        (timedelta(days=3, hours=2), "3 days ago"),
        (timedelta(days=9), "2026-05-10"),
    ],
)
def test_describe_age(elapsed, expected):
    assert activity_journal.describe_age(T0, T0 + elapsed) == expected


def test_describe_age_future_timestamp_reads_as_now():
    assert activity_journal.describe_age(T0, T0 - timedelta(minutes=3)) == "0 minutes ago"
