"""Activity Schemas — journal entries as returned by the activity feed."""

from datetime import datetime

from pydantic import BaseModel

from app.core.activity_journal import describe_age
from app.core.document import ActivityEntry
from app.core.domain_types import ActivityKind


class ActivityResponse(BaseModel):
    id: int
    owner_id: int
    kind: ActivityKind
    description: str
    timestamp: datetime
    goal_id: int | None = None
    relative_time: str

    @classmethod
    def from_entry(cls, entry: ActivityEntry, now: datetime) -> "ActivityResponse":
        return cls(
            id=entry.id,
            owner_id=entry.owner_id,
            kind=entry.kind,
            description=entry.description,
            timestamp=entry.timestamp,
            goal_id=entry.goal_id,
            relative_time=describe_age(entry.timestamp, now),
        )
