"""Ledger Document — the aggregate root persisted as a whole.

Invariants:
    - A Document holds users, goals, activities and the id high-water marks
    - Ledger and journal code borrow a Document for one unit of work only
    - ActivityEntry is frozen; Goal and UserRecord are mutated in place by the ledger

Design Decisions:
    - Plain dataclasses, no IO (same shape as the JSON snapshot)
    - Lookups are linear scans: one user's goals fit comfortably in memory
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.core.domain_types import ActivityId, ActivityKind, GoalId, UserId


@dataclass
class Goal:
    """One savings target. 0 <= current <= target at all times."""
    id: GoalId
    owner_id: UserId
    name: str
    target: float
    current: float
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ActivityEntry:
    """Immutable record of one ledger mutation."""
    id: ActivityId
    owner_id: UserId
    kind: ActivityKind
    description: str
    timestamp: datetime
    goal_id: GoalId | None = None


@dataclass
class UserRecord:
    """Account directory record. password_hash never leaves the service layer."""
    id: UserId
    name: str
    email: str
    password_hash: str
    created_at: datetime
    last_login: datetime | None = None


@dataclass
class Document:
    """Everything the store persists, as one value."""
    users: list[UserRecord] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    activities: list[ActivityEntry] = field(default_factory=list)
    # Highest id ever issued per collection (ids survive hard deletes)
    sequences: dict[str, int] = field(default_factory=dict)

    def find_goal(self, goal_id: GoalId) -> Goal | None:
        for goal in self.goals:
            if goal.id == goal_id:
                return goal
        return None

    def find_user_by_email(self, email: str) -> UserRecord | None:
        for user in self.users:
            if user.email == email:
                return user
        return None

    def find_user(self, user_id: UserId) -> UserRecord | None:
        for user in self.users:
            if user.id == user_id:
                return user
        return None
