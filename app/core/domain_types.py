"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - GoalId, ActivityId, UserId wrap ints — ids are positive and never reused
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (snapshot is JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
GoalId = NewType("GoalId", int)
ActivityId = NewType("ActivityId", int)


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_ACTIVITY_LIMIT = 10


# ─── Enums ───────────────────────────────────────────────────────

class Collection(str, Enum):
    """Named collections of the aggregate document."""
    USERS = "users"
    GOALS = "goals"
    ACTIVITIES = "activities"


class ActivityKind(str, Enum):
    """Mutation events recorded in the journal — one per ledger mutation."""
    CREATE_GOAL = "create_goal"
    UPDATE_GOAL = "update_goal"
    ADD_MONEY = "add_money"
    DELETE_GOAL = "delete_goal"
