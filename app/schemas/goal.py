"""Goal Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - GoalCreate.name stripped and non-empty; target > 0; current >= 0
    - GoalUpdate fields all optional; absent fields are left untouched
    - AddMoneyRequest.amount > 0
    - GoalResponse carries the derived progress_percent (never stored)

Design Decisions:
    - Bounds duplicated from core/goal_ledger.py: requests fail fast with field
      details, the core still enforces them for non-HTTP callers
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.core import goal_ledger
from app.core.document import Goal
from app.core.goal_ledger import GoalPatch, GoalSummary


def _strip_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    return v


class GoalCreate(BaseModel):
    """Goal creation — owner, label, target and optional opening balance."""
    owner_id: int = Field(ge=1)
    name: str = Field(min_length=1, max_length=200)
    target: float = Field(gt=0, allow_inf_nan=False)
    current: float = Field(0, ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class GoalUpdate(BaseModel):
    """Partial goal update."""
    name: str | None = Field(None, min_length=1, max_length=200)
    target: float | None = Field(None, gt=0, allow_inf_nan=False)
    current: float | None = Field(None, ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)

    def to_patch(self) -> GoalPatch:
        return GoalPatch(name=self.name, target=self.target, current=self.current)


class AddMoneyRequest(BaseModel):
    amount: float = Field(gt=0, allow_inf_nan=False)


class GoalResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    target: float
    current: float
    progress_percent: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_goal(cls, goal: Goal) -> "GoalResponse":
        return cls(
            id=goal.id,
            owner_id=goal.owner_id,
            name=goal.name,
            target=goal.target,
            current=goal.current,
            progress_percent=goal_ledger.progress_percent(goal),
            created_at=goal.created_at,
            updated_at=goal.updated_at,
        )


class GoalSummaryResponse(BaseModel):
    total_goals: int
    total_target: float
    total_saved: float
    average_progress_percent: float

    @classmethod
    def from_summary(cls, summary: GoalSummary) -> "GoalSummaryResponse":
        return cls(
            total_goals=summary.total_goals,
            total_target=summary.total_target,
            total_saved=summary.total_saved,
            average_progress_percent=summary.average_progress_percent,
        )
