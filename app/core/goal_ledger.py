"""Goal Ledger — goal records, balance invariants, and their journal entries.

Invariants:
    - 0 <= goal.current <= goal.target after every operation
    - Deposits beyond the remaining headroom are capped at target, never rejected
    - Every successful mutation appends exactly one ActivityEntry
    - Validation, lookup, and ownership checks run before any mutation, so a
      failed call leaves goals and journal untouched
    - Updates that leave current > target clamp current down to target

Design Decisions:
    - Functions over a borrowed Document: the store owns load/save, the ledger
      owns rules (functional core / imperative shell)
    - Deposit description keeps the requested amount while the balance keeps
      the capped one (audit log shows what the user asked for)
    - GoalPatch uses None for "field absent"; a patch can never null a field
"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.core import activity_journal
from app.core.document import Document, Goal
from app.core.domain_types import ActivityKind, Collection, GoalId, UserId
from app.core.errors import NotFoundError, UnauthorizedError, ValidationError
from app.core.identifiers import next_id

DEFAULT_CURRENCY_SYMBOL = "₹"


@dataclass(frozen=True)
class GoalPatch:
    """Partial update. Fields left as None are not touched."""
    name: str | None = None
    target: float | None = None
    current: float | None = None


@dataclass(frozen=True)
class GoalSummary:
    """Dashboard totals for one owner's goals."""
    total_goals: int
    total_target: float
    total_saved: float
    average_progress_percent: float


# ─── Validation ──────────────────────────────────────────────────

def _check_name(name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Goal name must not be empty", field="name")
    return name.strip()


def _check_amount(value: object, field: str, *, strictly_positive: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number", field=field)
    amount = float(value)
    if not math.isfinite(amount):
        raise ValidationError(f"{field} must be a finite number", field=field)
    if strictly_positive and amount <= 0:
        raise ValidationError(f"{field} must be greater than 0", field=field)
    if not strictly_positive and amount < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    return amount


def _owned_goal(document: Document, goal_id: GoalId, actor_id: UserId | None) -> Goal:
    goal = document.find_goal(goal_id)
    if goal is None:
        raise NotFoundError("Goal", goal_id)
    if actor_id is not None and goal.owner_id != actor_id:
        raise UnauthorizedError(actor_id, goal_id)
    return goal


def format_amount(amount: float) -> str:
    """Render an amount without grouping or exponent, to 12 significant digits.

    40000 -> '40000', 12.5 -> '12.5', 0.001 -> '0.001'
    """
    return format(Decimal(f"{amount:.12g}").normalize(), "f")


# ─── Mutations ───────────────────────────────────────────────────

def create(
    document: Document,
    owner_id: UserId,
    name: str,
    target: float,
    now: datetime,
    current: float = 0,
) -> Goal:
    """Add a goal for owner_id. current above target is clamped to target."""
    clean_name = _check_name(name)
    clean_target = _check_amount(target, "target", strictly_positive=True)
    clean_current = _check_amount(current, "current", strictly_positive=False)

    goal = Goal(
        id=GoalId(next_id(document, Collection.GOALS)),
        owner_id=owner_id,
        name=clean_name,
        target=clean_target,
        current=min(clean_current, clean_target),
        created_at=now,
        updated_at=now,
    )
    document.goals.append(goal)
    activity_journal.record(
        document, owner_id, ActivityKind.CREATE_GOAL,
        f"Created goal: {goal.name}", now, goal_id=goal.id,
    )
    return goal


def update(
    document: Document,
    goal_id: GoalId,
    patch: GoalPatch,
    now: datetime,
    actor_id: UserId | None = None,
) -> Goal:
    """Apply the fields present in patch, then clamp current into [0, target]."""
    new_name = _check_name(patch.name) if patch.name is not None else None
    new_target = (
        _check_amount(patch.target, "target", strictly_positive=True)
        if patch.target is not None else None
    )
    new_current = (
        _check_amount(patch.current, "current", strictly_positive=False)
        if patch.current is not None else None
    )
    goal = _owned_goal(document, goal_id, actor_id)

    if new_name is not None:
        goal.name = new_name
    if new_target is not None:
        goal.target = new_target
    if new_current is not None:
        goal.current = new_current
    goal.current = min(goal.current, goal.target)
    goal.updated_at = now

    activity_journal.record(
        document, goal.owner_id, ActivityKind.UPDATE_GOAL,
        f"Updated goal: {goal.name}", now, goal_id=goal.id,
    )
    return goal


def add_money(
    document: Document,
    goal_id: GoalId,
    amount: float,
    now: datetime,
    actor_id: UserId | None = None,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> Goal:
    """Deposit amount, capped at the goal's target."""
    requested = _check_amount(amount, "amount", strictly_positive=True)
    goal = _owned_goal(document, goal_id, actor_id)

    goal.current = min(goal.current + requested, goal.target)
    goal.updated_at = now

    activity_journal.record(
        document, goal.owner_id, ActivityKind.ADD_MONEY,
        f"Added {currency_symbol}{format_amount(requested)} to {goal.name}",
        now, goal_id=goal.id,
    )
    return goal


def delete(
    document: Document,
    goal_id: GoalId,
    now: datetime,
    actor_id: UserId | None = None,
) -> Goal:
    """Remove the goal permanently. Returns the removed record."""
    goal = _owned_goal(document, goal_id, actor_id)
    document.goals = [g for g in document.goals if g.id != goal_id]
    activity_journal.record(
        document, goal.owner_id, ActivityKind.DELETE_GOAL,
        f"Deleted goal: {goal.name}", now, goal_id=goal.id,
    )
    return goal


# ─── Reads ───────────────────────────────────────────────────────

def list_for_owner(document: Document, owner_id: UserId) -> list[Goal]:
    """Owner's goals. Order carries no meaning; consumers sort for display."""
    return [g for g in document.goals if g.owner_id == owner_id]


def progress_percent(goal: Goal) -> float:
    if goal.target <= 0:
        return 0.0
    return min(goal.current / goal.target, 1.0) * 100


def summarize(goals: list[Goal]) -> GoalSummary:
    if not goals:
        return GoalSummary(0, 0.0, 0.0, 0.0)
    return GoalSummary(
        total_goals=len(goals),
        total_target=sum(g.target for g in goals),
        total_saved=sum(g.current for g in goals),
        average_progress_percent=sum(progress_percent(g) for g in goals) / len(goals),
    )
