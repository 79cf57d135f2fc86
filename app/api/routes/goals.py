"""Goal Routes — HTTP adapter over GoalLedgerService.

Invariants:
    - Each mutating route is exactly one service call (one unit of work)
    - PUT, add-money and DELETE require X-Owner-Id (400 when missing); it must
      own the goal (403 otherwise, checked before mutation)
    - Domain errors bubble to the global LedgerError handler

Design Decisions:
    - GET /goals/{owner_id} and PUT/DELETE /goals/{goal_id} share a path shape;
      HTTP method disambiguates
"""

import logging

from fastapi import APIRouter, Depends, Header, status

from app.api.dependencies import get_ledger_service
from app.schemas.goal import (
    AddMoneyRequest, GoalCreate, GoalResponse, GoalSummaryResponse, GoalUpdate,
)
from app.services.goal_ledger_service import GoalLedgerService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/goals", tags=["goals"])


@router.post(
    "", response_model=GoalResponse, status_code=status.HTTP_201_CREATED,
)
async def create_goal(
    body: GoalCreate, service: GoalLedgerService = Depends(get_ledger_service),
):
    """Create a goal for owner_id."""
    goal = await service.create_goal(
        body.owner_id, body.name, body.target, body.current,
    )
    return GoalResponse.from_goal(goal)


@router.get("/{owner_id}", response_model=list[GoalResponse])
async def list_goals(
    owner_id: int, service: GoalLedgerService = Depends(get_ledger_service),
):
    """All goals of owner_id, oldest first."""
    goals = await service.list_goals(owner_id)
    return [GoalResponse.from_goal(g) for g in sorted(goals, key=lambda g: g.id)]


@router.get("/{owner_id}/summary", response_model=GoalSummaryResponse)
async def summarize_goals(
    owner_id: int, service: GoalLedgerService = Depends(get_ledger_service),
):
    """Dashboard totals for owner_id."""
    return GoalSummaryResponse.from_summary(await service.summarize_goals(owner_id))


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: int,
    body: GoalUpdate,
    x_owner_id: int = Header(),
    service: GoalLedgerService = Depends(get_ledger_service),
):
    """Apply a partial update to goal_id."""
    goal = await service.update_goal(goal_id, body.to_patch(), actor_id=x_owner_id)
    return GoalResponse.from_goal(goal)


@router.post("/{goal_id}/add-money", response_model=GoalResponse)
async def add_money(
    goal_id: int,
    body: AddMoneyRequest,
    x_owner_id: int = Header(),
    service: GoalLedgerService = Depends(get_ledger_service),
):
    """Deposit into goal_id. Amounts past the target are capped."""
    goal = await service.add_money(goal_id, body.amount, actor_id=x_owner_id)
    return GoalResponse.from_goal(goal)


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: int,
    x_owner_id: int = Header(),
    service: GoalLedgerService = Depends(get_ledger_service),
):
    """Delete goal_id permanently."""
    await service.delete_goal(goal_id, actor_id=x_owner_id)
    return {"message": "Goal deleted successfully"}
