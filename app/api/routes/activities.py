"""Activity Routes — the per-owner recent activity feed."""

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_ledger_service
from app.config import Settings, get_settings
from app.schemas.activity import ActivityResponse
from app.services.goal_ledger_service import GoalLedgerService

router = APIRouter(prefix="/api/v1/activities", tags=["activities"])


@router.get("/{owner_id}", response_model=list[ActivityResponse])
async def list_activities(
    owner_id: int,
    limit: int | None = Query(None, ge=1, le=100),
    service: GoalLedgerService = Depends(get_ledger_service),
    settings: Settings = Depends(get_settings),
):
    """Newest activities first, capped at limit (default from settings)."""
    entries = await service.list_activities(
        owner_id, limit or settings.activity_feed_limit,
    )
    now = service.clock()
    return [ActivityResponse.from_entry(e, now) for e in entries]
