"""Goal Ledger Service — runs each ledger operation as one document unit of work.

Invariants:
    - Every mutation (create/update/add_money/delete) is exactly one with_document() call,
      so the goal change and its journal entry are persisted together or not at all
    - Reads go through read_document() and never record activity
    - Errors from the core propagate unchanged (no retries, no wrapping)

Design Decisions:
    - Clock injected: tests pin timestamps without patching datetime
    - Results are detached copies from a discarded working document, so callers
      cannot reach into store state
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from app.core import activity_journal, goal_ledger
from app.core.document import ActivityEntry, Goal
from app.core.domain_types import DEFAULT_ACTIVITY_LIMIT, GoalId, UserId
from app.core.goal_ledger import GoalPatch, GoalSummary
from app.infrastructure.document_store import DocumentStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GoalLedgerService:
    """Transport-agnostic entry point for goals and the activity feed."""

    def __init__(
        self,
        store: DocumentStore,
        currency_symbol: str = goal_ledger.DEFAULT_CURRENCY_SYMBOL,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.currency_symbol = currency_symbol
        self.clock = clock

    async def create_goal(
        self, owner_id: UserId, name: str, target: float, current: float = 0,
    ) -> Goal:
        now = self.clock()
        goal = await self.store.with_document(
            lambda doc: goal_ledger.create(doc, owner_id, name, target, now, current),
        )
        logger.info(
            f"Goal created: {goal.name}",
            extra={"owner_id": owner_id, "goal_id": goal.id, "activity_kind": "create_goal"},
        )
        return goal

    async def update_goal(
        self, goal_id: GoalId, patch: GoalPatch, actor_id: UserId | None = None,
    ) -> Goal:
        now = self.clock()
        goal = await self.store.with_document(
            lambda doc: goal_ledger.update(doc, goal_id, patch, now, actor_id),
        )
        logger.info(
            f"Goal updated: {goal.name}",
            extra={"owner_id": goal.owner_id, "goal_id": goal_id, "activity_kind": "update_goal"},
        )
        return goal

    async def add_money(
        self, goal_id: GoalId, amount: float, actor_id: UserId | None = None,
    ) -> Goal:
        now = self.clock()
        goal = await self.store.with_document(
            lambda doc: goal_ledger.add_money(
                doc, goal_id, amount, now, actor_id, self.currency_symbol,
            ),
        )
        logger.info(
            f"Deposit of {amount} to goal {goal_id}, balance {goal.current}/{goal.target}",
            extra={"owner_id": goal.owner_id, "goal_id": goal_id, "activity_kind": "add_money"},
        )
        return goal

    async def delete_goal(self, goal_id: GoalId, actor_id: UserId | None = None) -> Goal:
        now = self.clock()
        goal = await self.store.with_document(
            lambda doc: goal_ledger.delete(doc, goal_id, now, actor_id),
        )
        logger.info(
            f"Goal deleted: {goal.name}",
            extra={"owner_id": goal.owner_id, "goal_id": goal_id, "activity_kind": "delete_goal"},
        )
        return goal

    async def list_goals(self, owner_id: UserId) -> list[Goal]:
        document = await self.store.read_document()
        return goal_ledger.list_for_owner(document, owner_id)

    async def summarize_goals(self, owner_id: UserId) -> GoalSummary:
        return goal_ledger.summarize(await self.list_goals(owner_id))

    async def list_activities(
        self, owner_id: UserId, limit: int = DEFAULT_ACTIVITY_LIMIT,
    ) -> list[ActivityEntry]:
        document = await self.store.read_document()
        return activity_journal.list_for_owner(document, owner_id, limit)
