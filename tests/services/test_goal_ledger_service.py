"""Goal Ledger Service — end-to-end scenarios through the document store.

Invariants:
    - Each service mutation is one persisted unit of work with one journal entry
    - Failed calls change neither goals nor the journal
    - Concurrent deposits end at the clamped sum
"""

import asyncio

import pytest

from app.core.domain_types import ActivityKind
from app.core.errors import NotFoundError, UnauthorizedError, ValidationError
from app.core.goal_ledger import GoalPatch


async def _activity_count(ledger, owner_id):
    return len(await ledger.list_activities(owner_id, 1_000))


async def test_emergency_fund_deposit_is_capped(ledger):
    goal = await ledger.create_goal(1, "Emergency Fund", 50_000, 15_000)

    updated = await ledger.add_money(goal.id, 40_000)

    assert updated.current == 50_000
    [latest, *_] = await ledger.list_activities(1, 10)
    assert latest.kind == ActivityKind.ADD_MONEY
    assert "40000" in latest.description


async def test_mutations_are_persisted(ledger, fake_repo):
    goal = await ledger.create_goal(1, "Vacation to Goa", 30_000, 8_000)
    await ledger.add_money(goal.id, 2_000)
    assert fake_repo.saves == 2
    assert fake_repo.snapshot["goals"][0]["current"] == 10_000


async def test_update_target_below_current_clamps(ledger):
    goal = await ledger.create_goal(1, "Bike", 5_000, 1_500)
    updated = await ledger.update_goal(goal.id, GoalPatch(target=1_000))
    assert (updated.target, updated.current) == (1_000, 1_000)

    raised = await ledger.update_goal(goal.id, GoalPatch(target=2_000))
    assert (raised.target, raised.current) == (2_000, 1_000)


async def test_delete_then_update_is_not_found(ledger):
    goal = await ledger.create_goal(1, "Old Plan", 100)
    await ledger.delete_goal(goal.id)
    with pytest.raises(NotFoundError):
        await ledger.update_goal(goal.id, GoalPatch(name="Revived"))
    assert await ledger.list_goals(1) == []


async def test_activity_count_grows_by_one_per_success_only(ledger, fake_repo):
    goal = await ledger.create_goal(1, "Fund", 1_000)
    assert await _activity_count(ledger, 1) == 1

    with pytest.raises(ValidationError):
        await ledger.add_money(goal.id, 0)
    with pytest.raises(ValidationError):
        await ledger.add_money(goal.id, -20)
    with pytest.raises(NotFoundError):
        await ledger.delete_goal(goal.id + 100)
    with pytest.raises(ValidationError):
        await ledger.create_goal(1, "", 10)
    assert await _activity_count(ledger, 1) == 1
    assert fake_repo.saves == 1

    await ledger.add_money(goal.id, 5)
    await ledger.update_goal(goal.id, GoalPatch(name="Fund II"))
    await ledger.delete_goal(goal.id)
    assert await _activity_count(ledger, 1) == 4


async def test_rejected_deposit_leaves_goal_unchanged(ledger):
    goal = await ledger.create_goal(1, "Fund", 1_000, 300)
    with pytest.raises(ValidationError):
        await ledger.add_money(goal.id, -1)
    [stored] = await ledger.list_goals(1)
    assert stored.current == 300
    assert stored.updated_at == goal.updated_at


async def test_foreign_owner_is_rejected_before_mutation(ledger):
    goal = await ledger.create_goal(1, "Mine", 1_000)
    with pytest.raises(UnauthorizedError):
        await ledger.add_money(goal.id, 10, actor_id=2)
    with pytest.raises(UnauthorizedError):
        await ledger.delete_goal(goal.id, actor_id=2)
    [stored] = await ledger.list_goals(1)
    assert stored.current == 0
    assert await _activity_count(ledger, 1) == 1
    assert await _activity_count(ledger, 2) == 0


async def test_activity_feed_is_newest_first_and_capped(ledger):
    goal = await ledger.create_goal(1, "Fund", 1_000_000)
    for amount in range(1, 13):
        await ledger.add_money(goal.id, amount)

    feed = await ledger.list_activities(1, 10)

    assert len(feed) == 10
    assert feed[0].description == "Added ₹12 to Fund"
    assert feed[-1].description == "Added ₹3 to Fund"
    assert await _activity_count(ledger, 1) == 13


async def test_goal_ids_increase_across_owners(ledger):
    ids = [
        (await ledger.create_goal(owner, f"G{owner}", 10)).id
        for owner in (1, 2, 1, 3)
    ]
    assert ids == [1, 2, 3, 4]


async def test_concurrent_deposits_end_at_clamped_sum(ledger, fake_repo):
    fake_repo.load_delay = 0.001
    fake_repo.save_delay = 0.001
    goal = await ledger.create_goal(1, "Car Down Payment", 1_000)

    await asyncio.gather(*[ledger.add_money(goal.id, 75) for _ in range(20)])

    [stored] = await ledger.list_goals(1)
    assert stored.current == 1_000
    assert await _activity_count(ledger, 1) == 21


async def test_concurrent_mixed_operations_match_a_serial_order(ledger, fake_repo):
    fake_repo.load_delay = 0.001
    goals = [await ledger.create_goal(1, f"Goal {i}", 10_000) for i in range(3)]

    await asyncio.gather(
        *[ledger.add_money(g.id, 100) for g in goals for _ in range(5)],
        *[ledger.create_goal(2, f"Other {i}", 50) for i in range(5)],
    )

    stored = {g.id: g for g in await ledger.list_goals(1)}
    assert all(stored[g.id].current == 500 for g in goals)
    others = await ledger.list_goals(2)
    assert len({g.id for g in others}) == 5


async def test_summarize_goals(ledger):
    await ledger.create_goal(1, "A", 1_000, 250)
    await ledger.create_goal(1, "B", 1_000, 750)
    summary = await ledger.summarize_goals(1)
    assert summary.total_goals == 2
    assert summary.total_saved == 1_000
    assert summary.average_progress_percent == pytest.approx(50.0)
