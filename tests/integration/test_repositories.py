"""Integration tests for repository layer."""
from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from finsmart.models.goal import Goal
from finsmart.models.transaction import Transaction
from finsmart.models.user import User
from finsmart.repositories.goal import GoalRepository
from finsmart.repositories.transaction import TransactionRepository
from finsmart.repositories.user import UserRepository


@pytest.fixture
async def user(db_session: AsyncSession) -> User:
    return await UserRepository(db_session).create(
        User(email="repo@example.com", password_hash="hashed_password", full_name="Repo User")
    )


async def _goal(db_session: AsyncSession, user: User, **fields) -> Goal:
    fields.setdefault("title", "Meta")
    fields.setdefault("target_amount", 1000)
    fields.setdefault("start_date", date.today())
    return await GoalRepository(db_session).create(Goal(user_id=user.id, **fields))


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_email_lookup_is_case_insensitive(self, db_session: AsyncSession, user: User):
        repo = UserRepository(db_session)

        assert (await repo.get_by_email("REPO@example.com")).id == user.id
        assert await repo.email_exists("Repo@Example.com") is True
        assert await repo.email_exists("missing@example.com") is False


class TestGoalRepository:
    @pytest.mark.asyncio
    async def test_increment_within_capacity(self, db_session: AsyncSession, user: User):
        goal = await _goal(db_session, user, target_amount=1000, current_amount=900)
        repo = GoalRepository(db_session)

        assert await repo.increment_within_capacity(goal.id, 200) is False
        assert await repo.increment_within_capacity(goal.id, 100) is True

        reloaded = await repo.get_by_id(goal.id)
        assert reloaded.current_amount == 1000
        assert reloaded.status == "active"

    @pytest.mark.asyncio
    async def test_increment_can_complete(self, db_session: AsyncSession, user: User):
        goal = await _goal(db_session, user, target_amount=1000, current_amount=900)
        repo = GoalRepository(db_session)

        assert await repo.increment_within_capacity(goal.id, 100, complete_when_full=True)

        assert (await repo.get_by_id(goal.id)).status == "completed"

    @pytest.mark.asyncio
    async def test_increment_skips_inactive_goal(self, db_session: AsyncSession, user: User):
        goal = await _goal(db_session, user, status="paused")
        repo = GoalRepository(db_session)

        assert await repo.increment_within_capacity(goal.id, 10) is False
        assert await repo.get_capacity(goal.id) is None

    @pytest.mark.asyncio
    async def test_add_contribution_is_user_scoped(self, db_session: AsyncSession, user: User):
        goal = await _goal(db_session, user)
        stranger = await UserRepository(db_session).create(
            User(email="stranger@example.com", password_hash="x", full_name="Stranger")
        )
        repo = GoalRepository(db_session)

        assert await repo.add_contribution(stranger.id, goal.id, 10) is False
        assert await repo.add_contribution(user.id, goal.id, 10) is True

    @pytest.mark.asyncio
    async def test_allocation_order(self, db_session: AsyncSession, user: User):
        today = date.today()
        undated_high = await _goal(db_session, user, title="a", priority="high")
        dated_high = await _goal(
            db_session, user, title="b", priority="high", deadline=today + timedelta(days=90)
        )
        low = await _goal(db_session, user, title="c", priority="low", deadline=today + timedelta(days=1))
        medium = await _goal(db_session, user, title="d", priority="medium")
        await _goal(db_session, user, title="e", priority="high", status="paused")

        goals = await GoalRepository(db_session).get_active_for_allocation(user.id)

        assert [g.id for g in goals] == [dated_high.id, undated_high.id, medium.id, low.id]

    @pytest.mark.asyncio
    async def test_count_active(self, db_session: AsyncSession, user: User):
        await _goal(db_session, user)
        await _goal(db_session, user, status="completed")

        assert await GoalRepository(db_session).count_active(user.id) == 1


class TestTransactionRepository:
    @pytest.mark.asyncio
    async def test_soft_deleted_rows_are_excluded(self, db_session: AsyncSession, user: User):
        repo = TransactionRepository(db_session)
        kept = await repo.create(
            Transaction(user_id=user.id, kind="income", description="Salario", amount=1000)
        )
        removed = await repo.create(
            Transaction(user_id=user.id, kind="income", description="Bono", amount=500)
        )
        await repo.soft_delete(removed)

        assert await repo.count_for_user(user.id) == 1
        assert await repo.get_for_user(user.id, removed.id) is None
        assert await repo.totals_by_kind(user.id) == {"income": (1000, 1)}
        assert [t.id for t in await repo.recent_income_since(user.id, date.today())] == [kept.id]
