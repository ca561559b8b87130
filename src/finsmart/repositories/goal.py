"""Goal repository with user-scoped queries and atomic funding updates."""
from datetime import date
from uuid import UUID

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from finsmart.models.goal import PRIORITY_RANK, Goal, GoalStatus
from finsmart.repositories.base import BaseRepository

ACTIVE = GoalStatus.ACTIVE.value
COMPLETED = GoalStatus.COMPLETED.value


def priority_rank():
    """SQL expression ranking priorities (high=3, medium=2, low=1)."""
    return case(PRIORITY_RANK, value=Goal.priority, else_=0)


class GoalRepository(BaseRepository[Goal]):
    """Repository for Goal model.

    Funding methods combine the capacity check and the increment in a single
    conditional UPDATE, so two concurrent writers can never push a goal past
    its target.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(db, Goal)

    async def get_for_user(
        self, user_id: UUID, goal_id: UUID, status: str | None = None
    ) -> Goal | None:
        """Get goal only if it belongs to the specified user (and has ``status``, when given)."""
        query = select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
        if status:
            query = query.where(Goal.status == status)
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def count_active(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Goal.id)).where(Goal.user_id == user_id, Goal.status == ACTIVE)
        )
        return int(result.scalar() or 0)

    async def get_active_for_allocation(self, user_id: UUID) -> list[Goal]:
        """
        Active goals in funding order: priority high to low, then soonest
        deadline. Goals without a deadline come after every dated goal of the
        same priority; oldest goal first among remaining ties.
        """
        result = await self.db.execute(
            select(Goal)
            .where(Goal.user_id == user_id, Goal.status == ACTIVE)
            .order_by(
                priority_rank().desc(),
                Goal.deadline.is_(None),
                Goal.deadline.asc(),
                Goal.created_at.asc(),
                Goal.id.asc(),
            )
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_capacity(self, goal_id: UUID) -> int | None:
        """Remaining capacity of an active goal, None if it is gone or no longer active."""
        result = await self.db.execute(
            select(Goal.target_amount - Goal.current_amount).where(
                Goal.id == goal_id, Goal.status == ACTIVE
            )
        )
        return result.scalar_one_or_none()

    async def increment_within_capacity(
        self, goal_id: UUID, amount: int, complete_when_full: bool = False
    ) -> bool:
        """
        Add ``amount`` to an active goal if it still has that much capacity.

        Commits immediately. Returns False when the goal no longer satisfies
        the condition (paused, deleted, or capacity consumed concurrently).
        """
        values = {"current_amount": Goal.current_amount + amount}
        if complete_when_full:
            values["status"] = case(
                (Goal.current_amount + amount >= Goal.target_amount, COMPLETED),
                else_=Goal.status,
            )
        result = await self.db.execute(
            update(Goal)
            .where(
                Goal.id == goal_id,
                Goal.status == ACTIVE,
                Goal.target_amount - Goal.current_amount >= amount,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def add_contribution(self, user_id: UUID, goal_id: UUID, amount: int) -> bool:
        """
        Add a manual contribution, completing the goal when it reaches target.

        Does not commit: the caller records the matching expense in the same
        database transaction.
        """
        result = await self.db.execute(
            update(Goal)
            .where(
                Goal.id == goal_id,
                Goal.user_id == user_id,
                Goal.status == ACTIVE,
                Goal.current_amount + amount <= Goal.target_amount,
            )
            .values(
                current_amount=Goal.current_amount + amount,
                status=case(
                    (Goal.current_amount + amount >= Goal.target_amount, COMPLETED),
                    else_=Goal.status,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        status: str | None = None,
        category: str | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> list[Goal]:
        """Active goals first, then by priority and deadline, newest last among ties."""
        query = select(Goal).where(Goal.user_id == user_id)
        if status:
            query = query.where(Goal.status == status)
        if category:
            query = query.where(Goal.category == category)
        result = await self.db.execute(
            query.order_by(
                case((Goal.status == ACTIVE, 0), else_=1),
                priority_rank().desc(),
                Goal.deadline.is_(None),
                Goal.deadline.asc(),
                Goal.created_at.desc(),
            )
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_user(
        self, user_id: UUID, *, status: str | None = None, category: str | None = None
    ) -> int:
        query = select(func.count(Goal.id)).where(Goal.user_id == user_id)
        if status:
            query = query.where(Goal.status == status)
        if category:
            query = query.where(Goal.category == category)
        result = await self.db.execute(query)
        return int(result.scalar() or 0)

    async def stats_by_status(self, user_id: UUID) -> dict[str, tuple[int, int, int]]:
        """
        Aggregate goals per status.
        Returns dict of {status: (count, target_total, current_total)}.
        """
        result = await self.db.execute(
            select(
                Goal.status,
                func.count(Goal.id).label("count"),
                func.sum(Goal.target_amount).label("target_total"),
                func.sum(Goal.current_amount).label("current_total"),
            )
            .where(Goal.user_id == user_id)
            .group_by(Goal.status)
        )
        return {
            row.status: (
                int(row.count or 0),
                int(row.target_total or 0),
                int(row.current_total or 0),
            )
            for row in result
        }

    async def get_due_by(self, user_id: UUID, until: date) -> list[Goal]:
        """Active goals whose deadline falls on or before ``until``, soonest first."""
        result = await self.db.execute(
            select(Goal)
            .where(
                Goal.user_id == user_id,
                Goal.status == ACTIVE,
                Goal.deadline.is_not(None),
                Goal.deadline <= until,
            )
            .order_by(Goal.deadline.asc())
        )
        return list(result.scalars().all())
