"""Automatic goal funding from income.

Whenever a user records income, a fixed share of it (``goal_allocation_rate``,
10% by default) is spread over their active goals: highest priority first,
soonest deadline first within a priority. Each goal receives at most its
remaining capacity and whatever is left flows to the next goal.

Allocation is a side effect of creating the income transaction. It is
best-effort: every per-goal increment is committed on its own, a failure stops
the loop, gets logged and is never raised to the caller. No transaction
records are created for these contributions.
"""

import logging
from decimal import ROUND_DOWN, Decimal
from uuid import UUID

from finsmart.config import settings
from finsmart.models.goal import Goal
from finsmart.repositories.goal import GoalRepository

logger = logging.getLogger(__name__)


def compute_pool(income_amount: int, rate: float) -> int:
    """Share of an income reserved for goals, rounded down to a whole minor unit."""
    share = Decimal(income_amount) * Decimal(str(rate))
    return int(share.to_integral_value(rounding=ROUND_DOWN))


class GoalAllocator:
    """Distributes part of each income across a user's active goals."""

    def __init__(
        self,
        goal_repo: GoalRepository,
        rate: float | None = None,
        max_attempts: int | None = None,
        complete_goals: bool | None = None,
    ):
        """
        Args:
            goal_repo: Goal repository bound to the request session
            rate: Fraction of each income to allocate (default from settings)
            max_attempts: Conditional update attempts per goal when capacity
                changes underneath us (default from settings)
            complete_goals: Mark goals completed when they become full
                (default from settings, off)
        """
        self.goal_repo = goal_repo
        self.rate = settings.goal_allocation_rate if rate is None else rate
        self.max_attempts = (
            settings.goal_allocation_max_attempts if max_attempts is None else max_attempts
        )
        self.complete_goals = (
            settings.goal_allocation_completes_goals
            if complete_goals is None
            else complete_goals
        )

    async def allocate_income(self, user_id: UUID, income_amount: int) -> None:
        """Fund active goals from an income. Never raises."""
        contributions: list[tuple[UUID, int]] = []
        try:
            await self._allocate(user_id, income_amount, contributions)
        except Exception as exc:
            extra = {
                "user_id": str(user_id),
                "error_type": type(exc).__name__,
                "goals_funded": len(contributions),
            }
            if settings.debug:
                logger.exception("Goal allocation failed", extra=extra)
            else:
                logger.error("Goal allocation failed", extra=extra)
            await self._reset_session()
            return

        if contributions:
            logger.info(
                "Income allocated to goals",
                extra={
                    "user_id": str(user_id),
                    "goals_funded": len(contributions),
                    "allocated_amount": sum(amount for _, amount in contributions),
                },
            )

    async def _allocate(
        self,
        user_id: UUID,
        income_amount: int,
        contributions: list[tuple[UUID, int]],
    ) -> None:
        pool = compute_pool(income_amount, self.rate)
        if pool <= 0:
            return

        goals = await self.goal_repo.get_active_for_allocation(user_id)
        for goal in goals:
            if pool <= 0:
                break

            capacity = goal.target_amount - goal.current_amount
            if capacity <= 0:
                continue

            contributed = await self._fund_goal(goal, pool, capacity)
            if contributed > 0:
                contributions.append((goal.id, contributed))
                pool -= contributed

    async def _fund_goal(self, goal: Goal, pool: int, capacity: int) -> int:
        """Add min(pool, capacity) to a goal; returns what was actually added."""
        for _ in range(self.max_attempts):
            amount = min(pool, capacity)
            if await self.goal_repo.increment_within_capacity(
                goal.id, amount, complete_when_full=self.complete_goals
            ):
                return amount

            # Lost a race: another writer changed the goal since we read it.
            capacity = await self.goal_repo.get_capacity(goal.id) or 0
            if capacity <= 0:
                return 0

        logger.warning(
            "Goal capacity kept changing, skipping goal",
            extra={"goal_id": str(goal.id), "attempts": self.max_attempts},
        )
        return 0

    async def _reset_session(self) -> None:
        try:
            await self.goal_repo.db.rollback()
        except Exception as exc:
            logger.error(
                "Session rollback after goal allocation failure failed",
                extra={"error_type": type(exc).__name__},
            )
