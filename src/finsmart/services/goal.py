"""Goal service: lifecycle, manual contributions and the goals dashboard."""

import logging
from datetime import date, timedelta
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from finsmart.config import settings
from finsmart.core.exceptions import CapacityExceededError, NotFoundError, ValidationError
from finsmart.models.goal import Goal, GoalStatus, ReminderFrequency
from finsmart.models.transaction import PaymentMethod, Transaction, TransactionKind
from finsmart.repositories.goal import GoalRepository
from finsmart.repositories.transaction import TransactionRepository
from finsmart.schemas.common import PaginationMeta
from finsmart.schemas.goal import (
    ContributionResult,
    GoalCreate,
    GoalDashboard,
    GoalDetailResult,
    GoalListResult,
    GoalResponse,
    GoalStatusStats,
    GoalSummary,
    GoalUpdate,
)
from finsmart.schemas.transaction import TransactionResponse
from finsmart.services.transaction import money_meta

logger = logging.getLogger(__name__)

ACTIVE = GoalStatus.ACTIVE.value
COMPLETED = GoalStatus.COMPLETED.value

_REMINDER_STEPS = {
    ReminderFrequency.DAILY.value: relativedelta(days=1),
    ReminderFrequency.WEEKLY.value: relativedelta(weeks=1),
    ReminderFrequency.MONTHLY.value: relativedelta(months=1),
}


def next_reminder(base: date, frequency: str, deadline: date | None) -> date | None:
    """Next reminder date after ``base``, or None when reminders do not apply.

    Reminders only make sense for goals with a deadline; a reminder that
    would land after the deadline is clamped to it.
    """
    step = _REMINDER_STEPS.get(frequency)
    if step is None or deadline is None:
        return None
    return min(base + step, deadline)


class GoalService:
    """Service layer for savings goal operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.goal_repo = GoalRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def create(self, user_id: UUID, data: GoalCreate) -> Goal:
        """
        Create a goal for the user.

        Raises:
            ValidationError: GOAL_003 when the user already has the maximum
                number of active goals
        """
        active = await self.goal_repo.count_active(user_id)
        if active >= settings.max_active_goals:
            raise ValidationError(
                "GOAL_003", {"limit": settings.max_active_goals, "active": active}
            )

        start = data.start_date or date.today()
        goal = Goal(
            user_id=user_id,
            title=data.title,
            description=data.description,
            target_amount=data.target_amount,
            current_amount=0,
            start_date=start,
            deadline=data.deadline,
            category=data.category.value,
            priority=data.priority.value,
            status=ACTIVE,
            reminder_frequency=data.reminder_frequency.value,
            next_reminder_on=next_reminder(
                date.today(), data.reminder_frequency.value, data.deadline
            ),
        )
        goal = await self.goal_repo.create(goal)
        logger.info(
            "Goal created",
            extra={"goal_id": str(goal.id), "priority": goal.priority},
        )
        return goal

    async def get(self, user_id: UUID, goal_id: UUID) -> Goal:
        goal = await self.goal_repo.get_for_user(user_id, goal_id)
        if goal is None:
            raise NotFoundError("GOAL_001", {"goal_id": str(goal_id)})
        return goal

    async def list_goals(
        self,
        user_id: UUID,
        *,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        category: str | None = None,
    ) -> GoalListResult:
        goals = await self.goal_repo.list_for_user(
            user_id,
            status=status,
            category=category,
            skip=(page - 1) * limit,
            limit=limit,
        )
        total = await self.goal_repo.count_for_user(user_id, status=status, category=category)
        stats = await self.goal_repo.stats_by_status(user_id)

        return GoalListResult(
            goals=[GoalResponse.model_validate(g) for g in goals],
            pagination=PaginationMeta.build(page, limit, total),
            stats={
                name: GoalStatusStats(count=count, target_total=target, current_total=current)
                for name, (count, target, current) in stats.items()
            },
            money=money_meta(),
        )

    async def get_detail(self, user_id: UUID, goal_id: UUID) -> GoalDetailResult:
        """Goal plus the latest income recorded since it started."""
        goal = await self.get(user_id, goal_id)
        income = await self.transaction_repo.recent_income_since(user_id, goal.start_date)
        return GoalDetailResult(
            goal=GoalResponse.model_validate(goal),
            recent_income=[TransactionResponse.model_validate(t) for t in income],
        )

    async def update(self, user_id: UUID, goal_id: UUID, data: GoalUpdate) -> Goal:
        """
        Apply a partial update.

        Lowering the target to or below the saved amount completes an active
        goal. Changing the deadline or reminder frequency reschedules the
        next reminder.
        """
        goal = await self.get(user_id, goal_id)
        changes = data.model_dump(exclude_unset=True, mode="json")

        deadline = data.deadline if "deadline" in changes else goal.deadline
        if deadline is not None and deadline <= goal.start_date:
            raise ValidationError(
                "VAL_001",
                {"field": "deadline", "message": "deadline must be after the start date"},
            )
        if "deadline" in changes:
            changes["deadline"] = data.deadline

        target = changes.get("target_amount", goal.target_amount)
        if goal.status == ACTIVE and goal.current_amount >= target:
            changes["status"] = COMPLETED

        if "deadline" in changes or "reminder_frequency" in changes:
            changes["next_reminder_on"] = next_reminder(
                date.today(),
                changes.get("reminder_frequency", goal.reminder_frequency),
                deadline,
            )

        goal = await self.goal_repo.update(goal, changes)
        logger.info(
            "Goal updated",
            extra={"goal_id": str(goal.id), "fields": sorted(changes)},
        )
        return goal

    async def change_status(self, user_id: UUID, goal_id: UUID, status: GoalStatus) -> Goal:
        goal = await self.get(user_id, goal_id)
        previous = goal.status
        goal = await self.goal_repo.update(goal, {"status": status.value})
        logger.info(
            "Goal status changed",
            extra={"goal_id": str(goal.id), "from_status": previous, "to_status": goal.status},
        )
        return goal

    async def delete(self, user_id: UUID, goal_id: UUID) -> None:
        """Hard delete. Contribution expenses already recorded are kept."""
        goal = await self.get(user_id, goal_id)
        await self.goal_repo.delete(goal)
        logger.info("Goal deleted", extra={"goal_id": str(goal_id)})

    async def contribute(
        self,
        user_id: UUID,
        goal_id: UUID,
        amount: int,
        description: str | None = None,
    ) -> ContributionResult:
        """
        Manually add money to an active goal.

        The goal increment and the matching expense transaction are committed
        together. The increment is conditional on the remaining capacity, so
        concurrent contributions cannot overshoot the target.

        Raises:
            NotFoundError: GOAL_001 when the goal is missing, not owned by
                the user, or not active
            CapacityExceededError: GOAL_002 with the remaining capacity as
                ``max_amount``
        """
        if amount <= 0:
            raise ValidationError(
                "VAL_001", {"field": "amount", "message": "amount must be positive"}
            )

        if not await self.goal_repo.add_contribution(user_id, goal_id, amount):
            goal = await self.goal_repo.get_for_user(user_id, goal_id, status=ACTIVE)
            if goal is None:
                raise NotFoundError("GOAL_001", {"goal_id": str(goal_id)})
            raise CapacityExceededError(goal.remaining_amount)

        goal = await self.goal_repo.get_for_user(user_id, goal_id)
        label = description or settings.goal_contribution_description
        transaction = Transaction(
            user_id=user_id,
            kind=TransactionKind.EXPENSE.value,
            description=f"{label} - {goal.title}"[:200],
            amount=amount,
            txn_date=date.today(),
            category="otros",
            subcategory=settings.goal_contribution_subcategory,
            payment_method=PaymentMethod.TRANSFER.value,
        )
        self.db.add(transaction)
        await self.db.commit()
        await self.db.refresh(transaction)
        await self.db.refresh(goal)

        completed = goal.status == COMPLETED
        logger.info(
            "Goal contribution recorded",
            extra={
                "goal_id": str(goal.id),
                "transaction_id": str(transaction.id),
                "completed": completed,
            },
        )
        return ContributionResult(
            message="Goal completed" if completed else "Contribution added",
            completed=completed,
            goal=GoalResponse.model_validate(goal),
            transaction=TransactionResponse.model_validate(transaction),
        )

    async def dashboard(self, user_id: UUID) -> GoalDashboard:
        """Per-status counts, overall progress and active goals due soon."""
        stats = await self.goal_repo.stats_by_status(user_id)

        def count(status: GoalStatus) -> int:
            return stats.get(status.value, (0, 0, 0))[0]

        target_total = sum(target for _, target, _ in stats.values())
        saved_total = sum(current for _, _, current in stats.values())
        due_soon = await self.goal_repo.get_due_by(
            user_id, date.today() + timedelta(days=settings.goal_due_soon_days)
        )

        return GoalDashboard(
            summary=GoalSummary(
                total=sum(c for c, _, _ in stats.values()),
                active=count(GoalStatus.ACTIVE),
                completed=count(GoalStatus.COMPLETED),
                paused=count(GoalStatus.PAUSED),
                cancelled=count(GoalStatus.CANCELLED),
                target_total=target_total,
                saved_total=saved_total,
                overall_progress=(
                    round(saved_total / target_total * 100, 2) if target_total else 0.0
                ),
            ),
            due_soon=[GoalResponse.model_validate(g) for g in due_soon],
            money=money_meta(),
        )
