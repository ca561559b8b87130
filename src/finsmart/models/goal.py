"""Savings goal model."""
from datetime import date
from enum import Enum
from uuid import UUID

from sqlalchemy import BigInteger, CheckConstraint, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finsmart.models.base import BaseModel


class GoalPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Higher rank is funded first.
PRIORITY_RANK: dict[str, int] = {
    GoalPriority.HIGH.value: 3,
    GoalPriority.MEDIUM.value: 2,
    GoalPriority.LOW.value: 1,
}


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class GoalCategory(str, Enum):
    SAVINGS = "savings"
    VACATION = "vacation"
    EMERGENCY = "emergency"
    PURCHASE = "purchase"
    INVESTMENT = "investment"
    EDUCATION = "education"
    OTHER = "other"


class ReminderFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    NEVER = "never"


class Goal(BaseModel):
    """A savings goal with a target amount (minor units) and lifecycle status."""

    __tablename__ = "goals"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    target_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    current_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    category: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GoalCategory.SAVINGS.value
    )
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default=GoalPriority.MEDIUM.value
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GoalStatus.ACTIVE.value
    )
    reminder_frequency: Mapped[str] = mapped_column(
        String(10), nullable=False, default=ReminderFrequency.WEEKLY.value
    )
    next_reminder_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        CheckConstraint("target_amount >= 1", name="ck_goals_target_amount_min"),
        CheckConstraint("current_amount >= 0", name="ck_goals_current_amount_nonneg"),
        Index("ix_goals_user_id_status", "user_id", "status"),
        Index("ix_goals_user_id_deadline", "user_id", "deadline"),
    )

    user: Mapped["User"] = relationship("User", back_populates="goals")

    @property
    def remaining_amount(self) -> int:
        return max(self.target_amount - self.current_amount, 0)

    def __repr__(self) -> str:
        return (
            f"<Goal(id={self.id}, title={self.title}, "
            f"current={self.current_amount}, target={self.target_amount})>"
        )
