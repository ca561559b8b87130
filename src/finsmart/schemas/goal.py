"""Request/response schemas for savings goals."""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, computed_field, model_validator

from finsmart.models.goal import GoalCategory, GoalPriority, GoalStatus, ReminderFrequency
from finsmart.schemas.common import MoneyMeta, PaginationMeta
from finsmart.schemas.transaction import TransactionResponse


def _future_deadline(value: date) -> date:
    if value <= date.today():
        raise ValueError("deadline must be in the future")
    return value


FutureDate = Annotated[date, AfterValidator(_future_deadline)]


class GoalCreate(BaseModel):
    """Request to create a savings goal."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3, max_length=100)
    description: str | None = Field(None, max_length=500)
    target_amount: int = Field(ge=1, description="Target in minor units (cents)")
    start_date: date | None = Field(None, description="Defaults to today")
    deadline: FutureDate | None = None
    category: GoalCategory = GoalCategory.SAVINGS
    priority: GoalPriority = GoalPriority.MEDIUM
    reminder_frequency: ReminderFrequency = ReminderFrequency.WEEKLY

    @model_validator(mode="after")
    def deadline_after_start(self) -> "GoalCreate":
        start = self.start_date or date.today()
        if self.deadline is not None and self.deadline <= start:
            raise ValueError("deadline must be after the start date")
        return self


class GoalUpdate(BaseModel):
    """Partial update of a goal. Amounts only change through contributions."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, max_length=500)
    target_amount: int | None = Field(None, ge=1)
    deadline: FutureDate | None = None
    category: GoalCategory | None = None
    priority: GoalPriority | None = None
    reminder_frequency: ReminderFrequency | None = None

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "GoalUpdate":
        # Only description and deadline can be cleared
        cleared = sorted(
            name
            for name in self.model_fields_set - {"description", "deadline"}
            if getattr(self, name) is None
        )
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self


class GoalStatusUpdate(BaseModel):
    status: GoalStatus


class ContributionRequest(BaseModel):
    """Manual contribution to a goal."""

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: int = Field(gt=0, description="Amount in minor units")
    description: str | None = Field(None, max_length=200)


class GoalResponse(BaseModel):
    """Goal data for API responses, with derived progress fields."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    target_amount: int
    current_amount: int
    start_date: date
    deadline: date | None = None
    category: str
    priority: str
    status: str
    reminder_frequency: str
    next_reminder_on: date | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def progress(self) -> float:
        """Percent of the target reached, capped at 100."""
        return round(min(self.current_amount / self.target_amount * 100, 100.0), 2)

    @computed_field
    @property
    def remaining_amount(self) -> int:
        return max(self.target_amount - self.current_amount, 0)

    @computed_field
    @property
    def days_remaining(self) -> int | None:
        if self.deadline is None:
            return None
        return (self.deadline - date.today()).days


class GoalStatusStats(BaseModel):
    count: int
    target_total: int
    current_total: int


class GoalListResult(BaseModel):
    goals: list[GoalResponse]
    pagination: PaginationMeta
    stats: dict[str, GoalStatusStats] = Field(description="Aggregates keyed by status")
    money: MoneyMeta


class GoalDetailResult(BaseModel):
    goal: GoalResponse
    recent_income: list[TransactionResponse] = Field(
        description="Latest income transactions since the goal's start date"
    )


class ContributionResult(BaseModel):
    message: str
    completed: bool
    goal: GoalResponse
    transaction: TransactionResponse


class GoalSummary(BaseModel):
    total: int
    active: int
    completed: int
    paused: int
    cancelled: int
    target_total: int
    saved_total: int
    overall_progress: float = Field(description="Saved total as a percent of all targets")


class GoalDashboard(BaseModel):
    summary: GoalSummary
    due_soon: list[GoalResponse]
    money: MoneyMeta
