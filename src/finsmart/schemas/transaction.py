"""Request/response schemas for transactions."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finsmart.categorization import CATEGORIES
from finsmart.models.transaction import PaymentMethod, TransactionKind
from finsmart.schemas.common import MoneyMeta, PaginationMeta


class TransactionCreate(BaseModel):
    """Request to record an income or expense.

    When ``category`` is omitted it is inferred from the description.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    kind: TransactionKind = Field(description="income or expense")
    description: str = Field(min_length=3, max_length=200)
    amount: int = Field(gt=0, description="Amount in minor units (cents)")
    txn_date: date | None = Field(None, description="Transaction date (defaults to today)")
    category: str | None = Field(None, description="One of the supported categories")
    subcategory: str | None = Field(None, max_length=50)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = Field(None, max_length=500)

    @field_validator("txn_date")
    @classmethod
    def not_in_future(cls, value: date | None) -> date | None:
        if value is not None and value > date.today():
            raise ValueError("date cannot be in the future")
        return value

    @field_validator("category")
    @classmethod
    def known_category(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        value = value.lower()
        if value not in CATEGORIES:
            raise ValueError(f"category must be one of: {', '.join(CATEGORIES)}")
        return value


class TransactionUpdate(TransactionCreate):
    """Full replacement of a transaction's editable fields."""


class TransactionResponse(BaseModel):
    """Transaction data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    kind: str
    description: str
    amount: int = Field(description="Amount in minor units")
    txn_date: date
    category: str
    subcategory: str | None = None
    payment_method: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class TransactionTotals(BaseModel):
    """Income/expense totals over the filtered set."""

    total_income: int
    total_expense: int
    balance: int
    income_count: int
    expense_count: int


class TransactionListResult(BaseModel):
    transactions: list[TransactionResponse]
    pagination: PaginationMeta
    totals: TransactionTotals
    money: MoneyMeta


class CategorySummary(BaseModel):
    """Aggregate for one category."""

    category: str
    total: int = Field(description="Total amount in minor units")
    count: int
    average: float = Field(description="Average amount in minor units")


class CategorySummaryResult(BaseModel):
    categories: list[CategorySummary]
    grand_total: int
    money: MoneyMeta


class MonthlyTrend(BaseModel):
    month: int = Field(ge=1, le=12)
    income: int
    expense: int
    balance: int


class MonthlyTrendsResult(BaseModel):
    year: int
    months: list[MonthlyTrend]
    money: MoneyMeta
