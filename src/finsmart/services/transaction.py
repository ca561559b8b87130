"""Transaction service: recording, querying and reporting income/expenses.

Creating an income triggers automatic goal funding (see allocation.py) after
the transaction itself has been committed.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from finsmart.categorization import classify
from finsmart.config import settings
from finsmart.core.exceptions import NotFoundError
from finsmart.models.transaction import Transaction, TransactionKind
from finsmart.repositories.goal import GoalRepository
from finsmart.repositories.transaction import TransactionRepository
from finsmart.schemas.common import MoneyMeta, PaginationMeta
from finsmart.schemas.transaction import (
    CategorySummary,
    CategorySummaryResult,
    MonthlyTrend,
    MonthlyTrendsResult,
    TransactionCreate,
    TransactionListResult,
    TransactionResponse,
    TransactionTotals,
    TransactionUpdate,
)
from finsmart.services.allocation import GoalAllocator

logger = logging.getLogger(__name__)

INCOME = TransactionKind.INCOME.value
EXPENSE = TransactionKind.EXPENSE.value


def money_meta() -> MoneyMeta:
    return MoneyMeta(currency=settings.currency, minor_unit=settings.currency_minor_unit)


class TransactionService:
    """Service layer for transaction operations."""

    def __init__(self, db: AsyncSession, allocator: GoalAllocator | None = None):
        """Initialize transaction service with database session.

        Args:
            db: Database session
            allocator: Goal allocator run after income is recorded
        """
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.allocator = allocator or GoalAllocator(GoalRepository(db))

    def _fields(self, data: TransactionCreate) -> dict:
        return {
            "kind": data.kind.value,
            "description": data.description,
            "amount": data.amount,
            "txn_date": data.txn_date or date.today(),
            "category": data.category or classify(data.description),
            "subcategory": data.subcategory,
            "payment_method": data.payment_method.value,
            "notes": data.notes,
        }

    async def create(self, user_id: UUID, data: TransactionCreate) -> Transaction:
        """Record a transaction, inferring the category when none is given.

        Income additionally funds the user's active goals. That step never
        fails the request.
        """
        transaction = await self.transaction_repo.create(
            Transaction(user_id=user_id, **self._fields(data))
        )
        logger.info(
            "Transaction created",
            extra={
                "transaction_id": str(transaction.id),
                "kind": transaction.kind,
                "category": transaction.category,
                "classified": data.category is None,
            },
        )

        if transaction.kind == INCOME:
            # Detach so a rolled-back allocation cannot expire the returned record.
            self.db.expunge(transaction)
            await self.allocator.allocate_income(user_id, transaction.amount)

        return transaction

    async def get(self, user_id: UUID, transaction_id: UUID) -> Transaction:
        transaction = await self.transaction_repo.get_for_user(user_id, transaction_id)
        if transaction is None:
            raise NotFoundError("TXN_001", {"transaction_id": str(transaction_id)})
        return transaction

    async def update(
        self, user_id: UUID, transaction_id: UUID, data: TransactionUpdate
    ) -> Transaction:
        """Replace the editable fields. Goal funding is not re-run."""
        transaction = await self.get(user_id, transaction_id)
        return await self.transaction_repo.update(transaction, self._fields(data))

    async def delete(self, user_id: UUID, transaction_id: UUID) -> Transaction:
        """Soft delete; the record disappears from every read path."""
        transaction = await self.get(user_id, transaction_id)
        transaction = await self.transaction_repo.soft_delete(transaction)
        logger.info("Transaction deleted", extra={"transaction_id": str(transaction_id)})
        return transaction

    async def list_transactions(
        self,
        user_id: UUID,
        *,
        page: int = 1,
        limit: int = 20,
        kind: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
    ) -> TransactionListResult:
        """Filtered, paginated transactions plus income/expense totals for the same filters."""
        filters = {
            "kind": kind,
            "category": category,
            "start_date": start_date,
            "end_date": end_date,
            "search": search,
        }
        transactions = await self.transaction_repo.list_for_user(
            user_id, skip=(page - 1) * limit, limit=limit, **filters
        )
        total = await self.transaction_repo.count_for_user(user_id, **filters)
        by_kind = await self.transaction_repo.totals_by_kind(user_id, **filters)

        income_total, income_count = by_kind.get(INCOME, (0, 0))
        expense_total, expense_count = by_kind.get(EXPENSE, (0, 0))

        return TransactionListResult(
            transactions=[TransactionResponse.model_validate(t) for t in transactions],
            pagination=PaginationMeta.build(page, limit, total),
            totals=TransactionTotals(
                total_income=income_total,
                total_expense=expense_total,
                balance=income_total - expense_total,
                income_count=income_count,
                expense_count=expense_count,
            ),
            money=money_meta(),
        )

    async def category_summary(
        self,
        user_id: UUID,
        *,
        kind: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> CategorySummaryResult:
        rows = await self.transaction_repo.summary_by_category(
            user_id, kind=kind, start_date=start_date, end_date=end_date
        )
        categories = [
            CategorySummary(
                category=row.category,
                total=int(row.total or 0),
                count=int(row.count or 0),
                average=round(float(row.average or 0), 2),
            )
            for row in rows
        ]
        return CategorySummaryResult(
            categories=categories,
            grand_total=sum(c.total for c in categories),
            money=money_meta(),
        )

    async def monthly_trends(self, user_id: UUID, year: int) -> MonthlyTrendsResult:
        """Income, expense and balance for each month of ``year``, zero-filled."""
        totals = await self.transaction_repo.monthly_totals(user_id, year)
        months = []
        for month in range(1, 13):
            income = totals.get((month, INCOME), 0)
            expense = totals.get((month, EXPENSE), 0)
            months.append(
                MonthlyTrend(month=month, income=income, expense=expense, balance=income - expense)
            )
        return MonthlyTrendsResult(year=year, months=months, money=money_meta())
