"""Transaction repository with filtering and aggregation queries."""
from datetime import date
from uuid import UUID

from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from finsmart.models.transaction import Transaction, TransactionKind
from finsmart.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model; every query is user-scoped and skips soft-deleted rows."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    @staticmethod
    def _conditions(
        user_id: UUID,
        kind: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
    ) -> list:
        conditions = [Transaction.user_id == user_id, Transaction.is_active == True]
        if kind:
            conditions.append(Transaction.kind == kind)
        if category:
            conditions.append(Transaction.category == category)
        if start_date:
            conditions.append(Transaction.txn_date >= start_date)
        if end_date:
            conditions.append(Transaction.txn_date <= end_date)
        if search:
            conditions.append(Transaction.description.ilike(f"%{search}%"))
        return conditions

    async def get_for_user(self, user_id: UUID, transaction_id: UUID) -> Transaction | None:
        """Get an active transaction only if it belongs to the specified user."""
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
                Transaction.is_active == True,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        kind: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[Transaction]:
        """Filtered page of transactions, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(*self._conditions(user_id, kind, category, start_date, end_date, search))
            .order_by(Transaction.txn_date.desc(), Transaction.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_user(
        self,
        user_id: UUID,
        *,
        kind: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
    ) -> int:
        result = await self.db.execute(
            select(func.count(Transaction.id)).where(
                *self._conditions(user_id, kind, category, start_date, end_date, search)
            )
        )
        return int(result.scalar() or 0)

    async def totals_by_kind(
        self,
        user_id: UUID,
        *,
        kind: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
    ) -> dict[str, tuple[int, int]]:
        """
        Aggregate amount and count per kind.
        Returns dict of {kind: (total_amount, count)}.
        """
        result = await self.db.execute(
            select(
                Transaction.kind,
                func.sum(Transaction.amount).label("total"),
                func.count(Transaction.id).label("count"),
            )
            .where(*self._conditions(user_id, kind, category, start_date, end_date, search))
            .group_by(Transaction.kind)
        )
        return {row.kind: (int(row.total or 0), int(row.count or 0)) for row in result}

    async def summary_by_category(
        self,
        user_id: UUID,
        *,
        kind: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list:
        """Per-category total, count and average, largest total first."""
        total = func.sum(Transaction.amount).label("total")
        result = await self.db.execute(
            select(
                Transaction.category,
                total,
                func.count(Transaction.id).label("count"),
                func.avg(Transaction.amount).label("average"),
            )
            .where(*self._conditions(user_id, kind, None, start_date, end_date))
            .group_by(Transaction.category)
            .order_by(total.desc())
        )
        return list(result.all())

    async def monthly_totals(self, user_id: UUID, year: int) -> dict[tuple[int, str], int]:
        """
        Sum amounts per (month, kind) for one calendar year.
        Returns dict of {(month, kind): total_amount}.
        """
        month = extract("month", Transaction.txn_date).label("month")
        result = await self.db.execute(
            select(month, Transaction.kind, func.sum(Transaction.amount).label("total"))
            .where(
                *self._conditions(
                    user_id, start_date=date(year, 1, 1), end_date=date(year, 12, 31)
                )
            )
            .group_by(month, Transaction.kind)
        )
        return {(int(row.month), row.kind): int(row.total or 0) for row in result}

    async def recent_income_since(
        self, user_id: UUID, since: date, limit: int = 5
    ) -> list[Transaction]:
        """Most recent active income transactions dated on or after ``since``."""
        result = await self.db.execute(
            select(Transaction)
            .where(
                *self._conditions(user_id, kind=TransactionKind.INCOME.value, start_date=since)
            )
            .order_by(Transaction.txn_date.desc(), Transaction.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def soft_delete(self, transaction: Transaction) -> Transaction:
        """Soft delete a transaction by clearing its active flag."""
        transaction.is_active = False
        await self.db.commit()
        await self.db.refresh(transaction)
        return transaction
