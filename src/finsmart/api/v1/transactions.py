"""Transaction endpoints: income/expense CRUD and reports."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from finsmart.api.deps import get_current_user, get_transaction_service
from finsmart.models.transaction import TransactionKind
from finsmart.models.user import User
from finsmart.schemas.transaction import (
    CategorySummaryResult,
    MonthlyTrendsResult,
    TransactionCreate,
    TransactionListResult,
    TransactionResponse,
    TransactionUpdate,
)
from finsmart.services.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
    description="""
    Record an income or an expense.

    - When **category** is omitted it is inferred from the description.
    - Recording an **income** sets aside a share of it for the user's active
      goals (highest priority and soonest deadline first). That step never
      makes this request fail.
    """,
)
async def create_transaction(
    data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.create(current_user.id, data)
    return TransactionResponse.model_validate(transaction)


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions with filters",
    description="""
    ## Filters
    - **kind**: income or expense
    - **category**: transaction category
    - **start_date**, **end_date**: date range (inclusive)
    - **search**: description search (case-insensitive)

    Newest first. Totals are computed over the same filters.
    """,
)
async def list_transactions(
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page (1-100)")] = 20,
    kind: Annotated[TransactionKind | None, Query(description="income or expense")] = None,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    start_date: Annotated[date | None, Query(description="Filter from date (inclusive)")] = None,
    end_date: Annotated[date | None, Query(description="Filter to date (inclusive)")] = None,
    search: Annotated[str | None, Query(description="Search descriptions")] = None,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    return await service.list_transactions(
        current_user.id,
        page=page,
        limit=limit,
        kind=kind.value if kind else None,
        category=category,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


@router.get(
    "/summary/categories",
    response_model=CategorySummaryResult,
    summary="Totals per category",
)
async def category_summary(
    kind: Annotated[TransactionKind | None, Query(description="income or expense")] = None,
    start_date: Annotated[date | None, Query(description="Filter from date (inclusive)")] = None,
    end_date: Annotated[date | None, Query(description="Filter to date (inclusive)")] = None,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> CategorySummaryResult:
    return await service.category_summary(
        current_user.id,
        kind=kind.value if kind else None,
        start_date=start_date,
        end_date=end_date,
    )


@router.get(
    "/trends/monthly",
    response_model=MonthlyTrendsResult,
    summary="Monthly income and expense for a year",
)
async def monthly_trends(
    year: Annotated[int | None, Query(ge=1900, le=9999, description="Defaults to the current year")] = None,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> MonthlyTrendsResult:
    return await service.monthly_trends(current_user.id, year or date.today().year)


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction",
)
async def get_transaction(
    transaction_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.get(current_user.id, transaction_id)
    return TransactionResponse.model_validate(transaction)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Replace a transaction",
    description="Replaces every editable field. Goal funding is not recalculated.",
)
async def update_transaction(
    transaction_id: UUID,
    data: TransactionUpdate,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.update(current_user.id, transaction_id, data)
    return TransactionResponse.model_validate(transaction)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> None:
    await service.delete(current_user.id, transaction_id)
