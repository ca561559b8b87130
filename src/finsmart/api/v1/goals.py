"""Savings goal endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from finsmart.api.deps import get_current_user, get_goal_service
from finsmart.models.goal import GoalCategory, GoalStatus
from finsmart.models.user import User
from finsmart.schemas.goal import (
    ContributionRequest,
    ContributionResult,
    GoalCreate,
    GoalDashboard,
    GoalDetailResult,
    GoalListResult,
    GoalResponse,
    GoalStatusUpdate,
    GoalUpdate,
)
from finsmart.services.goal import GoalService

router = APIRouter(prefix="/goals", tags=["goals"])


@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a savings goal",
    description="A user can have a limited number of active goals at once (GOAL_003).",
)
async def create_goal(
    data: GoalCreate,
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> GoalResponse:
    goal = await service.create(current_user.id, data)
    return GoalResponse.model_validate(goal)


@router.get(
    "",
    response_model=GoalListResult,
    summary="List goals",
    description="Active goals first, then by priority and deadline. Includes per-status totals.",
)
async def list_goals(
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[int, Query(ge=1, le=50, description="Items per page (1-50)")] = 10,
    status_filter: Annotated[GoalStatus | None, Query(alias="status")] = None,
    category: Annotated[GoalCategory | None, Query()] = None,
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> GoalListResult:
    return await service.list_goals(
        current_user.id,
        page=page,
        limit=limit,
        status=status_filter.value if status_filter else None,
        category=category.value if category else None,
    )


@router.get(
    "/dashboard/summary",
    response_model=GoalDashboard,
    summary="Goals overview",
)
async def goals_dashboard(
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> GoalDashboard:
    return await service.dashboard(current_user.id)


@router.get(
    "/{goal_id}",
    response_model=GoalDetailResult,
    summary="Get a goal with recent income",
)
async def get_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> GoalDetailResult:
    return await service.get_detail(current_user.id, goal_id)


@router.put(
    "/{goal_id}",
    response_model=GoalResponse,
    summary="Update a goal",
)
async def update_goal(
    goal_id: UUID,
    data: GoalUpdate,
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> GoalResponse:
    goal = await service.update(current_user.id, goal_id, data)
    return GoalResponse.model_validate(goal)


@router.post(
    "/{goal_id}/contributions",
    response_model=ContributionResult,
    summary="Contribute to a goal",
    description="""
    Add money to an active goal and record it as an expense.

    Fails with **GOAL_002** when the amount exceeds what is left to reach the
    target; `details.max_amount` holds the largest accepted amount.
    """,
)
async def contribute(
    goal_id: UUID,
    data: ContributionRequest,
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> ContributionResult:
    return await service.contribute(
        goal_id=goal_id,
        user_id=current_user.id,
        amount=data.amount,
        description=data.description,
    )


@router.patch(
    "/{goal_id}/status",
    response_model=GoalResponse,
    summary="Change a goal's status",
)
async def change_goal_status(
    goal_id: UUID,
    data: GoalStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> GoalResponse:
    goal = await service.change_status(current_user.id, goal_id, data.status)
    return GoalResponse.model_validate(goal)


@router.delete(
    "/{goal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a goal",
)
async def delete_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    service: GoalService = Depends(get_goal_service),
) -> None:
    await service.delete(current_user.id, goal_id)
