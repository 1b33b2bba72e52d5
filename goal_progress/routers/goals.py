"""Goal router - API endpoints for goal progress tracking."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from goal_progress.errors import GoalError
from goal_progress.models.goal import Goal, GoalCreate, GoalUpdate
from goal_progress.routers.deps import get_current_user_id, get_goal_service, to_http_error
from goal_progress.services.goal_service import GoalService


router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: GoalCreate,
    user_id: str = Depends(get_current_user_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    Create a new goal.

    - Requires authentication
    - Starts in progress, then progress is computed from workout history
    - Returns 400 if end date is not after start date or target is not positive
    """
    try:
        return await service.create_goal(user_id=user_id, goal_create=goal)
    except GoalError as e:
        raise to_http_error(e)


@router.get("", response_model=list[Goal])
async def list_goals(
    status: Optional[str] = Query(None, description="Filter by status (in_progress, completed, paused)"),
    user_id: str = Depends(get_current_user_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    List goals for the authenticated user.

    - Requires authentication
    - Progress is refreshed for every goal before the status filter applies
    """
    try:
        return await service.list_goals(user_id=user_id, status=status)
    except GoalError as e:
        raise to_http_error(e)


@router.get("/completed", response_model=list[Goal])
async def list_completed_goals(
    limit: Optional[int] = Query(None, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    List completed goals, most recently finished first.

    - Requires authentication
    """
    try:
        return await service.list_completed_goals(user_id=user_id, limit=limit)
    except GoalError as e:
        raise to_http_error(e)


@router.get("/{goal_id}", response_model=Goal)
async def get_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    Get a single goal with refreshed progress.

    - Requires authentication
    - Returns 404 if goal not found, 403 if it belongs to another user
    """
    try:
        return await service.get_goal(user_id=user_id, goal_id=goal_id)
    except GoalError as e:
        raise to_http_error(e)


@router.patch("/{goal_id}", response_model=Goal)
async def update_goal(
    goal_id: str,
    goal_update: GoalUpdate,
    user_id: str = Depends(get_current_user_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    Update a goal.

    - Requires authentication
    - Only fields present in the body change
    - An explicit current_value overrides computed progress for this call
    """
    try:
        return await service.update_goal(
            user_id=user_id,
            goal_id=goal_id,
            goal_update=goal_update,
        )
    except GoalError as e:
        raise to_http_error(e)


@router.post("/{goal_id}/refresh", response_model=Goal)
async def refresh_goal_progress(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    Recompute progress from workout history ("sync now").

    - Requires authentication
    - Discards any manually entered current value
    """
    try:
        return await service.refresh_progress(user_id=user_id, goal_id=goal_id)
    except GoalError as e:
        raise to_http_error(e)


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    service: GoalService = Depends(get_goal_service),
):
    """
    Delete a goal permanently.

    - Requires authentication
    - Returns 404 if goal not found
    """
    try:
        return await service.delete_goal(user_id=user_id, goal_id=goal_id)
    except GoalError as e:
        raise to_http_error(e)
