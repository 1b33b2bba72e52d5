"""Workout history endpoints - record sessions that feed goal progress."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from goal_progress.errors import GoalError
from goal_progress.models.workout_event import WorkoutEvent, WorkoutEventCreate
from goal_progress.routers.deps import get_current_user_id, get_workout_event_store, to_http_error
from goal_progress.services.workout_event_store import WorkoutEventStore


router = APIRouter(prefix="/workout-history", tags=["workout-history"])


@router.post("", response_model=WorkoutEvent, status_code=status.HTTP_201_CREATED)
async def record_workout(
    event: WorkoutEventCreate,
    user_id: str = Depends(get_current_user_id),
    store: WorkoutEventStore = Depends(get_workout_event_store),
):
    """
    Record a completed workout session.

    - Requires authentication
    - performed_at defaults to now
    """
    try:
        return await store.record(user_id=user_id, event_create=event)
    except GoalError as e:
        raise to_http_error(e)


@router.get("", response_model=list[WorkoutEvent])
async def list_workouts(
    days: Optional[int] = Query(None, ge=1, description="Only sessions from the last N days"),
    limit: int = Query(20, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    store: WorkoutEventStore = Depends(get_workout_event_store),
):
    """List recorded sessions, newest first."""
    try:
        return await store.list_events(user_id=user_id, days=days, limit=limit)
    except GoalError as e:
        raise to_http_error(e)
