"""Shared router dependencies: requester identity and services."""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from goal_progress.database import get_database
from goal_progress.errors import GoalError
from goal_progress.services.goal_service import GoalService
from goal_progress.services.workout_event_store import WorkoutEventStore
from goal_progress.utils.auth import verify_access_token

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    Dependency to get current user ID from JWT token.

    Raises:
        HTTPException: If token is missing or invalid (401)
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return verify_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )


async def get_goal_service(db=Depends(get_database)) -> GoalService:
    return GoalService(db)


async def get_workout_event_store(db=Depends(get_database)) -> WorkoutEventStore:
    return WorkoutEventStore(db)


def to_http_error(error: GoalError) -> HTTPException:
    """Translate a service failure into the HTTP error the client sees."""
    return HTTPException(status_code=error.status_code, detail=error.to_detail())
