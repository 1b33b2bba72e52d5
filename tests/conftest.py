"""Pytest configuration and fixtures."""
import os

# Settings are read at import time, so these must exist before app imports
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from tests.fakes import FakeGoalStore, FakeWorkoutEventStore


@pytest.fixture
def goal_store():
    """Empty in-memory goal store."""
    return FakeGoalStore()


@pytest.fixture
def event_store():
    """Empty in-memory workout history."""
    return FakeWorkoutEventStore()


@pytest.fixture
def goal_service(goal_store, event_store):
    """GoalService wired to the in-memory stores."""
    from goal_progress.services.goal_service import GoalService

    return GoalService(goal_store=goal_store, event_source=event_store)


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user ID."""
    from goal_progress.utils.auth import create_access_token

    def _headers(user_id: str = "user123") -> dict:
        token = create_access_token(user_id=user_id, expires_delta=timedelta(hours=1))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def app_client(goal_service, event_store):
    """
    Create a test client backed by the in-memory stores.

    This fixture:
    - Overrides the service dependencies with in-memory fakes
    - Yields an async HTTP client for testing
    - Removes the overrides after each test
    """
    from goal_progress.main import app
    from goal_progress.routers.deps import get_goal_service, get_workout_event_store

    app.dependency_overrides[get_goal_service] = lambda: goal_service
    app.dependency_overrides[get_workout_event_store] = lambda: event_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
