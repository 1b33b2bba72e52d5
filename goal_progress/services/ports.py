"""
Storage interfaces (ports) the goal engine depends on.

The Motor-backed stores in this package are the default implementations;
tests plug in in-memory fakes with the same shape.
"""
from datetime import datetime
from typing import Optional, Protocol

from goal_progress.models.goal import Goal
from goal_progress.models.workout_event import WorkoutEvent


class WorkoutEventSource(Protocol):
    """Read access to the append-only workout history."""

    async def query(
        self,
        owner_id: str,
        start: datetime,
        end: datetime,
    ) -> list[WorkoutEvent]:
        """
        Events of ``owner_id`` performed within ``[start, end]``, inclusive.

        Raises:
            AggregationFailed: If the read did not complete
        """
        ...


class GoalRepository(Protocol):
    """Persistence for goals. ``save`` writes the whole goal atomically."""

    async def load(self, goal_id: str) -> Optional[Goal]:
        ...

    async def load_all_by_owner(self, owner_id: str) -> list[Goal]:
        ...

    async def load_completed(self, owner_id: str, limit: int) -> list[Goal]:
        ...

    async def save(self, goal: Goal) -> Goal:
        ...

    async def delete(self, goal_id: str) -> bool:
        ...
