"""Goal service - progress tracking and the goal completion lifecycle."""
import logging
from decimal import Decimal
from typing import Optional

from goal_progress.config import settings
from goal_progress.errors import Forbidden, InvalidRange, InvalidTarget, NotFound
from goal_progress.models.goal import Goal, GoalCreate, GoalStatus, GoalUpdate
from goal_progress.services.goal_store import GoalStore
from goal_progress.services.ports import GoalRepository, WorkoutEventSource
from goal_progress.services.progress import calculate_progress
from goal_progress.services.workout_event_store import WorkoutEventStore
from goal_progress.utils.dates import utcnow
from goal_progress.utils.numbers import ZERO

logger = logging.getLogger(__name__)

# Patch fields that cannot be cleared; an explicit null is ignored
_REQUIRED_FIELDS = ("description", "target_value", "end_date", "status", "current_value")


def _check_target(target: Decimal) -> None:
    if target <= 0:
        raise InvalidTarget()


def _check_range(start, end) -> None:
    if end <= start:
        raise InvalidRange()


class GoalService:
    """Service for handling goal operations."""

    def __init__(
        self,
        db=None,
        goal_store: Optional[GoalRepository] = None,
        event_source: Optional[WorkoutEventSource] = None,
    ):
        """
        Initialize service with database connection.

        The stores default to the Mongo implementations over ``db``.
        """
        self.goal_store = goal_store if goal_store is not None else GoalStore(db)
        self.event_source = event_source if event_source is not None else WorkoutEventStore(db)

    def _apply_completion_rule(self, goal: Goal) -> bool:
        """
        Mark an in-progress goal completed once it reaches its target.

        Returns:
            True if the status changed
        """
        if goal.status != GoalStatus.IN_PROGRESS:
            return False
        if goal.current_value < goal.target_value:
            return False

        goal.status = GoalStatus.COMPLETED
        goal.completed_at = utcnow()
        logger.info("Goal %s completed (%s/%s)", goal.id, goal.current_value, goal.target_value)
        return True

    async def recompute(self, goal: Goal) -> bool:
        """
        Derive the goal's current value from workout history.

        Mutates ``goal`` in place and does not persist it; callers save when
        this returns True. Completed goals are left untouched, completion is
        never revoked.

        Args:
            goal: Goal to refresh

        Returns:
            True if current value or status changed

        Raises:
            AggregationFailed: If workout history could not be read
        """
        if goal.status == GoalStatus.COMPLETED:
            return False

        current = await calculate_progress(
            self.event_source,
            owner_id=goal.user_id,
            category=goal.category,
            start=goal.start_date,
            end=goal.end_date,
        )

        changed = current != goal.current_value
        goal.current_value = current
        completed = self._apply_completion_rule(goal)
        return changed or completed

    async def _persist(self, goal: Goal) -> Goal:
        goal.updated_at = utcnow()
        return await self.goal_store.save(goal)

    async def _load_owned(self, user_id: str, goal_id: str) -> Goal:
        """
        Load a goal and check the requester owns it.

        Raises:
            NotFound: If no goal has this ID
            Forbidden: If the goal belongs to another user
        """
        goal = await self.goal_store.load(goal_id)
        if goal is None:
            raise NotFound()
        if goal.user_id != user_id:
            logger.warning("User %s denied access to goal %s", user_id, goal_id)
            raise Forbidden()
        return goal

    async def create_goal(
        self,
        user_id: str,
        goal_create: GoalCreate,
    ) -> Goal:
        """
        Create a new goal.

        The goal starts in progress at zero and is recomputed before it is
        first saved, so history that already satisfies it completes it
        immediately.

        Args:
            user_id: User ID who owns the goal
            goal_create: Goal creation data

        Returns:
            Created goal object

        Raises:
            InvalidRange: If end date is not after start date
            InvalidTarget: If target value is not positive
        """
        now = utcnow()
        start_date = goal_create.start_date or now

        _check_range(start_date, goal_create.end_date)
        _check_target(goal_create.target_value)

        goal = Goal(
            user_id=user_id,
            description=goal_create.description,
            horizon=goal_create.horizon,
            category=goal_create.category,
            unit=goal_create.unit,
            target_value=goal_create.target_value,
            current_value=ZERO,
            start_date=start_date,
            end_date=goal_create.end_date,
            status=GoalStatus.IN_PROGRESS,
            weekly_target=goal_create.weekly_target,
            notes=goal_create.notes,
            created_at=now,
            updated_at=now,
        )

        await self.recompute(goal)
        goal = await self.goal_store.save(goal)

        logger.info("Created goal %s for user %s", goal.id, user_id)
        return goal

    async def get_goal(
        self,
        user_id: str,
        goal_id: str,
    ) -> Goal:
        """
        Get a single goal with fresh progress.

        Recomputes progress and saves the goal if that changed anything.

        Raises:
            NotFound: If goal not found
            Forbidden: If goal belongs to another user
        """
        goal = await self._load_owned(user_id, goal_id)

        if await self.recompute(goal):
            goal = await self._persist(goal)

        return goal

    async def list_goals(
        self,
        user_id: str,
        status: Optional[str] = None,
    ) -> list[Goal]:
        """
        List goals for a user with fresh progress.

        Every goal is recomputed (and saved if changed) before the status
        filter runs, so a goal completed by this very call is filtered by its
        new status.

        Args:
            user_id: User ID
            status: Optional status filter, surrounding whitespace ignored

        Returns:
            List of goals, nearest deadline first
        """
        goals = []
        for goal in await self.goal_store.load_all_by_owner(user_id):
            if await self.recompute(goal):
                goal = await self._persist(goal)
            goals.append(goal)

        wanted = status.strip() if status else ""
        if wanted:
            goals = [goal for goal in goals if goal.status.value == wanted]

        return goals

    async def update_goal(
        self,
        user_id: str,
        goal_id: str,
        goal_update: GoalUpdate,
    ) -> Goal:
        """
        Update a goal.

        Only fields sent by the client change. An explicit ``current_value``
        is stored as given for this call, otherwise progress is recomputed.

        Args:
            user_id: User ID
            goal_id: Goal ID
            goal_update: Update data

        Returns:
            Updated goal

        Raises:
            NotFound: If goal not found
            Forbidden: If goal belongs to another user
            InvalidTarget: If the new target is not positive
            InvalidRange: If the new end date is not after the start date
        """
        changes = goal_update.model_dump(exclude_unset=True)
        for field in _REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]

        goal = await self._load_owned(user_id, goal_id)

        if "target_value" in changes:
            _check_target(changes["target_value"])

        if "end_date" in changes:
            _check_range(goal.start_date, changes["end_date"])

        manual_current = changes.pop("current_value", None)
        for field, value in changes.items():
            setattr(goal, field, value)

        if "status" in changes:
            if goal.status != GoalStatus.COMPLETED:
                goal.completed_at = None
            elif goal.completed_at is None:
                goal.completed_at = utcnow()

        if manual_current is not None:
            goal.current_value = manual_current
        else:
            await self.recompute(goal)

        self._apply_completion_rule(goal)
        return await self._persist(goal)

    async def refresh_progress(
        self,
        user_id: str,
        goal_id: str,
    ) -> Goal:
        """
        Recompute progress on demand ("sync now"), discarding any manual value.

        Raises:
            NotFound: If goal not found
            Forbidden: If goal belongs to another user
            AggregationFailed: If workout history could not be read
        """
        goal = await self._load_owned(user_id, goal_id)

        await self.recompute(goal)
        self._apply_completion_rule(goal)
        return await self._persist(goal)

    async def delete_goal(
        self,
        user_id: str,
        goal_id: str,
    ) -> dict:
        """
        Hard delete a goal.

        Returns:
            Dictionary with deleted_count

        Raises:
            NotFound: If goal not found (including an earlier delete)
            Forbidden: If goal belongs to another user
        """
        await self._load_owned(user_id, goal_id)

        if not await self.goal_store.delete(goal_id):
            raise NotFound()

        logger.info("Deleted goal %s for user %s", goal_id, user_id)
        return {"deleted_count": 1}

    async def list_completed_goals(
        self,
        user_id: str,
        limit: Optional[int] = None,
    ) -> list[Goal]:
        """
        List completed goals, most recently finished first.

        Args:
            user_id: User ID
            limit: Maximum number of goals, defaults to the configured limit
        """
        limit = limit or settings.completed_goals_default_limit
        return await self.goal_store.load_completed(user_id, limit)
