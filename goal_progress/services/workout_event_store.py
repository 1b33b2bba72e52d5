"""Workout event store - append-only workout history in MongoDB."""
import logging
from datetime import datetime, timedelta
from typing import Optional

from decimal import Decimal

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from goal_progress.config import settings
from goal_progress.errors import AggregationFailed, PersistenceFailed
from goal_progress.models.workout_event import WorkoutEvent, WorkoutEventCreate
from goal_progress.utils.dates import utcnow
from goal_progress.utils.numbers import round_half_up, to_decimal

logger = logging.getLogger(__name__)


def _whole_count(value, default=None) -> Optional[int]:
    """Stored counter as a non-negative int; fractions round half-up."""
    number = to_decimal(value, default=None)
    if number is None:
        return default
    return max(int(round_half_up(number, Decimal("1"))), 0)


def _calories(value) -> Optional[float]:
    number = to_decimal(value, default=None)
    if number is None or number < 0:
        return None
    return float(number)


class WorkoutEventStore:
    """Reads and appends completed workout sessions."""

    def __init__(self, db, timeout_ms: Optional[int] = None):
        """Initialize store with database connection."""
        self.db = db
        self.events = db["workout_history"]
        self.timeout_ms = timeout_ms or settings.store_query_timeout_ms

    def _doc_to_event(self, doc: dict) -> WorkoutEvent:
        """
        Convert database document to WorkoutEvent model.

        Older clients wrote fractional durations, Decimal128 or string
        calories and negative readings; these are coerced here.
        """
        return WorkoutEvent(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            performed_at=doc["performed_at"],
            duration_seconds=_whole_count(doc.get("duration_seconds"), default=0),
            calories_burned=_calories(doc.get("calories_burned")),
            workout_name=doc.get("workout_name"),
            sets_completed=_whole_count(doc.get("sets_completed")),
            reps_completed=_whole_count(doc.get("reps_completed")),
            notes=doc.get("notes"),
            created_at=doc.get("created_at") or doc["performed_at"],
        )

    async def query(
        self,
        owner_id: str,
        start: datetime,
        end: datetime,
    ) -> list[WorkoutEvent]:
        """
        Get events performed within a date window.

        Args:
            owner_id: User ID
            start: Window start (inclusive)
            end: Window end (inclusive)

        Returns:
            Events in the window, oldest first

        Raises:
            AggregationFailed: If the read fails or exceeds the time limit
        """
        query = {
            "user_id": owner_id,
            "performed_at": {"$gte": start, "$lte": end},
        }

        try:
            cursor = self.events.find(query, max_time_ms=self.timeout_ms)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(
                "Workout history query failed for user %s", owner_id, exc_info=True
            )
            raise AggregationFailed() from e

        try:
            return [self._doc_to_event(doc) for doc in docs]
        except ValidationError as e:
            logger.error(
                "Unreadable workout history for user %s", owner_id, exc_info=True
            )
            raise AggregationFailed() from e

    async def record(
        self,
        user_id: str,
        event_create: WorkoutEventCreate,
    ) -> WorkoutEvent:
        """
        Append a completed session to the history.

        Args:
            user_id: User ID who performed the session
            event_create: Session data

        Returns:
            Stored workout event

        Raises:
            PersistenceFailed: If the insert fails
        """
        now = utcnow()
        event_doc = {
            "user_id": user_id,
            "performed_at": event_create.performed_at or now,
            "duration_seconds": event_create.duration_seconds,
            "calories_burned": event_create.calories_burned,
            "workout_name": event_create.workout_name,
            "sets_completed": event_create.sets_completed,
            "reps_completed": event_create.reps_completed,
            "notes": event_create.notes,
            "created_at": now,
        }

        try:
            result = await self.events.insert_one(event_doc)
        except PyMongoError as e:
            logger.error("Could not record workout for user %s", user_id, exc_info=True)
            raise PersistenceFailed() from e

        event_doc["_id"] = result.inserted_id
        return self._doc_to_event(event_doc)

    async def list_events(
        self,
        user_id: str,
        days: Optional[int] = None,
        limit: int = 20,
    ) -> list[WorkoutEvent]:
        """
        List a user's sessions, newest first.

        Args:
            user_id: User ID
            days: Optional window, only sessions from the last N days
            limit: Maximum number of sessions

        Returns:
            List of workout events
        """
        query = {"user_id": user_id}
        if days:
            query["performed_at"] = {"$gte": utcnow() - timedelta(days=days)}

        try:
            cursor = (
                self.events.find(query, max_time_ms=self.timeout_ms)
                .sort("performed_at", -1)
                .limit(limit)
            )
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Workout history listing failed for user %s", user_id, exc_info=True)
            raise AggregationFailed("Could not read workout history, please retry") from e

        try:
            return [self._doc_to_event(doc) for doc in docs]
        except ValidationError as e:
            logger.error("Unreadable workout history for user %s", user_id, exc_info=True)
            raise AggregationFailed("Could not read workout history, please retry") from e
