"""Goal store - goal persistence in MongoDB."""
import logging
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from goal_progress.errors import PersistenceFailed
from goal_progress.models.goal import Goal, GoalCategory, GoalHorizon, GoalStatus
from goal_progress.utils.numbers import to_decimal, to_storage

logger = logging.getLogger(__name__)


def _object_id(goal_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(goal_id)
    except (InvalidId, TypeError):
        return None


def _parse_enum_field(doc: dict, field: str, enum_cls):
    raw = doc.get(field)
    value = enum_cls.parse(raw)
    if raw != value.value:
        logger.warning(
            "Goal %s has stored %s %r, reading it as %r",
            doc.get("_id"), field, raw, value.value,
        )
    return value


class GoalStore:
    """Loads and saves goals. Every save is a single full-document write."""

    def __init__(self, db):
        """Initialize store with database connection."""
        self.db = db
        self.goals = db["goals"]

    def _doc_to_goal(self, doc: dict) -> Goal:
        """
        Convert database document to Goal model.

        This is the one place stored values are normalized: decimals may come
        back as Decimal128, float, numeric strings or garbage, and are coerced
        to finite Decimals (0 for target/current, absent for weekly target).
        Status, horizon and category are read case-insensitively, unknown
        values fall back to in_progress, short and other.
        """
        return Goal(
            _id=str(doc["_id"]),
            user_id=str(doc["user_id"]),
            description=doc["description"],
            horizon=_parse_enum_field(doc, "horizon", GoalHorizon),
            category=_parse_enum_field(doc, "category", GoalCategory),
            unit=doc["unit"],
            target_value=to_decimal(doc.get("target_value")),
            current_value=to_decimal(doc.get("current_value")),
            start_date=doc["start_date"],
            end_date=doc["end_date"],
            status=_parse_enum_field(doc, "status", GoalStatus),
            weekly_target=to_decimal(doc.get("weekly_target"), default=None),
            notes=doc.get("notes"),
            completed_at=doc.get("completed_at"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def _goal_to_doc(self, goal: Goal) -> dict:
        """Convert Goal model to a database document (without _id)."""
        return {
            "user_id": goal.user_id,
            "description": goal.description,
            "horizon": goal.horizon.value,
            "category": goal.category.value,
            "unit": goal.unit,
            "target_value": to_storage(goal.target_value),
            "current_value": to_storage(goal.current_value),
            "start_date": goal.start_date,
            "end_date": goal.end_date,
            "status": goal.status.value,
            "weekly_target": to_storage(goal.weekly_target),
            "notes": goal.notes,
            "completed_at": goal.completed_at,
            "created_at": goal.created_at,
            "updated_at": goal.updated_at,
        }

    async def load(self, goal_id: str) -> Optional[Goal]:
        """
        Get a goal by ID regardless of owner.

        Args:
            goal_id: Goal ID

        Returns:
            Goal, or None if the ID is malformed or unknown
        """
        object_id = _object_id(goal_id)
        if object_id is None:
            return None

        try:
            goal_doc = await self.goals.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Could not load goal %s", goal_id, exc_info=True)
            raise PersistenceFailed("Could not load goal, please retry") from e

        if not goal_doc:
            return None
        return self._doc_to_goal(goal_doc)

    async def load_all_by_owner(self, owner_id: str) -> list[Goal]:
        """All goals of a user, nearest deadline first."""
        try:
            cursor = self.goals.find({"user_id": owner_id}).sort("end_date", 1)
            goal_docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Could not load goals of user %s", owner_id, exc_info=True)
            raise PersistenceFailed("Could not load goals, please retry") from e

        return [self._doc_to_goal(doc) for doc in goal_docs]

    async def load_completed(self, owner_id: str, limit: int) -> list[Goal]:
        """Completed goals of a user, most recently finished first."""
        query = {
            "user_id": owner_id,
            "status": GoalStatus.COMPLETED.value,
        }

        try:
            cursor = (
                self.goals.find(query)
                .sort([("completed_at", -1), ("end_date", -1)])
                .limit(limit)
            )
            goal_docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Could not load completed goals of user %s", owner_id, exc_info=True)
            raise PersistenceFailed("Could not load goals, please retry") from e

        return [self._doc_to_goal(doc) for doc in goal_docs]

    async def save(self, goal: Goal) -> Goal:
        """
        Insert a new goal or replace an existing one.

        The whole document is written in one operation so current value and
        status can never be persisted out of step with each other.

        Args:
            goal: Goal to persist; a goal without ID is inserted

        Returns:
            The persisted goal (with ID)

        Raises:
            PersistenceFailed: If the write fails
        """
        goal_doc = self._goal_to_doc(goal)

        try:
            if goal.id is None:
                result = await self.goals.insert_one(goal_doc)
                return goal.model_copy(update={"id": str(result.inserted_id)})

            await self.goals.replace_one(
                {"_id": ObjectId(goal.id)},
                goal_doc,
                upsert=True,
            )
        except PyMongoError as e:
            logger.error("Could not save goal %s", goal.id, exc_info=True)
            raise PersistenceFailed() from e

        return goal

    async def delete(self, goal_id: str) -> bool:
        """
        Hard delete a goal.

        Returns:
            True if a document was removed
        """
        object_id = _object_id(goal_id)
        if object_id is None:
            return False

        try:
            result = await self.goals.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Could not delete goal %s", goal_id, exc_info=True)
            raise PersistenceFailed() from e

        return result.deleted_count > 0
