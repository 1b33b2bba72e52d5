"""Workout event (completed training session) model definitions."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from goal_progress.utils.dates import as_naive_utc


class WorkoutEventBase(BaseModel):
    """Fields reported by the client at the end of a session."""

    duration_seconds: int = Field(ge=0)
    calories_burned: Optional[float] = Field(default=None, ge=0)
    workout_name: Optional[str] = None
    sets_completed: Optional[int] = Field(default=None, ge=0)
    reps_completed: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class WorkoutEventCreate(WorkoutEventBase):
    """Workout event creation model."""

    performed_at: Optional[datetime] = None

    @field_validator("performed_at")
    @classmethod
    def normalize_performed_at(cls, value):
        return as_naive_utc(value)


class WorkoutEvent(WorkoutEventBase):
    """Stored workout event. Immutable once written."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    performed_at: datetime
    created_at: datetime

    model_config = {"populate_by_name": True}
