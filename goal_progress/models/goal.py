"""Goal model definitions."""
import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, PlainSerializer, computed_field, field_validator

from goal_progress.utils.dates import as_naive_utc, utcnow
from goal_progress.utils.numbers import percent_of

# Decimals go out to clients as JSON numbers, never as strings
JsonDecimal = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


def _parse_enum(enum_cls, value, fallback):
    """Case-insensitive enum lookup that falls back instead of raising."""
    if value is None:
        return fallback
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return fallback


class GoalHorizon(str, Enum):
    """Advisory time horizon of a goal."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @classmethod
    def parse(cls, value) -> "GoalHorizon":
        """Map a stored value to a horizon, unknown values become SHORT."""
        return _parse_enum(cls, value, cls.SHORT)


class GoalCategory(str, Enum):
    """Goal categories. Each selects a progress aggregation."""

    STRENGTH = "strength"
    ENDURANCE = "endurance"
    FLEXIBILITY = "flexibility"
    WEIGHT_LOSS = "weight_loss"
    MUSCLE_GAIN = "muscle_gain"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "GoalCategory":
        """Map a stored value to a category, unknown values become OTHER."""
        return _parse_enum(cls, value, cls.OTHER)


class GoalStatus(str, Enum):
    """Goal lifecycle states."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"

    @classmethod
    def parse(cls, value) -> "GoalStatus":
        """Map a stored value to a status, unknown values become IN_PROGRESS."""
        return _parse_enum(cls, value, cls.IN_PROGRESS)


class GoalBase(BaseModel):
    """Base goal fields."""

    description: str = Field(min_length=5, max_length=200)
    horizon: GoalHorizon
    category: GoalCategory
    unit: str = Field(min_length=1, max_length=20)
    notes: Optional[str] = Field(default=None, max_length=500)


class GoalCreate(GoalBase):
    """
    Goal creation model.

    Target and date range are checked by the service so that violations
    surface as InvalidTarget / InvalidRange instead of a generic 422.
    """

    target_value: Decimal
    start_date: Optional[datetime] = None
    end_date: datetime
    weekly_target: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return as_naive_utc(value)


class GoalUpdate(BaseModel):
    """Goal update model - only fields sent by the client are applied."""

    description: Optional[str] = Field(default=None, min_length=5, max_length=200)
    target_value: Optional[Decimal] = None
    current_value: Optional[Decimal] = Field(default=None, ge=0)
    end_date: Optional[datetime] = None
    status: Optional[GoalStatus] = None
    weekly_target: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("end_date")
    @classmethod
    def normalize_end_date(cls, value):
        return as_naive_utc(value)


class Goal(GoalBase):
    """Full goal model with database fields and derived progress."""

    id: Optional[str] = Field(default=None, alias="_id", serialization_alias="id")
    user_id: str
    target_value: JsonDecimal
    current_value: JsonDecimal = Decimal("0")
    start_date: datetime
    end_date: datetime
    status: GoalStatus = GoalStatus.IN_PROGRESS
    weekly_target: Optional[JsonDecimal] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @computed_field
    @property
    def progress_percent(self) -> int:
        """round(current / target * 100)."""
        return percent_of(self.current_value, self.target_value)

    @computed_field
    @property
    def days_remaining(self) -> int:
        """Whole days until the deadline, negative once it has passed."""
        seconds = (self.end_date - utcnow()).total_seconds()
        return math.ceil(seconds / 86400)

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return utcnow() > self.end_date and self.status != GoalStatus.COMPLETED
