"""Tests for Pydantic models."""
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pydantic import ValidationError


def _goal(**overrides):
    from goal_progress.models.goal import Goal

    now = datetime(2025, 3, 1, 6, 0)
    data = {
        "_id": "507f1f77bcf86cd799439011",
        "user_id": "user123",
        "description": "Twenty pull-up sessions",
        "horizon": "long",
        "category": "strength",
        "unit": "sessions",
        "target_value": Decimal("20"),
        "current_value": Decimal("5"),
        "start_date": now,
        "end_date": now + timedelta(days=60),
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Goal(**data)


class TestGoalEnums:
    """Tests for goal enums."""

    def test_category_values(self):
        """Test GoalCategory enum has correct values."""
        from goal_progress.models.goal import GoalCategory

        assert [c.value for c in GoalCategory] == [
            "strength",
            "endurance",
            "flexibility",
            "weight_loss",
            "muscle_gain",
            "other",
        ]

    def test_status_values(self):
        """Test GoalStatus enum has correct values."""
        from goal_progress.models.goal import GoalStatus

        assert GoalStatus.IN_PROGRESS.value == "in_progress"
        assert GoalStatus.COMPLETED.value == "completed"
        assert GoalStatus.PAUSED.value == "paused"

    def test_horizon_values(self):
        """Test GoalHorizon enum has correct values."""
        from goal_progress.models.goal import GoalHorizon

        assert {h.value for h in GoalHorizon} == {"short", "medium", "long"}

    def test_category_parse_unknown(self):
        """Test unknown categories parse to OTHER."""
        from goal_progress.models.goal import GoalCategory

        assert GoalCategory.parse("endurance") is GoalCategory.ENDURANCE
        assert GoalCategory.parse("calisthenics") is GoalCategory.OTHER
        assert GoalCategory.parse(None) is GoalCategory.OTHER
        assert GoalCategory.parse("Weight_Loss") is GoalCategory.WEIGHT_LOSS
        assert GoalCategory.parse(GoalCategory.STRENGTH) is GoalCategory.STRENGTH

    def test_status_and_horizon_parse(self):
        """Test status and horizon parsing is case-insensitive with fallbacks."""
        from goal_progress.models.goal import GoalHorizon, GoalStatus

        assert GoalStatus.parse("Completed") is GoalStatus.COMPLETED
        assert GoalStatus.parse("archived") is GoalStatus.IN_PROGRESS
        assert GoalHorizon.parse("LONG") is GoalHorizon.LONG
        assert GoalHorizon.parse(3) is GoalHorizon.SHORT


class TestGoalCreateModel:
    """Tests for GoalCreate."""

    def test_goal_create_minimal(self):
        """Test creating a goal with required fields only."""
        from goal_progress.models.goal import GoalCreate

        goal = GoalCreate(
            description="Run 100 minutes",
            horizon="short",
            category="endurance",
            unit="minutes",
            target_value=100,
            end_date=datetime(2025, 4, 1),
        )

        assert goal.target_value == Decimal("100")
        assert goal.start_date is None
        assert goal.weekly_target is None

    def test_goal_create_missing_required_fields(self):
        """Test that creating a goal without required fields fails."""
        from goal_progress.models.goal import GoalCreate

        with pytest.raises(ValidationError) as exc_info:
            GoalCreate()

        field_names = {e["loc"][0] for e in exc_info.value.errors()}
        assert {"description", "horizon", "category", "unit", "target_value", "end_date"} <= field_names

    def test_goal_create_rejects_short_description(self):
        """Test descriptions need at least five characters."""
        from goal_progress.models.goal import GoalCreate

        with pytest.raises(ValidationError):
            GoalCreate(
                description="abs",
                horizon="short",
                category="strength",
                unit="reps",
                target_value=10,
                end_date=datetime(2025, 4, 1),
            )

    def test_goal_create_converts_aware_dates_to_naive_utc(self):
        """Test timezone-aware input is stored as naive UTC."""
        from goal_progress.models.goal import GoalCreate

        goal = GoalCreate(
            description="Stretch every day",
            horizon="medium",
            category="flexibility",
            unit="sessions",
            target_value=30,
            start_date=datetime(2025, 3, 1, 9, tzinfo=timezone(timedelta(hours=-3))),
            end_date="2025-04-01T00:00:00Z",
        )

        assert goal.start_date == datetime(2025, 3, 1, 12)
        assert goal.end_date == datetime(2025, 4, 1)
        assert goal.end_date.tzinfo is None


class TestGoalUpdateModel:
    """Tests for GoalUpdate."""

    def test_goal_update_partial(self):
        """Test GoalUpdate only records fields that were sent."""
        from goal_progress.models.goal import GoalUpdate

        update = GoalUpdate(notes="x")

        assert update.model_dump(exclude_unset=True) == {"notes": "x"}

    def test_goal_update_rejects_negative_current(self):
        """Test a manual current value cannot be negative."""
        from goal_progress.models.goal import GoalUpdate

        with pytest.raises(ValidationError):
            GoalUpdate(current_value=-1)


class TestGoalModel:
    """Tests for the full Goal model."""

    def test_progress_percent(self):
        """Test percent is derived from current and target."""
        assert _goal().progress_percent == 25
        assert _goal(current_value=Decimal("0")).progress_percent == 0

    def test_days_remaining_and_overdue(self):
        """Test deadline helpers for past and future deadlines."""
        from goal_progress.utils.dates import utcnow

        now = utcnow()
        future = _goal(start_date=now - timedelta(days=1), end_date=now + timedelta(days=3, hours=1))
        past = _goal(start_date=now - timedelta(days=10), end_date=now - timedelta(days=2))
        done = _goal(end_date=now - timedelta(days=2), status="completed")

        assert future.days_remaining == 4
        assert future.is_overdue is False
        assert past.is_overdue is True
        assert done.is_overdue is False

    def test_json_serializes_decimals_as_numbers(self):
        """Test decimals go out as JSON numbers under the id alias."""
        goal = _goal(current_value=Decimal("12.50"), weekly_target=Decimal("3"))

        data = goal.model_dump(mode="json", by_alias=True)

        assert data["id"] == "507f1f77bcf86cd799439011"
        assert data["target_value"] == 20.0
        assert data["current_value"] == 12.5
        assert data["weekly_target"] == 3.0
        assert data["progress_percent"] == 63
        assert "is_overdue" in data
        assert "days_remaining" in data


class TestWorkoutEventModels:
    """Tests for workout event models."""

    def test_workout_event_create_defaults(self):
        """Test optional session fields default to None."""
        from goal_progress.models.workout_event import WorkoutEventCreate

        event = WorkoutEventCreate(duration_seconds=1200)

        assert event.performed_at is None
        assert event.calories_burned is None

    def test_workout_event_create_rejects_negative_duration(self):
        """Test durations cannot be negative."""
        from goal_progress.models.workout_event import WorkoutEventCreate

        with pytest.raises(ValidationError):
            WorkoutEventCreate(duration_seconds=-5)
