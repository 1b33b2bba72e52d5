"""Progress aggregation - turns workout history into a goal's current value."""
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable

from goal_progress.models.goal import GoalCategory
from goal_progress.models.workout_event import WorkoutEvent
from goal_progress.services.ports import WorkoutEventSource
from goal_progress.utils.numbers import ZERO, round_half_up, to_decimal

Aggregator = Callable[[list[WorkoutEvent]], Decimal]


def count_events(events: list[WorkoutEvent]) -> Decimal:
    """One unit of progress per session."""
    return Decimal(len(events))


def total_minutes(events: list[WorkoutEvent]) -> Decimal:
    """Summed session duration, in minutes."""
    seconds = sum((Decimal(event.duration_seconds) for event in events), ZERO)
    return seconds / 60


def total_calories(events: list[WorkoutEvent]) -> Decimal:
    """Summed calories; sessions without a reading count as zero."""
    return sum((to_decimal(event.calories_burned) for event in events), ZERO)


AGGREGATORS: dict[GoalCategory, Aggregator] = {
    GoalCategory.STRENGTH: count_events,
    GoalCategory.ENDURANCE: total_minutes,
    GoalCategory.FLEXIBILITY: count_events,
    GoalCategory.WEIGHT_LOSS: total_calories,
    GoalCategory.MUSCLE_GAIN: total_calories,
    GoalCategory.OTHER: count_events,
}

# Categories missing from the table (e.g. raw strings from old documents)
DEFAULT_AGGREGATOR: Aggregator = count_events


def aggregate_progress(
    category: GoalCategory | str,
    events: Iterable[WorkoutEvent],
) -> Decimal:
    """
    Reduce sessions to a progress value in the goal's unit.

    Args:
        category: Goal category, selects the formula
        events: Sessions inside the goal's date window

    Returns:
        Non-negative Decimal rounded half-up to 2 places

    Examples:
        >>> aggregate_progress(GoalCategory.STRENGTH, [])
        Decimal('0.00')
    """
    try:
        aggregator = AGGREGATORS[GoalCategory(category)]
    except (KeyError, ValueError):
        aggregator = DEFAULT_AGGREGATOR
    return round_half_up(aggregator(list(events)))


async def calculate_progress(
    source: WorkoutEventSource,
    *,
    owner_id: str,
    category: GoalCategory | str,
    start: datetime,
    end: datetime,
) -> Decimal:
    """
    Query the owner's history for ``[start, end]`` and aggregate it.

    Raises:
        AggregationFailed: Propagated from the event source; a failed read is
            never reported as zero progress
    """
    events = await source.query(owner_id, start, end)
    return aggregate_progress(category, events)
