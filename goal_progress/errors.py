"""Typed failures raised by the goal services.

Every error carries a stable machine-readable ``kind``, the HTTP status the
routers answer with, and a message that is safe to show to the end client.
Driver exception text never ends up in ``message``; it is logged and chained
with ``raise ... from``.
"""


class GoalError(ValueError):
    """Base class for goal service failures."""

    kind = "goal_error"
    status_code = 400
    retryable = False
    default_message = "Goal request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_detail(self) -> dict:
        """Body of the HTTP error response."""
        return {
            "kind": self.kind,
            "message": self.message,
            "retryable": self.retryable,
        }


class InvalidRange(GoalError):
    kind = "invalid_range"
    status_code = 400
    default_message = "End date must be after start date"


class InvalidTarget(GoalError):
    kind = "invalid_target"
    status_code = 400
    default_message = "Target value must be greater than zero"


class NotFound(GoalError):
    kind = "not_found"
    status_code = 404
    default_message = "Goal not found"


class Forbidden(GoalError):
    kind = "forbidden"
    status_code = 403
    default_message = "Access denied"


class AggregationFailed(GoalError):
    """Workout history could not be read; progress is unknown, not zero."""

    kind = "aggregation_failed"
    status_code = 503
    retryable = True
    default_message = "Could not compute goal progress, please retry"


class PersistenceFailed(GoalError):
    kind = "persistence_failed"
    status_code = 503
    retryable = True
    default_message = "Could not save changes, please retry"
