"""Domain errors raised by the verification pipeline.

Every error carries a stable ``kind`` string so calling surfaces can
translate it (HTTP status, UI message) without string matching::

    from app.errors import NotFoundError

    activity = repo.get(activity_id)
    if activity is None:
        raise NotFoundError("activity", activity_id)

Services raise these and never retry them; there is nothing transient
in the pipeline to retry.
"""

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base class for all pipeline errors."""

    kind = "pipeline_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.kind,
            "detail": self.message,
            "details": self.details,
        }


class NotFoundError(PipelineError):
    """Referenced activity / alert / appeal does not exist."""

    kind = "not_found"

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type.replace('_', ' ').capitalize()} {resource_id} not found",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidTransitionError(PipelineError):
    """Requested status change is not reachable from the current state."""

    kind = "invalid_transition"

    def __init__(self, current: str, requested: str, event: str):
        super().__init__(
            f"Cannot apply {event} to move activity from '{current}' to '{requested}'",
            details={"current": current, "requested": requested, "event": event},
        )


class PipelineValidationError(PipelineError):
    """A required field is missing or malformed."""

    kind = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details={"field": field} if field else None)


class IneligibleAppealError(PipelineError):
    """Appeal requested on an activity that is not in an appealable state."""

    kind = "ineligible_appeal"


class InvalidAlertStateError(PipelineError):
    """Action requested on a fraud alert that is no longer open."""

    kind = "invalid_alert_state"

    def __init__(self, alert_id: int, status: str, action: str):
        super().__init__(
            f"Fraud alert {alert_id} is '{status}'; only open alerts accept '{action}'",
            details={"alert_id": alert_id, "status": status, "action": action},
        )
