"""Audit trail schemas."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AuditAction(str, Enum):
    ACTIVITY_SUBMITTED = "activity_submitted"
    ACTIVITY_RESUBMITTED = "activity_resubmitted"
    ACTIVITY_VERIFIED = "activity_verified"
    ACTIVITY_REJECTED = "activity_rejected"
    ACTIVITY_UNDER_REVIEW = "activity_under_review"
    APPEAL_SUBMITTED = "appeal_submitted"
    FRAUD_ALERT_RESOLVED = "fraud_alert_resolved"
    FRAUD_ALERT_ESCALATED = "fraud_alert_escalated"
    FRAUD_ALERT_FALSE_POSITIVE = "fraud_alert_false_positive"
    FRAUD_ALERTS_REFRESHED = "fraud_alerts_refreshed"


class Actor(BaseModel):
    """Who performed a state-changing call."""

    id: str
    name: Optional[str] = None
    ip_address: Optional[str] = None


class AuditEntry(BaseModel):
    id: int
    timestamp: datetime
    actor_id: str
    actor_name: Optional[str] = None
    action: AuditAction
    resource_type: str
    resource_id: str
    details: str
    ip_address: Optional[str] = None

    model_config = {"from_attributes": True}


class AuditQuery(BaseModel):
    actor_id: Optional[str] = None
    action: Optional[AuditAction] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    skip: int = 0
    limit: int = Field(default=100, le=500)

    @field_validator("date_from", "date_to")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Entries are stored as naive UTC; compare like with like."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v
