"""Fraud signal and fraud alert schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class FraudAlertType(str, Enum):
    GPS_MISMATCH = "gps_mismatch"
    DUPLICATE_DOCUMENT = "duplicate_document"
    LOW_BIOMETRIC = "low_biometric"
    SUSPICIOUS_PATTERN = "suspicious_pattern"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(str, Enum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false_positive"


class AlertAction(str, Enum):
    RESOLVE = "resolve"
    ESCALATE = "escalate"
    FALSE_POSITIVE = "false_positive"


class FraudSignal(BaseModel):
    """Output of the detector for one activity; carries no identity."""

    type: FraudAlertType
    severity: Severity
    description: str

    model_config = {"frozen": True}


class FraudAlert(BaseModel):
    id: int
    activity_id: int
    student_id: str
    type: FraudAlertType
    severity: Severity
    description: str
    status: AlertStatus
    detected_at: datetime
    assigned_to: Optional[str] = None
    resolution_notes: Optional[str] = None
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    escalated: bool = False

    model_config = {"from_attributes": True}


class AlertActionRequest(BaseModel):
    action: AlertAction
    notes: str = ""
    actor_id: str
    actor_name: Optional[str] = None


class AlertRefreshSummary(BaseModel):
    scanned: int
    raised: int
    updated: int
    unchanged: int
