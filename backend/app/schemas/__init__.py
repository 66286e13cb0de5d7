"""Pydantic schemas for request/response validation and domain types."""

from app.schemas.activity import (
    Activity,
    ActivityBase,
    ActivityCreate,
    ActivityType,
    CommentEntry,
    ConfidenceBand,
    EvidenceRecord,
    EvidenceRecordCreate,
    EvidenceResubmission,
    MentorDecision,
    VerificationState,
    VerificationStatus,
)
from app.schemas.appeal import Appeal, AppealCreate, AppealStatus
from app.schemas.audit import Actor, AuditAction, AuditEntry, AuditQuery
from app.schemas.fraud import (
    AlertAction,
    AlertActionRequest,
    AlertRefreshSummary,
    AlertStatus,
    FraudAlert,
    FraudAlertType,
    FraudSignal,
    Severity,
)

__all__ = [
    "Activity", "ActivityBase", "ActivityCreate", "ActivityType",
    "CommentEntry", "ConfidenceBand", "EvidenceRecord", "EvidenceRecordCreate",
    "EvidenceResubmission", "MentorDecision", "VerificationState", "VerificationStatus",
    "Appeal", "AppealCreate", "AppealStatus",
    "Actor", "AuditAction", "AuditEntry", "AuditQuery",
    "AlertAction", "AlertActionRequest", "AlertRefreshSummary", "AlertStatus",
    "FraudAlert", "FraudAlertType", "FraudSignal", "Severity",
]
