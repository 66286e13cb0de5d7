"""Orchestration services — one transaction and one audit entry per call."""

from app.services.appeal_service import AppealService
from app.services.audit_service import AuditService
from app.services.fraud_alert_service import FraudAlertService
from app.services.review_service import ReviewService
from app.services.submission_service import SubmissionService

__all__ = [
    "AppealService",
    "AuditService",
    "FraudAlertService",
    "ReviewService",
    "SubmissionService",
]
