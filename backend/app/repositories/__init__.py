"""Data access repositories.

These fill the store roles of the pipeline: ActivityRepository is the
activity store, FraudAlertRepository the alert store, AuditRepository
the append-only audit store.
"""

from app.repositories.activity_repo import ActivityRepository
from app.repositories.appeal_repo import AppealRepository
from app.repositories.audit_repo import AuditRepository
from app.repositories.base import BaseRepository
from app.repositories.fraud_alert_repo import FraudAlertRepository

__all__ = [
    "BaseRepository",
    "ActivityRepository",
    "AppealRepository",
    "FraudAlertRepository",
    "AuditRepository",
]
