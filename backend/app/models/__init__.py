"""SQLAlchemy ORM models — imported here so Base.metadata sees them."""

from app.models.activity import ActivityModel
from app.models.appeal import AppealModel
from app.models.audit_entry import AuditEntryModel
from app.models.evidence import EvidenceModel
from app.models.fraud_alert import FraudAlertModel

__all__ = [
    "ActivityModel",
    "EvidenceModel",
    "AppealModel",
    "FraudAlertModel",
    "AuditEntryModel",
]
