"""Dependency injection / factory functions for FastAPI.

Singletons (settings, lock registry, engines) come from the process-wide
``AppContainer``; repositories and services are rebuilt per request around
the request's session.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.config import Settings
from app.container import AppContainer
from app.repositories.activity_repo import ActivityRepository
from app.repositories.appeal_repo import AppealRepository
from app.repositories.audit_repo import AuditRepository
from app.repositories.fraud_alert_repo import FraudAlertRepository
from app.services.appeal_service import AppealService
from app.services.audit_service import AuditService
from app.services.fraud_alert_service import FraudAlertService
from app.services.review_service import ReviewService
from app.services.submission_service import SubmissionService

_container: Optional[AppContainer] = None


def get_container() -> AppContainer:
    global _container
    if _container is None:
        _container = AppContainer()
    return _container


def get_settings() -> Settings:
    return get_container().settings()


# ── Per-request (need a DB session) ─────────────────────────────────────

def get_audit_service(db: Session) -> AuditService:
    return AuditService(AuditRepository(db))


def get_fraud_alert_service(db: Session) -> FraudAlertService:
    c = get_container()
    return FraudAlertService(
        db=db,
        detector=c.fraud_detector(),
        alert_repo=FraudAlertRepository(db),
        activity_repo=ActivityRepository(db),
        audit=get_audit_service(db),
        locks=c.locks(),
    )


def get_submission_service(db: Session) -> SubmissionService:
    c = get_container()
    return SubmissionService(
        db=db,
        state_machine=c.state_machine(),
        activity_repo=ActivityRepository(db),
        fraud_alerts=get_fraud_alert_service(db),
        audit=get_audit_service(db),
        locks=c.locks(),
        settings=c.settings(),
    )


def get_review_service(db: Session) -> ReviewService:
    c = get_container()
    return ReviewService(
        db=db,
        state_machine=c.state_machine(),
        activity_repo=ActivityRepository(db),
        appeal_repo=AppealRepository(db),
        fraud_alerts=get_fraud_alert_service(db),
        audit=get_audit_service(db),
        locks=c.locks(),
        settings=c.settings(),
    )


def get_appeal_service(db: Session) -> AppealService:
    c = get_container()
    return AppealService(
        db=db,
        state_machine=c.state_machine(),
        activity_repo=ActivityRepository(db),
        appeal_repo=AppealRepository(db),
        fraud_alerts=get_fraud_alert_service(db),
        audit=get_audit_service(db),
        locks=c.locks(),
        settings=c.settings(),
    )
