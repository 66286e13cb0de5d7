"""Shared test fixtures.

Every test gets a fresh in-memory SQLite database so tests are fully isolated.
The scorer's base is pinned through ``make_pipeline(base)`` so confidence
scores are exact.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import Settings
from app.database import Base
from app.engines.confidence_scorer import ConfidenceScorer
from app.engines.fraud_detector import FraudSignalDetector
from app.engines.state_machine import VerificationStateMachine
from app.repositories.activity_repo import ActivityRepository
from app.repositories.appeal_repo import AppealRepository
from app.repositories.audit_repo import AuditRepository
from app.repositories.fraud_alert_repo import FraudAlertRepository
from app.schemas.activity import ActivityCreate
from app.services.appeal_service import AppealService
from app.services.audit_service import AuditService
from app.services.fraud_alert_service import FraudAlertService
from app.services.review_service import ReviewService
from app.services.submission_service import SubmissionService
from app.utils.locks import KeyedLock
from tests.fixtures import scenario_payload

import app.models  # noqa: F401


@pytest.fixture()
def db_engine():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(db_engine) -> Session:
    session = sessionmaker(bind=db_engine, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture()
def settings() -> Settings:
    return Settings(database_url="sqlite:///:memory:")


class StepClock:
    """Deterministic clock: each call advances one second."""

    def __init__(self, start: datetime = datetime(2024, 7, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@dataclass
class Pipeline:
    db: Session
    settings: Settings
    scorer: ConfidenceScorer
    machine: VerificationStateMachine
    locks: KeyedLock
    audit: AuditService
    alerts: FraudAlertService
    submissions: SubmissionService
    reviews: ReviewService
    appeals: AppealService

    def set_base(self, base: float) -> None:
        self.scorer.base_score = lambda: base


@pytest.fixture()
def make_pipeline(db, settings):
    """Build the full service graph on the test session with a pinned base score."""

    def _make(base: float = 70.0, **overrides) -> Pipeline:
        s = settings.model_copy(update=overrides) if overrides else settings
        clock = StepClock()
        scorer = ConfidenceScorer(s, base_score=lambda: base)
        machine = VerificationStateMachine(scorer, s, clock=clock)
        locks = KeyedLock()
        audit = AuditService(AuditRepository(db), clock=clock)
        activities = ActivityRepository(db)
        alerts = FraudAlertService(
            db, FraudSignalDetector(s), FraudAlertRepository(db), activities, audit, locks, clock=clock,
        )
        submissions = SubmissionService(db, machine, activities, alerts, audit, locks, s, clock=clock)
        reviews = ReviewService(db, machine, activities, AppealRepository(db), alerts, audit, locks, s, clock=clock)
        appeals = AppealService(db, machine, activities, AppealRepository(db), alerts, audit, locks, s, clock=clock)
        return Pipeline(db, s, scorer, machine, locks, audit, alerts, submissions, reviews, appeals)

    return _make


@pytest.fixture()
def pipeline(make_pipeline) -> Pipeline:
    return make_pipeline(70.0)


# ── Convenience payloads ─────────────────────────────────────────────────

@pytest.fixture()
def clean_payload() -> ActivityCreate:
    """GPS-verified, 95% biometric."""
    return scenario_payload("clean")


@pytest.fixture()
def low_confidence_payload() -> ActivityCreate:
    """No GPS match, 30% biometric."""
    return scenario_payload("low_confidence")


@pytest.fixture()
def duplicate_payload() -> ActivityCreate:
    """Flagged duplicate document."""
    return scenario_payload("duplicate")
