"""Dependency Injection Container.

Centralized definition of the verification pipeline's object graph using
dependency-injector.  Stateless collaborators (scorer, detector, state
machine) and the process-wide lock registry are singletons; repositories
and services are built per session.

Usage::

    from app.container import AppContainer

    container = AppContainer()
    container.init_resources()  # create tables, open the session

    submissions = container.submission_service()
    submissions.submit(payload)

    container.shutdown_resources()  # close the session
"""

from dependency_injector import containers, providers

from app.config import Settings
from app.database import Base, build_engine, build_session_factory
from app.engines.confidence_scorer import ConfidenceScorer
from app.engines.fraud_detector import FraudSignalDetector
from app.engines.state_machine import VerificationStateMachine
from app.repositories.activity_repo import ActivityRepository
from app.repositories.appeal_repo import AppealRepository
from app.repositories.audit_repo import AuditRepository
from app.repositories.fraud_alert_repo import FraudAlertRepository
from app.services.appeal_service import AppealService
from app.services.audit_service import AuditService
from app.services.fraud_alert_service import FraudAlertService
from app.services.review_service import ReviewService
from app.services.submission_service import SubmissionService
from app.utils.locks import KeyedLock

import app.models  # noqa: F401  register models with Base.metadata


def _init_database(engine):
    """Initialize database schema."""
    Base.metadata.create_all(bind=engine)
    return engine


def _open_session(factory):
    session = factory()
    try:
        yield session
    finally:
        session.close()


class AppContainer(containers.DeclarativeContainer):
    """Application Dependency Injection Container.

    - Configuration (Settings)
    - Database (engine, session)
    - Repositories (data access)
    - Engines (scoring, fraud rules, lifecycle)
    - Services (one transaction per call)
    """

    # ══════════════════════════════════════════════════════════════════
    # CONFIGURATION
    # ══════════════════════════════════════════════════════════════════

    settings = providers.Singleton(Settings)

    # ══════════════════════════════════════════════════════════════════
    # DATABASE
    # ══════════════════════════════════════════════════════════════════

    db_engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=False,
    )

    db_initialized = providers.Resource(
        _init_database,
        engine=db_engine,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=db_engine,
    )

    # One session per container; closed by shutdown_resources()
    db_session = providers.Resource(
        _open_session,
        factory=session_factory,
    )

    # ══════════════════════════════════════════════════════════════════
    # CONCURRENCY
    # ══════════════════════════════════════════════════════════════════

    locks = providers.Singleton(KeyedLock)

    # ══════════════════════════════════════════════════════════════════
    # REPOSITORIES (Data Access Layer)
    # ══════════════════════════════════════════════════════════════════

    activity_repo = providers.Factory(ActivityRepository, db=db_session)

    appeal_repo = providers.Factory(AppealRepository, db=db_session)

    fraud_alert_repo = providers.Factory(FraudAlertRepository, db=db_session)

    audit_repo = providers.Factory(AuditRepository, db=db_session)

    # ══════════════════════════════════════════════════════════════════
    # ENGINES (Business Logic Layer)
    # ══════════════════════════════════════════════════════════════════

    confidence_scorer = providers.Singleton(
        ConfidenceScorer,
        settings=settings,
    )

    fraud_detector = providers.Singleton(
        FraudSignalDetector,
        settings=settings,
    )

    state_machine = providers.Singleton(
        VerificationStateMachine,
        scorer=confidence_scorer,
        settings=settings,
    )

    # ══════════════════════════════════════════════════════════════════
    # SERVICES (Orchestration Layer)
    # ══════════════════════════════════════════════════════════════════

    audit_service = providers.Factory(
        AuditService,
        audit_repo=audit_repo,
    )

    fraud_alert_service = providers.Factory(
        FraudAlertService,
        db=db_session,
        detector=fraud_detector,
        alert_repo=fraud_alert_repo,
        activity_repo=activity_repo,
        audit=audit_service,
        locks=locks,
    )

    submission_service = providers.Factory(
        SubmissionService,
        db=db_session,
        state_machine=state_machine,
        activity_repo=activity_repo,
        fraud_alerts=fraud_alert_service,
        audit=audit_service,
        locks=locks,
        settings=settings,
    )

    review_service = providers.Factory(
        ReviewService,
        db=db_session,
        state_machine=state_machine,
        activity_repo=activity_repo,
        appeal_repo=appeal_repo,
        fraud_alerts=fraud_alert_service,
        audit=audit_service,
        locks=locks,
        settings=settings,
    )

    appeal_service = providers.Factory(
        AppealService,
        db=db_session,
        state_machine=state_machine,
        activity_repo=activity_repo,
        appeal_repo=appeal_repo,
        fraud_alerts=fraud_alert_service,
        audit=audit_service,
        locks=locks,
        settings=settings,
    )
