"""Verification facade — single entry point for non-HTTP consumers.

The scenario CLI (``scripts/run_scenarios.py``) and any batch job should
use this instead of wiring up services directly.  If the internal
pipeline changes (new engines, different repos, etc.) only this file
and the container need updating.

Usage::

    with VerificationFacade() as facade:       # uses Settings() from .env
        activity = facade.submit_activity(payload)
        facade.review(activity.id, MentorDecision(mentor_id="m-1", status="verified"))
        alerts = facade.list_fraud_alerts(status="open")
"""

import logging
from typing import List, Optional

from dependency_injector import providers

from app.config import Settings
from app.container import AppContainer
from app.engines.confidence_scorer import BaseScoreSource, ConfidenceScorer
from app.schemas.activity import (
    Activity,
    ActivityCreate,
    EvidenceResubmission,
    MentorDecision,
)
from app.schemas.appeal import Appeal, AppealCreate
from app.schemas.audit import Actor, AuditEntry, AuditQuery
from app.schemas.fraud import AlertAction, AlertRefreshSummary, FraudAlert

logger = logging.getLogger(__name__)


class VerificationFacade:
    """High-level API for the activity verification pipeline.

    Hides all internal wiring (container, session, repos, engines).
    Returns only Pydantic schemas — never ORM models.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_score: Optional[BaseScoreSource] = None,
    ):
        self._settings = settings or Settings()
        self._container = AppContainer()
        self._container.settings.override(providers.Object(self._settings))
        if base_score is not None:
            self._container.confidence_scorer.override(
                providers.Object(ConfidenceScorer(self._settings, base_score=base_score))
            )
        self._container.init_resources()
        logger.info("Facade ready on %s", self._settings.database_url)

    # ══════════════════════════════════════════════════════════════════
    # ACTIVITY LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def submit_activity(self, payload: ActivityCreate, actor: Optional[Actor] = None) -> Activity:
        return self._container.submission_service().submit(payload, actor=actor)

    def resubmit_evidence(
        self,
        activity_id: int,
        payload: EvidenceResubmission,
        actor: Optional[Actor] = None,
    ) -> Activity:
        return self._container.submission_service().resubmit_evidence(activity_id, payload, actor=actor)

    def review(self, activity_id: int, decision: MentorDecision, actor: Optional[Actor] = None) -> Activity:
        return self._container.review_service().decide(activity_id, decision, actor=actor)

    def appeal(self, activity_id: int, payload: AppealCreate, actor: Optional[Actor] = None) -> Appeal:
        return self._container.appeal_service().submit_appeal(activity_id, payload, actor=actor)

    # ══════════════════════════════════════════════════════════════════
    # FRAUD ALERTS
    # ══════════════════════════════════════════════════════════════════

    def list_fraud_alerts(
        self,
        severity: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[FraudAlert]:
        return self._container.fraud_alert_service().list_alerts(severity=severity, status=status)

    def act_on_alert(self, alert_id: int, action: AlertAction | str, notes: str, actor: Actor) -> FraudAlert:
        return self._container.fraud_alert_service().apply_action(alert_id, AlertAction(action), notes, actor)

    def refresh_fraud_alerts(self, actor: Actor) -> AlertRefreshSummary:
        return self._container.fraud_alert_service().refresh(actor)

    # ══════════════════════════════════════════════════════════════════
    # READ-ONLY QUERIES
    # ══════════════════════════════════════════════════════════════════

    def get_activity(self, activity_id: int) -> Activity:
        return self._container.submission_service().get_activity(activity_id)

    def list_activities(
        self,
        student_id: Optional[str] = None,
        status: Optional[str] = None,
        mentor_id: Optional[str] = None,
    ) -> List[Activity]:
        return self._container.submission_service().list_activities(
            student_id=student_id, status=status, mentor_id=mentor_id,
        )

    def list_appeals(self, activity_id: int) -> List[Appeal]:
        return self._container.appeal_service().list_appeals(activity_id)

    def audit_log(self, query: Optional[AuditQuery] = None) -> List[AuditEntry]:
        return self._container.audit_service().query(query)

    # ── lifecycle ─────────────────────────────────────────────────────

    def close(self) -> None:
        """Close the database session."""
        self._container.shutdown_resources()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
