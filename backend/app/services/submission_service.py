"""Activity submission and evidence resubmission.

Both paths fire the Submit transition: the activity is (re)scored
synchronously and auto-classified before the call returns, its fraud
alert is synced, and one audit entry is written in the same commit.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.config import Settings
from app.engines.state_machine import VerificationStateMachine
from app.errors import NotFoundError, PipelineValidationError
from app.models.activity import ActivityModel
from app.models.evidence import EvidenceModel
from app.repositories.activity_repo import ActivityRepository
from app.schemas.activity import (
    Activity,
    ActivityCreate,
    EvidenceRecordCreate,
    EvidenceResubmission,
    VerificationStatus,
)
from app.schemas.audit import Actor, AuditAction
from app.services.audit_service import AuditService
from app.services.fraud_alert_service import FraudAlertService
from app.services.views import activity_view
from app.utils.clock import Clock, utcnow
from app.utils.locks import KeyedLock

logger = logging.getLogger(__name__)


def build_evidence(records: Sequence[EvidenceRecordCreate], start: int, now) -> List[EvidenceModel]:
    return [
        EvidenceModel(position=start + i, uploaded_at=now, **r.model_dump())
        for i, r in enumerate(records)
    ]


class SubmissionService:
    def __init__(
        self,
        db: Session,
        state_machine: VerificationStateMachine,
        activity_repo: ActivityRepository,
        fraud_alerts: FraudAlertService,
        audit: AuditService,
        locks: KeyedLock,
        settings: Settings,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.machine = state_machine
        self.activities = activity_repo
        self.fraud_alerts = fraud_alerts
        self.audit = audit
        self.locks = locks
        self.settings = settings
        self.clock = clock or utcnow

    # ── writes ───────────────────────────────────────────────────────

    def submit(self, payload: ActivityCreate, actor: Optional[Actor] = None) -> Activity:
        """Create an activity, score it, and return it with its provisional status."""
        actor = actor or Actor(id=payload.student_id)
        now = self.clock()
        try:
            activity = ActivityModel(
                student_id=payload.student_id,
                type=payload.type.value,
                title=payload.title,
                organization=payload.organization,
                date=payload.date,
                location=payload.location,
                description=payload.description,
                additional_proof=dict(payload.additional_proof),
                submitted_at=now,
                status=VerificationStatus.PENDING.value,
                ai_confidence_score=0,
                mentor_comments="",
                comment_history=[],
            )
            activity.all_evidence = build_evidence(payload.evidence, 0, now)
            self.activities.create(activity)

            result = self.machine.submit(activity)
            self.fraud_alerts.sync_activity(activity)
            self.audit.record(
                actor,
                AuditAction.ACTIVITY_SUBMITTED,
                "activity",
                activity.id,
                f"'{activity.title}' submitted with {len(payload.evidence)} evidence record(s); "
                f"confidence {result.score} → {activity.status}",
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Activity %d submitted by %s: score=%d status=%s",
                    activity.id, payload.student_id, activity.ai_confidence_score, activity.status)
        return activity_view(activity, self.settings)

    def resubmit_evidence(
        self,
        activity_id: int,
        payload: EvidenceResubmission,
        actor: Optional[Actor] = None,
    ) -> Activity:
        """Replace the evidence set; previous records are kept but superseded."""
        actor = actor or Actor(id=payload.student_id)
        with self.locks.hold(("activity", activity_id)):
            try:
                activity = self.activities.get_for_update(activity_id)
                if activity is None:
                    raise NotFoundError("activity", activity_id)
                if activity.student_id != payload.student_id:
                    raise PipelineValidationError(
                        f"Student {payload.student_id} does not own activity {activity_id}",
                        field="student_id",
                    )

                now = self.clock()
                previous_status = activity.status
                for record in activity.evidence:
                    record.superseded_at = now
                start = max((e.position for e in activity.all_evidence), default=-1) + 1
                activity.all_evidence.extend(build_evidence(payload.evidence, start, now))
                self.activities.update(activity)

                result = self.machine.submit(activity)
                self.fraud_alerts.sync_activity(activity, reopen=True)
                self.audit.record(
                    actor,
                    AuditAction.ACTIVITY_RESUBMITTED,
                    "activity",
                    activity.id,
                    f"Evidence replaced ({len(payload.evidence)} record(s)); "
                    f"confidence {result.score}; {previous_status} → {activity.status}",
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        return activity_view(activity, self.settings)

    # ── reads ────────────────────────────────────────────────────────

    def get_activity(self, activity_id: int) -> Activity:
        activity = self.activities.get_with_evidence(activity_id)
        if activity is None:
            raise NotFoundError("activity", activity_id)
        return activity_view(activity, self.settings)

    def list_activities(
        self,
        *,
        student_id: Optional[str] = None,
        status: Optional[str] = None,
        mentor_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Activity]:
        rows = self.activities.list(
            student_id=student_id, status=status, mentor_id=mentor_id, skip=skip, limit=limit,
        )
        return [activity_view(a, self.settings) for a in rows]
