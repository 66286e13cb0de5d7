"""Appeal handler — reopens a decided activity into under_review.

Appeal evidence is stored on the appeal.  It is folded into the
activity's evidence and rescored only when
``Settings.rescore_on_appeal_evidence`` is enabled; by default the
confidence score is left exactly as the last submission produced it.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config import Settings
from app.engines.state_machine import VerificationStateMachine
from app.errors import IneligibleAppealError, NotFoundError, PipelineValidationError
from app.models.appeal import AppealModel
from app.repositories.activity_repo import ActivityRepository
from app.repositories.appeal_repo import AppealRepository
from app.schemas.appeal import Appeal, AppealCreate, AppealStatus
from app.schemas.audit import Actor, AuditAction
from app.services.audit_service import AuditService
from app.services.fraud_alert_service import FraudAlertService
from app.services.submission_service import build_evidence
from app.services.views import appeal_view
from app.utils.clock import Clock, utcnow
from app.utils.locks import KeyedLock

logger = logging.getLogger(__name__)


class AppealService:
    def __init__(
        self,
        db: Session,
        state_machine: VerificationStateMachine,
        activity_repo: ActivityRepository,
        appeal_repo: AppealRepository,
        fraud_alerts: FraudAlertService,
        audit: AuditService,
        locks: KeyedLock,
        settings: Settings,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.machine = state_machine
        self.activities = activity_repo
        self.appeals = appeal_repo
        self.fraud_alerts = fraud_alerts
        self.audit = audit
        self.locks = locks
        self.rescore_on_evidence = settings.rescore_on_appeal_evidence
        self.clock = clock or utcnow

    def submit_appeal(self, activity_id: int, payload: AppealCreate, actor: Optional[Actor] = None) -> Appeal:
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
                if self.appeals.get_pending_for_activity(activity.id):
                    raise IneligibleAppealError(
                        f"Activity {activity_id} already has a pending appeal",
                        details={"status": activity.status},
                    )

                previous = self.machine.apply_appeal(activity, payload.student_id, payload.message)

                now = self.clock()
                appeal = self.appeals.create(AppealModel(
                    activity_id=activity.id,
                    student_id=payload.student_id,
                    message=payload.message.strip(),
                    evidence=[e.model_dump(mode="json") for e in payload.evidence],
                    status=AppealStatus.PENDING.value,
                    created_at=now,
                ))

                if payload.evidence and self.rescore_on_evidence:
                    start = max((e.position for e in activity.all_evidence), default=-1) + 1
                    activity.all_evidence.extend(build_evidence(payload.evidence, start, now))
                    self.machine.rescore(activity)
                    self.fraud_alerts.sync_activity(activity, reopen=True)
                else:
                    self.fraud_alerts.sync_activity(activity)

                self.audit.record(
                    actor,
                    AuditAction.APPEAL_SUBMITTED,
                    "activity",
                    activity.id,
                    f"Appeal {appeal.id}: {previous.value} → under_review"
                    + (f" with {len(payload.evidence)} new evidence record(s)" if payload.evidence else ""),
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info("Appeal %d submitted for activity %d", appeal.id, activity_id)
        return appeal_view(appeal)

    def list_appeals(self, activity_id: int) -> List[Appeal]:
        if self.activities.get(activity_id) is None:
            raise NotFoundError("activity", activity_id)
        return [appeal_view(a) for a in self.appeals.get_for_activity(activity_id)]
