"""Mentor review — applies human decisions through the state machine."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.config import Settings
from app.domain.transitions import TERMINAL_STATUSES
from app.engines.state_machine import VerificationStateMachine
from app.errors import NotFoundError
from app.repositories.activity_repo import ActivityRepository
from app.repositories.appeal_repo import AppealRepository
from app.schemas.activity import Activity, MentorDecision, VerificationStatus
from app.schemas.appeal import AppealStatus
from app.schemas.audit import Actor, AuditAction
from app.services.audit_service import AuditService
from app.services.fraud_alert_service import FraudAlertService
from app.services.views import activity_view
from app.utils.clock import Clock, utcnow
from app.utils.locks import KeyedLock

logger = logging.getLogger(__name__)

_AUDIT_ACTION = {
    VerificationStatus.VERIFIED: AuditAction.ACTIVITY_VERIFIED,
    VerificationStatus.REJECTED: AuditAction.ACTIVITY_REJECTED,
    VerificationStatus.UNDER_REVIEW: AuditAction.ACTIVITY_UNDER_REVIEW,
}


class ReviewService:
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
        self.settings = settings
        self.clock = clock or utcnow

    def decide(self, activity_id: int, decision: MentorDecision, actor: Optional[Actor] = None) -> Activity:
        """Apply a mentor decision; a terminal outcome resolves pending appeals."""
        actor = actor or Actor(id=decision.mentor_id or "unknown", name=decision.mentor_name)
        with self.locks.hold(("activity", activity_id)):
            try:
                activity = self.activities.get_for_update(activity_id)
                if activity is None:
                    raise NotFoundError("activity", activity_id)

                previous = self.machine.apply_mentor_decision(
                    activity, decision.mentor_id, decision.status, decision.comments,
                )
                target = VerificationStatus(activity.status)

                resolved = 0
                if target in TERMINAL_STATUSES:
                    now = self.clock()
                    for appeal in self.appeals.get_pending_for_activity(activity.id):
                        appeal.status = AppealStatus.RESOLVED.value
                        appeal.resolved_at = now
                        appeal.resolution = target.value
                        resolved += 1

                self.fraud_alerts.sync_activity(activity)
                detail = f"{previous.value} → {target.value}"
                if decision.comments:
                    detail += f": {decision.comments}"
                if resolved:
                    detail += f" ({resolved} appeal(s) resolved)"
                self.audit.record(actor, _AUDIT_ACTION[target], "activity", activity.id, detail)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        return activity_view(activity, self.settings)
