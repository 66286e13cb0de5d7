"""Fraud alert registry — materialized, queryable view of fraud signals.

Alerts are keyed by activity (one row per activity).  The registry is
told about every activity transition through ``sync_activity``; admin
actions then move an alert out of ``open``.  An alert's status is
independent of the activity's verification status.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.engines.fraud_detector import FraudSignalDetector
from app.errors import InvalidAlertStateError, NotFoundError
from app.models.activity import ActivityModel
from app.models.fraud_alert import FraudAlertModel
from app.repositories.activity_repo import ActivityRepository
from app.repositories.fraud_alert_repo import FraudAlertRepository
from app.schemas.audit import Actor, AuditAction
from app.schemas.fraud import (
    AlertAction,
    AlertRefreshSummary,
    AlertStatus,
    FraudAlert,
    FraudSignal,
)
from app.services.audit_service import AuditService
from app.utils.clock import Clock, utcnow
from app.utils.locks import KeyedLock

logger = logging.getLogger(__name__)

_ACTION_OUTCOME = {
    AlertAction.RESOLVE: (AlertStatus.RESOLVED, AuditAction.FRAUD_ALERT_RESOLVED),
    AlertAction.ESCALATE: (AlertStatus.INVESTIGATING, AuditAction.FRAUD_ALERT_ESCALATED),
    AlertAction.FALSE_POSITIVE: (AlertStatus.FALSE_POSITIVE, AuditAction.FRAUD_ALERT_FALSE_POSITIVE),
}


class FraudAlertService:
    def __init__(
        self,
        db: Session,
        detector: FraudSignalDetector,
        alert_repo: FraudAlertRepository,
        activity_repo: ActivityRepository,
        audit: AuditService,
        locks: KeyedLock,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.detector = detector
        self.alerts = alert_repo
        self.activities = activity_repo
        self.audit = audit
        self.locks = locks
        self.clock = clock or utcnow

    # ── observer hook (no commit, no audit: part of the caller's call) ──

    def sync_activity(self, activity: ActivityModel, *, reopen: bool = False) -> Optional[FraudAlertModel]:
        """Bring the activity's alert in line with its current signal.

        - flagged, no alert           → raise a new open alert
        - flagged, alert open         → refresh type/severity/description
        - flagged, alert closed       → untouched unless ``reopen`` (new evidence)
        - not flagged                 → untouched; admins close alerts
        """
        alert, _ = self._sync(activity, self.detector.detect(activity), reopen=reopen)
        return alert

    def _sync(self, activity: ActivityModel, signal: Optional[FraudSignal], *, reopen: bool):
        alert = self.alerts.get_for_activity(activity.id)
        if signal is None:
            return alert, "unchanged"

        now = self.clock()
        if alert is None:
            alert = self.alerts.create(FraudAlertModel(
                activity_id=activity.id,
                student_id=activity.student_id,
                type=signal.type.value,
                severity=signal.severity.value,
                description=signal.description,
                status=AlertStatus.OPEN.value,
                detected_at=now,
                escalated=False,
            ))
            logger.info("Raised %s alert %d for activity %s", signal.type.value, alert.id, activity.id)
            return alert, "raised"

        if alert.status == AlertStatus.OPEN.value:
            if (alert.type, alert.severity, alert.description) == (
                signal.type.value, signal.severity.value, signal.description,
            ):
                return alert, "unchanged"
            self._apply_signal(alert, signal)
            return alert, "updated"

        if reopen:
            self._apply_signal(alert, signal)
            alert.status = AlertStatus.OPEN.value
            alert.detected_at = now
            alert.assigned_to = None
            alert.resolution_notes = None
            alert.resolved_by = None
            alert.resolved_at = None
            alert.escalated = False
            logger.info("Reopened alert %d after new evidence on activity %s", alert.id, activity.id)
            return alert, "updated"

        return alert, "unchanged"

    @staticmethod
    def _apply_signal(alert: FraudAlertModel, signal: FraudSignal) -> None:
        alert.type = signal.type.value
        alert.severity = signal.severity.value
        alert.description = signal.description

    # ── reads ────────────────────────────────────────────────────────

    def list_alerts(
        self,
        severity: Optional[str] = None,
        status: Optional[str] = None,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> List[FraudAlert]:
        rows = self.alerts.list(severity=severity, status=status, skip=skip, limit=limit)
        return [FraudAlert.model_validate(r) for r in rows]

    def get_alert(self, alert_id: int) -> FraudAlert:
        alert = self.alerts.get(alert_id)
        if alert is None:
            raise NotFoundError("fraud_alert", alert_id)
        return FraudAlert.model_validate(alert)

    # ── admin actions ────────────────────────────────────────────────

    def resolve(self, alert_id: int, notes: str, actor: Actor) -> FraudAlert:
        return self.apply_action(alert_id, AlertAction.RESOLVE, notes, actor)

    def escalate(self, alert_id: int, notes: str, actor: Actor) -> FraudAlert:
        return self.apply_action(alert_id, AlertAction.ESCALATE, notes, actor)

    def mark_false_positive(self, alert_id: int, notes: str, actor: Actor) -> FraudAlert:
        return self.apply_action(alert_id, AlertAction.FALSE_POSITIVE, notes, actor)

    def apply_action(self, alert_id: int, action: AlertAction, notes: str, actor: Actor) -> FraudAlert:
        action = AlertAction(action)
        new_status, audit_action = _ACTION_OUTCOME[action]

        # one lock key per alert row: its activity
        located = self.alerts.get(alert_id)
        if located is None:
            raise NotFoundError("fraud_alert", alert_id)

        with self.locks.hold(("activity", located.activity_id)):
            try:
                alert = self.alerts.get_for_update(alert_id)
                if alert.status != AlertStatus.OPEN.value:
                    raise InvalidAlertStateError(alert_id, alert.status, action.value)

                now = self.clock()
                alert.status = new_status.value
                alert.resolution_notes = notes or ""
                alert.resolved_by = actor.id
                alert.resolved_at = now
                if action == AlertAction.ESCALATE:
                    alert.escalated = True
                    alert.assigned_to = actor.id
                self.alerts.update(alert)

                self.audit.record(
                    actor,
                    audit_action,
                    "fraud_alert",
                    alert.id,
                    f"{alert.type} alert on activity {alert.activity_id} → {new_status.value}"
                    + (f": {notes}" if notes else ""),
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info("Alert %d %s by %s", alert_id, new_status.value, actor.id)
        return FraudAlert.model_validate(alert)

    def refresh(self, actor: Actor) -> AlertRefreshSummary:
        """Re-derive alerts for every activity (admin rescan).

        Each activity is reloaded and synced under its own lock and
        committed before the lock is released; the summary audit entry is
        committed last.
        """
        counts = {"raised": 0, "updated": 0, "unchanged": 0}
        scanned = 0
        for activity_id in self.activities.iter_ids():
            with self.locks.hold(("activity", activity_id)):
                try:
                    activity = self.activities.get_for_update(activity_id)
                    if activity is None:
                        continue
                    _, outcome = self._sync(activity, self.detector.detect(activity), reopen=False)
                    self.db.commit()
                except Exception:
                    self.db.rollback()
                    raise
            scanned += 1
            counts[outcome] += 1

        summary = AlertRefreshSummary(scanned=scanned, **counts)
        try:
            self.audit.record(
                actor,
                AuditAction.FRAUD_ALERTS_REFRESHED,
                "fraud_alert",
                "*",
                f"Scanned {scanned} activities: {counts['raised']} raised, {counts['updated']} updated",
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Fraud alert refresh: %s", summary.model_dump())
        return summary
