"""Verification state machine — the only writer of an activity's verification fields.

Transitions:
    submit          * → pending, then auto-classify from the fresh score
    mentor decision {pending, under_review} → {verified, rejected, under_review}
    appeal          (rejected OR confidence < 50) → under_review

Each method validates everything first and only then assigns, so a raised
error leaves the activity untouched.  ``verification_date`` is written in
the same step as ``status`` through ``_enter``; it is set exactly for the
terminal statuses.
"""

import logging
from typing import Optional

from app.config import Settings
from app.domain.classification import is_appeal_eligible
from app.domain.transitions import (
    TERMINAL_STATUSES,
    VerificationEvent,
    allowed_targets,
)
from app.engines.confidence_scorer import ConfidenceScorer, ScoreResult
from app.errors import (
    IneligibleAppealError,
    InvalidTransitionError,
    PipelineValidationError,
)
from app.models.activity import ActivityModel
from app.schemas.activity import VerificationStatus
from app.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)


class VerificationStateMachine:
    def __init__(
        self,
        scorer: ConfidenceScorer,
        settings: Settings,
        clock: Optional[Clock] = None,
    ):
        self.scorer = scorer
        self.appeal_threshold = settings.appeal_confidence_threshold  # 50
        self.clock = clock or utcnow

    # ── events ───────────────────────────────────────────────────────

    def submit(self, activity: ActivityModel) -> ScoreResult:
        """(Re)score the current evidence and auto-classify.

        A new score and provisional status are in place when this returns,
        so mentors never decide on a stale score.
        """
        self._require(activity.status or VerificationStatus.PENDING.value,
                      VerificationEvent.SUBMIT, VerificationStatus.PENDING)
        result = self.scorer.score(activity.evidence)
        self._require(VerificationStatus.PENDING, VerificationEvent.AUTO_CLASSIFY,
                      result.provisional_status)

        now = self.clock()
        previous = activity.status
        activity.ai_confidence_score = result.score
        activity.scored_at = now
        self._enter(activity, result.provisional_status, now)

        logger.info(
            "Activity %s scored %d: %s → %s",
            activity.id, result.score, previous, activity.status,
        )
        return result

    def rescore(self, activity: ActivityModel) -> ScoreResult:
        """Recompute the score for an updated evidence set without moving status."""
        result = self.scorer.score(activity.evidence)
        activity.ai_confidence_score = result.score
        activity.scored_at = self.clock()
        logger.info("Activity %s rescored to %d (status kept %s)",
                    activity.id, result.score, activity.status)
        return result

    def apply_mentor_decision(
        self,
        activity: ActivityModel,
        mentor_id: str,
        status: VerificationStatus | str,
        comments: str = "",
    ) -> VerificationStatus:
        """Apply a human decision; it always overrides the auto outcome."""
        if not mentor_id or not mentor_id.strip():
            raise PipelineValidationError("mentor_id is required for a decision", field="mentor_id")
        target = VerificationStatus(status)
        self._require(activity.status, VerificationEvent.MENTOR_DECISION, target)

        now = self.clock()
        previous = VerificationStatus(activity.status)
        activity.mentor_id = mentor_id
        activity.mentor_comments = comments or ""
        activity.comment_history = [
            *(activity.comment_history or []),
            self._comment(mentor_id, "mentor", target, comments or "", now),
        ]
        self._enter(activity, target, now)

        logger.info("Mentor %s moved activity %s: %s → %s",
                    mentor_id, activity.id, previous.value, target.value)
        return previous

    def check_appeal(self, activity: ActivityModel, message: str) -> None:
        if not message or not message.strip():
            raise PipelineValidationError("An appeal message is required", field="message")
        if not is_appeal_eligible(activity.status, activity.ai_confidence_score or 0,
                                  threshold=self.appeal_threshold):
            raise IneligibleAppealError(
                f"Activity {activity.id} is '{activity.status}' with confidence "
                f"{activity.ai_confidence_score}; appeals need a rejection or "
                f"confidence below {self.appeal_threshold}",
                details={
                    "status": activity.status,
                    "ai_confidence_score": activity.ai_confidence_score,
                },
            )

    def apply_appeal(self, activity: ActivityModel, student_id: str, message: str) -> VerificationStatus:
        """Reopen into under_review; prior mentor comments stay on record."""
        self.check_appeal(activity, message)
        self._require(activity.status, VerificationEvent.APPEAL, VerificationStatus.UNDER_REVIEW)

        now = self.clock()
        previous = VerificationStatus(activity.status)
        activity.comment_history = [
            *(activity.comment_history or []),
            self._comment(student_id, "student", VerificationStatus.UNDER_REVIEW, message.strip(), now),
        ]
        self._enter(activity, VerificationStatus.UNDER_REVIEW, now)

        logger.info("Appeal reopened activity %s: %s → under_review", activity.id, previous.value)
        return previous

    # ── helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _require(current, event: VerificationEvent, target) -> None:
        if VerificationStatus(target) not in allowed_targets(current, event):
            raise InvalidTransitionError(
                VerificationStatus(current).value, VerificationStatus(target).value, event.value,
            )

    @staticmethod
    def _enter(activity: ActivityModel, status: VerificationStatus, now) -> None:
        activity.status = status.value
        activity.verification_date = now if status in TERMINAL_STATUSES else None

    @staticmethod
    def _comment(author_id: str, role: str, status: VerificationStatus, text: str, now) -> dict:
        return {
            "author_id": author_id,
            "role": role,
            "status": status.value,
            "comments": text,
            "at": now.isoformat(),
        }
