"""Tests for VerificationStateMachine — transitions, validation, date invariant."""

import random
from datetime import datetime

import pytest

from app.config import Settings
from app.domain.transitions import TERMINAL_STATUSES
from app.engines.confidence_scorer import ConfidenceScorer
from app.engines.state_machine import VerificationStateMachine
from app.errors import (
    IneligibleAppealError,
    InvalidTransitionError,
    PipelineError,
    PipelineValidationError,
)
from app.models.activity import ActivityModel
from app.models.evidence import EvidenceModel
from app.schemas.activity import VerificationStatus as S

NOW = datetime(2024, 7, 1, 12, 0, 0)


def _machine(base: float = 70.0) -> VerificationStateMachine:
    settings = Settings()
    return VerificationStateMachine(
        ConfidenceScorer(settings, base_score=lambda: base), settings, clock=lambda: NOW,
    )


def _activity(status: S = S.PENDING, score: int = 0, gps: bool = True, biometric: float = 95.0) -> ActivityModel:
    activity = ActivityModel(
        id=1,
        student_id="stu-1",
        status=status.value,
        ai_confidence_score=score,
        mentor_comments="",
        comment_history=[],
        verification_date=NOW if status in TERMINAL_STATUSES else None,
    )
    activity.all_evidence = [
        EvidenceModel(position=0, filename="a.pdf", gps_verified=gps, biometric_match_score=biometric),
    ]
    return activity


def _date_invariant_holds(activity: ActivityModel) -> bool:
    return (S(activity.status) in TERMINAL_STATUSES) == (activity.verification_date is not None)


class TestSubmit:
    def test_clean_evidence_auto_verifies(self):
        activity = _activity()
        result = _machine(70.0).submit(activity)

        assert result.score == 99
        assert activity.ai_confidence_score == 99
        assert activity.status == "verified"
        assert activity.verification_date == NOW
        assert activity.scored_at == NOW

    def test_low_score_goes_to_under_review(self):
        activity = _activity(gps=False, biometric=30)
        _machine(40.0).submit(activity)

        assert activity.ai_confidence_score == 46
        assert activity.status == "under_review"
        assert activity.verification_date is None

    def test_very_low_score_auto_rejects_with_date(self):
        activity = _activity(gps=False, biometric=0)
        _machine(20.0).submit(activity)

        assert activity.status == "rejected"
        assert activity.verification_date == NOW

    def test_resubmit_from_terminal_clears_date(self):
        activity = _activity(status=S.REJECTED, gps=True, biometric=50)
        _machine(50.0).submit(activity)  # 50 + 15 + 10 = 75

        assert activity.status == "pending"
        assert activity.verification_date is None

    def test_rescore_keeps_status(self):
        activity = _activity(status=S.UNDER_REVIEW, score=46)
        _machine(70.0).rescore(activity)

        assert activity.ai_confidence_score == 99
        assert activity.status == "under_review"


class TestMentorDecision:
    @pytest.mark.parametrize("auto_base,auto_status", [(45.0, "pending"), (20.0, "under_review")])
    @pytest.mark.parametrize("target", [S.VERIFIED, S.REJECTED, S.UNDER_REVIEW])
    def test_mentor_overrides_auto_outcome(self, auto_base, auto_status, target):
        activity = _activity(gps=True, biometric=25)
        _machine(auto_base).submit(activity)
        assert activity.status == auto_status

        _machine().apply_mentor_decision(activity, "mentor-1", target, "decided")
        assert activity.status == target.value

    def test_sets_mentor_fields_and_history(self):
        activity = _activity(status=S.UNDER_REVIEW)
        previous = _machine().apply_mentor_decision(activity, "mentor-1", "verified", "looks good")

        assert previous == S.UNDER_REVIEW
        assert activity.mentor_id == "mentor-1"
        assert activity.mentor_comments == "looks good"
        assert activity.verification_date == NOW
        assert activity.comment_history[-1]["role"] == "mentor"
        assert activity.comment_history[-1]["comments"] == "looks good"

    def test_under_review_decision_has_no_date(self):
        activity = _activity(status=S.PENDING)
        _machine().apply_mentor_decision(activity, "mentor-1", S.UNDER_REVIEW, "need more")

        assert activity.status == "under_review"
        assert activity.verification_date is None

    def test_missing_mentor_id_fails(self):
        activity = _activity(status=S.PENDING)
        with pytest.raises(PipelineValidationError):
            _machine().apply_mentor_decision(activity, "  ", S.VERIFIED)
        assert activity.status == "pending"
        assert activity.mentor_id is None

    @pytest.mark.parametrize("status", [S.VERIFIED, S.REJECTED])
    def test_terminal_activity_cannot_be_redecided(self, status):
        activity = _activity(status=status)
        with pytest.raises(InvalidTransitionError) as exc:
            _machine().apply_mentor_decision(activity, "mentor-1", S.UNDER_REVIEW)
        assert exc.value.kind == "invalid_transition"
        assert activity.status == status.value

    def test_cannot_decide_back_to_pending(self):
        with pytest.raises(InvalidTransitionError):
            _machine().apply_mentor_decision(_activity(status=S.UNDER_REVIEW), "mentor-1", S.PENDING)


class TestAppeal:
    def test_rejected_activity_can_always_appeal(self):
        activity = _activity(status=S.REJECTED, score=90)
        activity.mentor_comments = "insufficient proof"

        previous = _machine().apply_appeal(activity, "stu-1", "additional certificate attached")

        assert previous == S.REJECTED
        assert activity.status == "under_review"
        assert activity.verification_date is None
        assert activity.ai_confidence_score == 90
        assert activity.mentor_comments == "insufficient proof"
        assert activity.comment_history[-1]["role"] == "student"

    def test_low_confidence_verified_activity_can_appeal(self):
        activity = _activity(status=S.VERIFIED, score=45)
        _machine().apply_appeal(activity, "stu-1", "please recheck")
        assert activity.status == "under_review"

    def test_pending_with_confidence_50_is_ineligible(self):
        activity = _activity(status=S.PENDING, score=50)
        with pytest.raises(IneligibleAppealError):
            _machine().apply_appeal(activity, "stu-1", "please")
        assert activity.status == "pending"

    def test_empty_message_fails_validation(self):
        activity = _activity(status=S.REJECTED)
        with pytest.raises(PipelineValidationError) as exc:
            _machine().apply_appeal(activity, "stu-1", "   ")
        assert exc.value.details["field"] == "message"
        assert activity.status == "rejected"


class TestDateInvariantUnderRandomTransitions:
    def test_invariant_holds_across_random_sequence(self):
        rng = random.Random(20240701)
        settings = Settings()
        scorer = ConfidenceScorer(settings, base_score=lambda: rng.uniform(0, 90))
        machine = VerificationStateMachine(scorer, settings, clock=lambda: NOW)
        activity = _activity()
        machine.submit(activity)
        assert _date_invariant_holds(activity)

        applied = 0
        for _ in range(500):
            before = (activity.status, activity.verification_date)
            event = rng.choice(["submit", "mentor", "appeal"])
            try:
                if event == "submit":
                    activity.all_evidence[0].gps_verified = rng.random() < 0.5
                    activity.all_evidence[0].biometric_match_score = rng.uniform(0, 100)
                    machine.submit(activity)
                elif event == "mentor":
                    target = rng.choice(list(S))
                    machine.apply_mentor_decision(activity, "mentor-1", target, "decision")
                else:
                    machine.apply_appeal(activity, "stu-1", "appeal")
                applied += 1
            except PipelineError:
                assert (activity.status, activity.verification_date) == before
            assert _date_invariant_holds(activity), (event, activity.status)

        assert applied > 100
