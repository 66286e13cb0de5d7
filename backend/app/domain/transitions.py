"""Verification lifecycle transition table.

Every (status, event) pair has an entry; an empty set means the event is
illegal from that status.  Eligibility rules that depend on more than
the status (appeal confidence, mentor id) live in the state machine.
"""

from enum import Enum
from typing import Dict, FrozenSet, Tuple

from app.schemas.activity import VerificationStatus as S


class VerificationEvent(str, Enum):
    SUBMIT = "submit"
    AUTO_CLASSIFY = "auto_classify"
    MENTOR_DECISION = "mentor_decision"
    APPEAL = "appeal"


_ANY = frozenset(S)
_MENTOR_TARGETS = frozenset({S.VERIFIED, S.REJECTED, S.UNDER_REVIEW})
_NONE: FrozenSet[S] = frozenset()

TRANSITIONS: Dict[Tuple[S, VerificationEvent], FrozenSet[S]] = {
    # Submit: any state → pending
    **{(s, VerificationEvent.SUBMIT): frozenset({S.PENDING}) for s in S},

    # Auto-classify only runs on a freshly scored (pending) activity
    (S.PENDING, VerificationEvent.AUTO_CLASSIFY): _ANY,
    (S.UNDER_REVIEW, VerificationEvent.AUTO_CLASSIFY): _NONE,
    (S.VERIFIED, VerificationEvent.AUTO_CLASSIFY): _NONE,
    (S.REJECTED, VerificationEvent.AUTO_CLASSIFY): _NONE,

    # Mentor decision: only on non-terminal states
    (S.PENDING, VerificationEvent.MENTOR_DECISION): _MENTOR_TARGETS,
    (S.UNDER_REVIEW, VerificationEvent.MENTOR_DECISION): _MENTOR_TARGETS,
    (S.VERIFIED, VerificationEvent.MENTOR_DECISION): _NONE,
    (S.REJECTED, VerificationEvent.MENTOR_DECISION): _NONE,

    # Appeal: status-wise always lands in under_review; eligibility is separate
    **{(s, VerificationEvent.APPEAL): frozenset({S.UNDER_REVIEW}) for s in S},
}

TERMINAL_STATUSES = frozenset({S.VERIFIED, S.REJECTED})


def allowed_targets(status: S | str, event: VerificationEvent) -> FrozenSet[S]:
    return TRANSITIONS[(S(status), event)]


def can_transition(status: S | str, event: VerificationEvent, target: S | str) -> bool:
    return S(target) in allowed_targets(status, event)
