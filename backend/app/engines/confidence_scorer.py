"""Confidence scorer — evidence sequence → score + provisional status.

The base component of the score is drawn from an injectable source.
Production wiring uses a seeded or unseeded ``random.Random``; tests pass
a constant so every score is exact.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from app.config import Settings
from app.domain.classification import auto_classify
from app.domain.scoring import confidence_score
from app.schemas.activity import VerificationStatus

logger = logging.getLogger(__name__)

BaseScoreSource = Callable[[], float]


def random_base_source(low: float, high: float, seed: Optional[int] = None) -> BaseScoreSource:
    """Uniform draws from [low, high)."""
    rng = random.Random(seed)
    return lambda: low + (high - low) * rng.random()


@dataclass(frozen=True)
class ScoreResult:
    score: int
    provisional_status: VerificationStatus
    base: float


class ConfidenceScorer:
    """Stateless apart from the base source; safe to share across threads."""

    def __init__(self, settings: Settings, base_score: Optional[BaseScoreSource] = None):
        self.settings = settings
        self.base_score = base_score or random_base_source(
            settings.score_base_min, settings.score_base_max, settings.scorer_seed,
        )

    def score(self, evidence: Sequence[Any]) -> ScoreResult:
        s = self.settings
        base = self.base_score()
        score = confidence_score(
            evidence,
            base=base,
            gps_bonus=s.gps_bonus,
            biometric_divisor=s.biometric_divisor,
            max_score=s.max_confidence_score,
        )
        status = auto_classify(
            score,
            verify_threshold=s.auto_verify_threshold,
            review_threshold=s.review_threshold,
            reject_threshold=s.auto_reject_threshold,
        )
        logger.debug(
            "Scored %d evidence record(s): base=%.2f score=%d → %s",
            len(evidence), base, score, status.value,
        )
        return ScoreResult(score=score, provisional_status=status, base=base)
