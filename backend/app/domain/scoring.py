"""Confidence scoring formula — the heuristic behind every auto-decision.

The score is a pure function of the evidence sequence plus an injected
base value.  Randomness lives entirely in the caller (see
``app.engines.confidence_scorer``), so tests can pin the base and get
an exact score.

Usage:
    from app.domain.scoring import confidence_score

    score = confidence_score(activity.evidence, base=70.0)  # 0..99
"""

import math
from typing import Any, Sequence

from app.schemas.activity import ConfidenceBand


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values.

    Python's ``round`` is banker's rounding (``round(84.5) == 84``), which
    would let a score of 84.5 miss the auto-verify bar.

    Examples:
        >>> round_half_up(84.5)
        85
        >>> round_half_up(84.49)
        84
    """
    return int(math.floor(value + 0.5))


def biometric_average(evidence: Sequence[Any]) -> float:
    """Mean biometric match score over all evidence records.

    Defined as 0.0 for an empty sequence.  A record without a score
    counts as 0.
    """
    if not evidence:
        return 0.0
    total = sum((getattr(e, "biometric_match_score", None) or 0.0) for e in evidence)
    return total / len(evidence)


def confidence_score(
    evidence: Sequence[Any],
    base: float,
    gps_bonus: int = 15,
    biometric_divisor: float = 5.0,
    max_score: int = 99,
) -> int:
    """Compute the integer confidence score for an evidence sequence.

    Formula:
        score = min(max_score, round(base + gps + biometric_avg / divisor))

    where ``gps`` is ``gps_bonus`` if *any* record is GPS-verified.

    Args:
        evidence: Ordered evidence records (ORM rows or schemas).
        base: Base score, normally drawn from [40, 80).
        gps_bonus: Flat bonus when any record has ``gps_verified``.
        biometric_divisor: Divisor applied to the biometric average.
        max_score: Upper cap of the score.

    Returns:
        Integer score in [0, max_score].

    Examples:
        >>> class E: gps_verified = True; biometric_match_score = 95
        >>> confidence_score([E()], base=70)
        99
        >>> confidence_score([], base=52.4)
        52
    """
    bonus = gps_bonus if any(getattr(e, "gps_verified", False) for e in evidence) else 0
    raw = base + bonus + biometric_average(evidence) / biometric_divisor
    return max(0, min(max_score, round_half_up(raw)))


def confidence_band(score: int, high: int = 85, medium: int = 60) -> ConfidenceBand:
    """Reviewer-facing band for a score (same bars as auto-classification)."""
    if score >= high:
        return ConfidenceBand.HIGH
    if score >= medium:
        return ConfidenceBand.MEDIUM
    return ConfidenceBand.LOW
