"""Tests for the confidence scoring formula."""

import pytest

from app.domain.classification import auto_classify
from app.domain.scoring import (
    biometric_average,
    confidence_band,
    confidence_score,
    round_half_up,
)
from app.schemas.activity import ConfidenceBand, VerificationStatus
from tests.fixtures import evidence


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [
        (84.5, 85),
        (84.49, 84),
        (85.0, 85),
        (0.5, 1),
        (46.0, 46),
    ])
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_half_up(value) == expected

    def test_differs_from_bankers_rounding(self):
        assert round(84.5) == 84
        assert round_half_up(84.5) == 85


class TestBiometricAverage:
    def test_empty_is_zero(self):
        assert biometric_average([]) == 0.0

    def test_mean_over_all_records(self):
        records = [evidence(biometric=95), evidence(biometric=30)]
        assert biometric_average(records) == pytest.approx(62.5)

    def test_missing_score_counts_as_zero(self):
        class Bare:
            gps_verified = False

        assert biometric_average([Bare(), evidence(biometric=50)]) == pytest.approx(25.0)


class TestConfidenceScore:
    def test_clean_evidence_caps_at_99(self):
        # 70 + 15 + 95/5 = 104 → capped
        assert confidence_score([evidence(gps=True, biometric=95)], base=70.0) == 99

    def test_low_confidence_evidence(self):
        # 40 + 0 + 30/5 = 46
        assert confidence_score([evidence(gps=False, biometric=30)], base=40.0) == 46

    def test_empty_evidence_returns_base_only(self):
        assert confidence_score([], base=52.4) == 52
        assert confidence_score([], base=52.5) == 53

    def test_gps_bonus_if_any_record_verified(self):
        records = [evidence(gps=False, biometric=0), evidence(gps=True, biometric=0)]
        assert confidence_score(records, base=50.0) == 65

    def test_gps_bonus_applied_once(self):
        records = [evidence(gps=True, biometric=0) for _ in range(3)]
        assert confidence_score(records, base=50.0) == 65

    def test_biometric_averaged_not_summed(self):
        # 40 + 15 + 62.5/5 = 67.5 → 68
        records = [evidence(gps=True, biometric=95), evidence(gps=False, biometric=30)]
        assert confidence_score(records, base=40.0) == 68

    def test_never_negative(self):
        assert confidence_score([], base=-10.0) == 0

    def test_custom_weights(self):
        score = confidence_score(
            [evidence(gps=True, biometric=50)], base=40.0,
            gps_bonus=10, biometric_divisor=10.0, max_score=60,
        )
        assert score == 55


class TestScoreBoundary:
    """Score 85 auto-verifies, 84 does not."""

    def test_exactly_85_is_verified(self):
        score = confidence_score([evidence(gps=False, biometric=0)], base=85.0)
        assert score == 85
        assert auto_classify(score) == VerificationStatus.VERIFIED

    def test_84_is_not_verified(self):
        score = confidence_score([evidence(gps=False, biometric=0)], base=84.0)
        assert score == 84
        assert auto_classify(score) != VerificationStatus.VERIFIED

    def test_half_point_below_rounds_up_to_verified(self):
        # 69.5 + 15 + 0 = 84.5 → 85
        score = confidence_score([evidence(gps=True, biometric=0)], base=69.5)
        assert auto_classify(score) == VerificationStatus.VERIFIED


class TestConfidenceBand:
    @pytest.mark.parametrize("score,band", [
        (99, ConfidenceBand.HIGH),
        (85, ConfidenceBand.HIGH),
        (84, ConfidenceBand.MEDIUM),
        (60, ConfidenceBand.MEDIUM),
        (59, ConfidenceBand.LOW),
        (0, ConfidenceBand.LOW),
    ])
    def test_bands(self, score, band):
        assert confidence_band(score) == band
