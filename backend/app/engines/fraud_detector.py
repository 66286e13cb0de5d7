"""Fraud signal detector — stateless, safe to share across threads."""

from typing import Any, Optional

from app.config import Settings
from app.domain.fraud import derive_fraud_signal
from app.schemas.fraud import FraudSignal


class FraudSignalDetector:
    """Derive advisory fraud signals regardless of verification status.

    Reads ``ai_confidence_score``, ``evidence`` and ``additional_proof``
    off any activity-shaped object (ORM row or schema).
    """

    def __init__(self, settings: Settings):
        self.confidence_threshold = settings.fraud_confidence_threshold  # 50
        self.biometric_threshold = settings.fraud_biometric_threshold    # 60

    def detect(self, activity: Any) -> Optional[FraudSignal]:
        confidence = getattr(activity, "ai_confidence_score", None)
        if confidence is None:
            confidence = activity.verification.ai_confidence_score
        return derive_fraud_signal(
            confidence=confidence or 0,
            evidence=list(activity.evidence),
            additional_proof=activity.additional_proof,
            confidence_threshold=self.confidence_threshold,
            biometric_threshold=self.biometric_threshold,
        )

