"""Core business-logic engines."""

from app.engines.confidence_scorer import ConfidenceScorer, ScoreResult
from app.engines.fraud_detector import FraudSignalDetector
from app.engines.state_machine import VerificationStateMachine

__all__ = [
    "ConfidenceScorer",
    "ScoreResult",
    "FraudSignalDetector",
    "VerificationStateMachine",
]
