"""Fraud signal rules.

Only the *first* evidence record's GPS and biometric values drive these
checks; later uploads do not dilute or mask a bad first document.
"""

from typing import Any, Mapping, Optional, Sequence

from app.schemas.fraud import FraudAlertType, FraudSignal, Severity

SEVERITY_BY_TYPE = {
    FraudAlertType.DUPLICATE_DOCUMENT: Severity.HIGH,
    FraudAlertType.GPS_MISMATCH: Severity.MEDIUM,
    FraudAlertType.LOW_BIOMETRIC: Severity.HIGH,
    FraudAlertType.SUSPICIOUS_PATTERN: Severity.MEDIUM,
}


def derive_fraud_signal(
    confidence: int,
    evidence: Sequence[Any],
    additional_proof: Optional[Mapping[str, Any]] = None,
    confidence_threshold: int = 50,
    biometric_threshold: int = 60,
) -> Optional[FraudSignal]:
    """Return the single highest-precedence fraud signal, or None.

    Precedence (first match wins):
        1. ``additional_proof["duplicate_flag"]`` → DUPLICATE_DOCUMENT / high
        2. first record not GPS-verified (or no record) → GPS_MISMATCH / medium
        3. first record biometric < 60 → LOW_BIOMETRIC / high
        4. confidence < 50 → SUSPICIOUS_PATTERN / medium
    """
    proof = additional_proof or {}
    first = evidence[0] if evidence else None
    gps_ok = bool(getattr(first, "gps_verified", False)) if first is not None else False
    biometric = (getattr(first, "biometric_match_score", None) or 0.0) if first is not None else 0.0

    if proof.get("duplicate_flag"):
        kind = FraudAlertType.DUPLICATE_DOCUMENT
        description = "Document matches one already submitted for another activity."
    elif not gps_ok:
        kind = FraudAlertType.GPS_MISMATCH
        description = "GPS coordinates of the primary document do not match the claimed location."
    elif biometric < biometric_threshold:
        kind = FraudAlertType.LOW_BIOMETRIC
        description = (
            f"Biometric match of the primary document is {biometric:.0f}%, "
            f"below the {biometric_threshold}% bar."
        )
    elif confidence < confidence_threshold:
        kind = FraudAlertType.SUSPICIOUS_PATTERN
        description = f"AI confidence score {confidence} is below {confidence_threshold}."
    else:
        return None

    return FraudSignal(type=kind, severity=SEVERITY_BY_TYPE[kind], description=description)
