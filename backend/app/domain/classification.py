"""Auto-classification and appeal eligibility rules.

Usage:
    from app.domain.classification import auto_classify, is_appeal_eligible

    status = auto_classify(86)                                   # VERIFIED
    ok = is_appeal_eligible(VerificationStatus.VERIFIED, 45)     # True
"""

from app.schemas.activity import VerificationStatus


def auto_classify(
    score: int,
    verify_threshold: int = 85,
    review_threshold: int = 60,
    reject_threshold: int = 40,
) -> VerificationStatus:
    """Map a confidence score to a provisional status.

    Lower bounds are inclusive:
       - score >= 85       → VERIFIED
       - 60 <= score < 85  → PENDING (routine review queue)
       - 40 <= score < 60  → UNDER_REVIEW (mandatory human review)
       - score < 40        → REJECTED

    Examples:
        >>> auto_classify(85)
        <VerificationStatus.VERIFIED: 'verified'>
        >>> auto_classify(84)
        <VerificationStatus.PENDING: 'pending'>
        >>> auto_classify(40)
        <VerificationStatus.UNDER_REVIEW: 'under_review'>
        >>> auto_classify(39)
        <VerificationStatus.REJECTED: 'rejected'>
    """
    if score >= verify_threshold:
        return VerificationStatus.VERIFIED
    if score >= review_threshold:
        return VerificationStatus.PENDING
    if score >= reject_threshold:
        return VerificationStatus.UNDER_REVIEW
    return VerificationStatus.REJECTED


def is_appeal_eligible(
    status: VerificationStatus | str,
    confidence: int,
    threshold: int = 50,
) -> bool:
    """An activity is appealable when rejected, or when its confidence is low.

    The confidence rule applies regardless of current status, so a
    low-confidence *verified* activity can be reopened too.
    """
    return VerificationStatus(status) == VerificationStatus.REJECTED or confidence < threshold
