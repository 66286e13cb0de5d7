"""Activity endpoints — submission, evidence resubmission, mentor review, appeals.

Domain errors (``PipelineError``) propagate to the app-level handler in
``app.main``, which maps each error kind to an HTTP status.  Anything
else is logged and reported as a 500.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import (
    get_appeal_service,
    get_review_service,
    get_submission_service,
)
from app.errors import PipelineError
from app.logging_config import get_logger
from app.schemas.activity import (
    Activity,
    ActivityCreate,
    EvidenceResubmission,
    MentorDecision,
    VerificationStatus,
)
from app.schemas.appeal import Appeal, AppealCreate
from app.schemas.audit import Actor

logger = get_logger(__name__)
router = APIRouter()


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


@router.post("/", response_model=Activity, status_code=201)
def submit_activity(
    payload: ActivityCreate,
    request: Request,
    db: Session = Depends(get_db),
) -> Activity:
    """Submit a new activity; it is scored and auto-classified before returning.

    Args:
        payload: Activity details with at least one evidence record.
        request: Incoming request (client address goes to the audit trail).
        db: Database session.

    Returns:
        The stored activity with its confidence score and provisional status.
    """
    logger.info(
        "activity_submit_requested",
        student_id=payload.student_id,
        type=payload.type.value,
        evidence=len(payload.evidence),
    )
    try:
        actor = Actor(id=payload.student_id, ip_address=client_ip(request))
        activity = get_submission_service(db).submit(payload, actor=actor)
        logger.info(
            "activity_submitted",
            activity_id=activity.id,
            score=activity.verification.ai_confidence_score,
            status=activity.verification.status.value,
        )
        return activity
    except PipelineError:
        raise
    except Exception as e:
        logger.error("activity_submit_failed", student_id=payload.student_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to submit activity: {str(e)}")


@router.get("/", response_model=List[Activity])
def list_activities(
    student_id: Optional[str] = None,
    status: Optional[VerificationStatus] = None,
    mentor_id: Optional[str] = None,
    skip: int = 0,
    limit: int = Query(default=50, le=200),
    db: Session = Depends(get_db),
) -> List[Activity]:
    """List activities, newest activity date first.

    Filter by ``student_id`` for a student's dashboard, by ``status`` for a
    review queue, or by ``mentor_id`` for what a mentor has decided.
    """
    logger.info("activities_list_requested", student_id=student_id,
                status=status.value if status else None, mentor_id=mentor_id)
    try:
        return get_submission_service(db).list_activities(
            student_id=student_id,
            status=status.value if status else None,
            mentor_id=mentor_id,
            skip=skip,
            limit=limit,
        )
    except Exception as e:
        logger.error("activities_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to list activities: {str(e)}")


@router.get("/{activity_id}", response_model=Activity)
def get_activity(activity_id: int, db: Session = Depends(get_db)) -> Activity:
    try:
        return get_submission_service(db).get_activity(activity_id)
    except PipelineError:
        raise
    except Exception as e:
        logger.error("activity_get_failed", activity_id=activity_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to get activity: {str(e)}")


@router.post("/{activity_id}/evidence", response_model=Activity)
def resubmit_evidence(
    activity_id: int,
    payload: EvidenceResubmission,
    request: Request,
    db: Session = Depends(get_db),
) -> Activity:
    """Replace the evidence set and rescore from scratch (re-enters ``pending``)."""
    logger.info("activity_resubmit_requested", activity_id=activity_id, evidence=len(payload.evidence))
    try:
        actor = Actor(id=payload.student_id, ip_address=client_ip(request))
        activity = get_submission_service(db).resubmit_evidence(activity_id, payload, actor=actor)
        logger.info(
            "activity_resubmitted",
            activity_id=activity_id,
            score=activity.verification.ai_confidence_score,
            status=activity.verification.status.value,
        )
        return activity
    except PipelineError:
        raise
    except Exception as e:
        logger.error("activity_resubmit_failed", activity_id=activity_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to resubmit evidence: {str(e)}")


@router.post("/{activity_id}/review", response_model=Activity)
def review_activity(
    activity_id: int,
    decision: MentorDecision,
    request: Request,
    db: Session = Depends(get_db),
) -> Activity:
    """Apply a mentor decision (verified, rejected or under_review).

    Raises:
        404 if the activity does not exist, 409 if it is already decided,
        422 if ``mentor_id`` is missing.
    """
    logger.info("activity_review_requested", activity_id=activity_id,
                mentor_id=decision.mentor_id, status=decision.status.value)
    try:
        actor = Actor(
            id=decision.mentor_id or "unknown",
            name=decision.mentor_name,
            ip_address=client_ip(request),
        )
        activity = get_review_service(db).decide(activity_id, decision, actor=actor)
        logger.info("activity_reviewed", activity_id=activity_id, status=activity.verification.status.value)
        return activity
    except PipelineError:
        raise
    except Exception as e:
        logger.error("activity_review_failed", activity_id=activity_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to review activity: {str(e)}")


@router.post("/{activity_id}/appeals", response_model=Appeal, status_code=201)
def submit_appeal(
    activity_id: int,
    payload: AppealCreate,
    request: Request,
    db: Session = Depends(get_db),
) -> Appeal:
    logger.info("appeal_submit_requested", activity_id=activity_id, student_id=payload.student_id)
    try:
        actor = Actor(id=payload.student_id, ip_address=client_ip(request))
        appeal = get_appeal_service(db).submit_appeal(activity_id, payload, actor=actor)
        logger.info("appeal_submitted", activity_id=activity_id, appeal_id=appeal.id)
        return appeal
    except PipelineError:
        raise
    except Exception as e:
        logger.error("appeal_submit_failed", activity_id=activity_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to submit appeal: {str(e)}")


@router.get("/{activity_id}/appeals", response_model=List[Appeal])
def list_appeals(activity_id: int, db: Session = Depends(get_db)) -> List[Appeal]:
    try:
        return get_appeal_service(db).list_appeals(activity_id)
    except PipelineError:
        raise
    except Exception as e:
        logger.error("appeals_list_failed", activity_id=activity_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to list appeals: {str(e)}")
