"""Health check endpoints with dependency checking.

The pipeline has one external dependency, the database; the detailed
check also reports the active scoring thresholds so operators can see
which classification bars a deployment is running with.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.config import Settings
from app.database import get_db
from app.dependencies import get_settings
from app.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)

SERVICE_NAME = "activity-verifier"
VERSION = "1.0.0"


def check_database(db: Session) -> Dict[str, Any]:
    """Check database connectivity.

    Args:
        db: Database session.

    Returns:
        Dict with status and optional error message.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"healthy": True, "message": "Database connected"}
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"healthy": False, "message": f"Database error: {str(e)}"}


def scoring_profile(settings: Settings) -> Dict[str, Any]:
    return {
        "auto_verify_threshold": settings.auto_verify_threshold,
        "review_threshold": settings.review_threshold,
        "auto_reject_threshold": settings.auto_reject_threshold,
        "appeal_confidence_threshold": settings.appeal_confidence_threshold,
        "deterministic_scorer": settings.scorer_seed is not None,
    }


@router.get("/health")
def health_check() -> Dict[str, Any]:
    """Basic health check - just app status."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}


@router.get("/health/detailed")
def detailed_health_check(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Detailed health check with dependency status.

    Returns:
        ``healthy`` when the database answers, ``degraded`` otherwise.
    """
    checks = {"database": check_database(db)}
    overall_status = "healthy" if all(c["healthy"] for c in checks.values()) else "degraded"

    logger.info("health_check_performed", status=overall_status, database=checks["database"]["healthy"])

    return {
        "status": overall_status,
        "service": SERVICE_NAME,
        "version": VERSION,
        "checks": checks,
        "scoring": scoring_profile(settings),
    }


@router.get("/health/ready")
def readiness_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Kubernetes-style readiness probe.

    Returns 200 if app can serve traffic, 503 otherwise.
    """
    if not check_database(db)["healthy"]:
        raise HTTPException(status_code=503, detail={"ready": False, "reason": "Database unavailable"})
    return {"ready": True}


@router.get("/health/live")
def liveness_check() -> Dict[str, Any]:
    """Kubernetes-style liveness probe."""
    return {"alive": True}
