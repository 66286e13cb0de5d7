"""Fraud alert endpoints — admin review queue and alert actions."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.api.activities import client_ip
from app.database import get_db
from app.dependencies import get_fraud_alert_service
from app.errors import PipelineError
from app.logging_config import get_logger
from app.schemas.audit import Actor
from app.schemas.fraud import (
    AlertActionRequest,
    AlertRefreshSummary,
    AlertStatus,
    FraudAlert,
    Severity,
)

logger = get_logger(__name__)
router = APIRouter()


@router.get("/", response_model=List[FraudAlert])
def list_alerts(
    severity: Optional[Severity] = None,
    status: Optional[AlertStatus] = None,
    skip: int = 0,
    limit: int = Query(default=100, le=500),
    db: Session = Depends(get_db),
) -> List[FraudAlert]:
    """List fraud alerts, optionally filtered by severity and status."""
    logger.info("fraud_alerts_list_requested",
                severity=severity.value if severity else None,
                status=status.value if status else None)
    try:
        return get_fraud_alert_service(db).list_alerts(
            severity=severity.value if severity else None,
            status=status.value if status else None,
            skip=skip,
            limit=limit,
        )
    except Exception as e:
        logger.error("fraud_alerts_list_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to list fraud alerts: {str(e)}")


@router.post("/refresh", response_model=AlertRefreshSummary)
def refresh_alerts(
    request: Request,
    actor_id: str = Query(..., min_length=1),
    actor_name: Optional[str] = None,
    db: Session = Depends(get_db),
) -> AlertRefreshSummary:
    """Rescan every activity and raise or update alerts to match."""
    logger.info("fraud_alerts_refresh_requested", actor_id=actor_id)
    try:
        actor = Actor(id=actor_id, name=actor_name, ip_address=client_ip(request))
        summary = get_fraud_alert_service(db).refresh(actor)
        logger.info("fraud_alerts_refreshed", **summary.model_dump())
        return summary
    except PipelineError:
        raise
    except Exception as e:
        logger.error("fraud_alerts_refresh_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to refresh fraud alerts: {str(e)}")


@router.get("/{alert_id}", response_model=FraudAlert)
def get_alert(alert_id: int, db: Session = Depends(get_db)) -> FraudAlert:
    try:
        return get_fraud_alert_service(db).get_alert(alert_id)
    except PipelineError:
        raise
    except Exception as e:
        logger.error("fraud_alert_get_failed", alert_id=alert_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to get fraud alert: {str(e)}")


@router.post("/{alert_id}/actions", response_model=FraudAlert)
def act_on_alert(
    alert_id: int,
    payload: AlertActionRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> FraudAlert:
    """Resolve, escalate or dismiss an open alert.

    Raises:
        404 if the alert does not exist, 409 if it is no longer open.
    """
    logger.info("fraud_alert_action_requested", alert_id=alert_id,
                action=payload.action.value, actor_id=payload.actor_id)
    try:
        actor = Actor(id=payload.actor_id, name=payload.actor_name, ip_address=client_ip(request))
        alert = get_fraud_alert_service(db).apply_action(alert_id, payload.action, payload.notes, actor)
        logger.info("fraud_alert_action_applied", alert_id=alert_id, status=alert.status.value)
        return alert
    except PipelineError:
        raise
    except Exception as e:
        logger.error("fraud_alert_action_failed", alert_id=alert_id, error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to apply alert action: {str(e)}")
