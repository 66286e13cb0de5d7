"""Audit log endpoint — read-only; entries are only ever appended by services."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_audit_service
from app.logging_config import get_logger
from app.schemas.audit import AuditAction, AuditEntry, AuditQuery

logger = get_logger(__name__)
router = APIRouter()


@router.get("/", response_model=List[AuditEntry])
def list_audit_entries(
    actor_id: Optional[str] = None,
    action: Optional[AuditAction] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    skip: int = 0,
    limit: int = Query(default=100, le=500),
    db: Session = Depends(get_db),
) -> List[AuditEntry]:
    """Query the audit trail; date bounds are inclusive (UTC)."""
    query = AuditQuery(
        actor_id=actor_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        date_from=date_from,
        date_to=date_to,
        skip=skip,
        limit=limit,
    )
    logger.info("audit_log_requested", **query.model_dump(mode="json", exclude_none=True))
    try:
        return get_audit_service(db).query(query)
    except Exception as e:
        logger.error("audit_log_failed", error=str(e))
        raise HTTPException(status_code=500, detail=f"Failed to query audit log: {str(e)}")
