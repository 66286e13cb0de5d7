"""Audit trail — one append per successful state-changing call."""

import logging
from typing import List, Optional

from app.models.audit_entry import AuditEntryModel
from app.repositories.audit_repo import AuditRepository
from app.schemas.audit import Actor, AuditAction, AuditEntry, AuditQuery
from app.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, audit_repo: AuditRepository, clock: Optional[Clock] = None):
        self.entries = audit_repo
        self.clock = clock or utcnow

    def record(
        self,
        actor: Actor,
        action: AuditAction,
        resource_type: str,
        resource_id,
        details: str,
    ) -> AuditEntryModel:
        """Stage an entry in the caller's transaction (caller commits)."""
        entry = self.entries.append(AuditEntryModel(
            timestamp=self.clock(),
            actor_id=actor.id,
            actor_name=actor.name,
            action=action.value,
            resource_type=resource_type,
            resource_id=str(resource_id),
            details=details,
            ip_address=actor.ip_address,
        ))
        logger.debug("Audit %s by %s on %s %s", action.value, actor.id, resource_type, resource_id)
        return entry

    def query(self, q: Optional[AuditQuery] = None) -> List[AuditEntry]:
        q = q or AuditQuery()
        rows = self.entries.query(
            actor_id=q.actor_id,
            action=q.action.value if q.action else None,
            resource_type=q.resource_type,
            resource_id=q.resource_id,
            date_from=q.date_from,
            date_to=q.date_to,
            skip=q.skip,
            limit=q.limit,
        )
        return [AuditEntry.model_validate(r) for r in rows]
