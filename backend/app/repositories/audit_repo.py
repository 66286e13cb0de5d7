"""Audit entry repository — append and query only."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.audit_entry import AuditEntryModel


class AuditRepository:
    """Append-only store for audit entries.

    Intentionally not a BaseRepository: there is no update path, and
    entries are never deleted.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(self, entry: AuditEntryModel) -> AuditEntryModel:
        """Add entry to session (caller must commit with the change it records)."""
        self.db.add(entry)
        self.db.flush()
        return entry

    def query(
        self,
        *,
        actor_id: Optional[str] = None,
        action: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[AuditEntryModel]:
        """Entries matching every given filter, oldest first.

        ``date_from`` / ``date_to`` are inclusive bounds on the timestamp.
        """
        q = self.db.query(AuditEntryModel)
        if actor_id:
            q = q.filter(AuditEntryModel.actor_id == actor_id)
        if action:
            q = q.filter(AuditEntryModel.action == action)
        if resource_type:
            q = q.filter(AuditEntryModel.resource_type == resource_type)
        if resource_id is not None:
            q = q.filter(AuditEntryModel.resource_id == str(resource_id))
        if date_from:
            q = q.filter(AuditEntryModel.timestamp >= date_from)
        if date_to:
            q = q.filter(AuditEntryModel.timestamp <= date_to)
        return (
            q.order_by(AuditEntryModel.timestamp, AuditEntryModel.id)
            .offset(skip)
            .limit(limit)
            .all()
        )
