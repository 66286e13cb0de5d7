"""Audit entry ORM model — append-only."""

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.database import Base


class AuditEntryModel(Base):
    __tablename__ = "audit_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, nullable=False, index=True)

    actor_id = Column(String, nullable=False, index=True)
    actor_name = Column(String)
    action = Column(String, nullable=False, index=True)  # AuditAction enum value

    resource_type = Column(String, nullable=False)
    resource_id = Column(String, nullable=False)
    details = Column(Text, nullable=False, default="")
    ip_address = Column(String)

    def __repr__(self) -> str:
        return f"<AuditEntry id={self.id} action={self.action} actor={self.actor_id}>"
