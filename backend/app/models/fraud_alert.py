"""Fraud alert ORM model — at most one alert row per activity."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class FraudAlertModel(Base):
    __tablename__ = "fraud_alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False, unique=True)
    student_id = Column(String, nullable=False, index=True)

    type = Column(String, nullable=False)  # FraudAlertType enum value
    severity = Column(String, nullable=False, index=True)  # Severity enum value
    description = Column(Text, nullable=False)

    status = Column(String, nullable=False, default="open", index=True)  # AlertStatus enum value
    detected_at = Column(DateTime, nullable=False)
    assigned_to = Column(String)
    resolution_notes = Column(Text)
    resolved_by = Column(String)
    resolved_at = Column(DateTime)
    escalated = Column(Boolean, nullable=False, default=False)

    # Relationships
    activity = relationship("ActivityModel", back_populates="fraud_alert")

    def __repr__(self) -> str:
        return f"<FraudAlert id={self.id} activity_id={self.activity_id} type={self.type} status={self.status}>"
