"""Activity ORM model — one submitted claim plus its verification sub-record."""

from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from app.database import Base


class ActivityModel(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(String, nullable=False, index=True)

    type = Column(String, nullable=False)  # ActivityType enum value
    title = Column(String, nullable=False)
    organization = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    location = Column(String, default="")
    description = Column(Text, default="")

    additional_proof = Column(JSON, nullable=False, default=dict)
    submitted_at = Column(DateTime, nullable=False)

    # Verification sub-record; written only by VerificationStateMachine
    status = Column(String, nullable=False, default="pending", index=True)
    ai_confidence_score = Column(Integer, nullable=False, default=0)
    scored_at = Column(DateTime)
    mentor_id = Column(String, index=True)
    mentor_comments = Column(Text, nullable=False, default="")
    verification_date = Column(DateTime)
    comment_history = Column(JSON, nullable=False, default=list)

    # Relationships
    all_evidence = relationship(
        "EvidenceModel",
        back_populates="activity",
        order_by="EvidenceModel.position",
        cascade="all, delete-orphan",
    )
    appeals = relationship(
        "AppealModel",
        back_populates="activity",
        order_by="AppealModel.id",
        cascade="all, delete-orphan",
    )
    fraud_alert = relationship(
        "FraudAlertModel", back_populates="activity", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def evidence(self) -> list:
        """Current evidence set in upload order (superseded uploads excluded)."""
        return [e for e in self.all_evidence if e.superseded_at is None]

    @property
    def verification(self) -> dict:
        return {
            "status": self.status,
            "ai_confidence_score": self.ai_confidence_score or 0,
            "mentor_id": self.mentor_id,
            "mentor_comments": self.mentor_comments or "",
            "verification_date": self.verification_date,
            "comment_history": self.comment_history or [],
        }

    def __repr__(self) -> str:
        return f"<Activity id={self.id} student={self.student_id} status={self.status}>"
