"""Evidence record ORM model."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class EvidenceModel(Base):
    """One uploaded artifact.  Rows are never edited; a resubmission marks
    the previous set superseded and inserts a new one."""

    __tablename__ = "evidence_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # upload order within the activity

    filename = Column(String, nullable=False)
    gps_latitude = Column(Float)
    gps_longitude = Column(Float)
    gps_verified = Column(Boolean, nullable=False, default=False)
    biometric_match_score = Column(Float, nullable=False, default=0.0)
    extracted_text = Column(Text, default="")

    uploaded_at = Column(DateTime, nullable=False)
    superseded_at = Column(DateTime)

    # Relationships
    activity = relationship("ActivityModel", back_populates="all_evidence")

    def __repr__(self) -> str:
        return f"<Evidence activity_id={self.activity_id} pos={self.position} file={self.filename}>"
