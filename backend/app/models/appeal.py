"""Appeal ORM model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON

from app.database import Base


class AppealModel(Base):
    __tablename__ = "appeals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=False, index=True)
    student_id = Column(String, nullable=False)

    message = Column(Text, nullable=False)
    evidence = Column(JSON, nullable=False, default=list)  # EvidenceRecordCreate dumps

    status = Column(String, nullable=False, default="pending")  # AppealStatus enum value
    created_at = Column(DateTime, nullable=False)
    resolved_at = Column(DateTime)
    resolution = Column(String)  # terminal status the re-review reached

    # Relationships
    activity = relationship("ActivityModel", back_populates="appeals")

    def __repr__(self) -> str:
        return f"<Appeal id={self.id} activity_id={self.activity_id} status={self.status}>"
