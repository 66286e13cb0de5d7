"""Appeal schemas."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from app.schemas.activity import EvidenceRecordCreate, VerificationStatus


class AppealStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class AppealCreate(BaseModel):
    student_id: str
    message: str = ""
    evidence: List[EvidenceRecordCreate] = []


class Appeal(BaseModel):
    id: int
    activity_id: int
    student_id: str
    message: str
    evidence: List[EvidenceRecordCreate] = []
    status: AppealStatus
    created_at: datetime
    resolved_at: Optional[datetime] = None
    resolution: Optional[VerificationStatus] = None  # status the re-review ended in

    model_config = {"from_attributes": True}
