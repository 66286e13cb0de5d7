"""Activity, evidence and verification-state schemas."""

import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ActivityType(str, Enum):
    INTERNSHIP_CERTIFICATE = "internship_certificate"
    PARTICIPATION_CERTIFICATE = "participation_certificate"
    SKILL_CERTIFICATE = "skill_certificate"
    PROJECT_COMPLETION = "project_completion"
    SOCIAL_WORK = "social_work"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ConfidenceBand(str, Enum):
    HIGH = "high"  # likely authentic
    MEDIUM = "medium"  # review recommended
    LOW = "low"  # manual verification required


# ── evidence ─────────────────────────────────────────────────────────────

class EvidenceRecordBase(BaseModel):
    filename: str
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None
    gps_verified: bool = False  # computed upstream against the claimed location
    biometric_match_score: float = Field(ge=0.0, le=100.0, default=0.0)
    extracted_text: str = ""


class EvidenceRecordCreate(EvidenceRecordBase):
    pass


class EvidenceRecord(EvidenceRecordBase):
    id: int
    position: int

    model_config = {"from_attributes": True}


# ── verification sub-record ──────────────────────────────────────────────

class CommentEntry(BaseModel):
    """One retained comment: a mentor justification or an appeal message."""

    author_id: str
    role: str  # "mentor" | "student"
    status: VerificationStatus
    comments: str
    at: dt.datetime


class VerificationState(BaseModel):
    status: VerificationStatus = VerificationStatus.PENDING
    ai_confidence_score: int = Field(ge=0, le=99, default=0)
    mentor_id: Optional[str] = None
    mentor_comments: str = ""
    verification_date: Optional[dt.datetime] = None
    comment_history: List[CommentEntry] = []

    model_config = {"from_attributes": True}


# ── activity ─────────────────────────────────────────────────────────────

class ActivityBase(BaseModel):
    student_id: str
    type: ActivityType
    title: str
    organization: str
    date: dt.date
    location: str = ""
    description: str = ""


class ActivityCreate(ActivityBase):
    evidence: List[EvidenceRecordCreate] = Field(min_length=1)
    additional_proof: Dict[str, Any] = {}


class Activity(ActivityBase):
    id: int
    evidence: List[EvidenceRecord] = []
    verification: VerificationState
    additional_proof: Dict[str, Any] = {}
    submitted_at: Optional[dt.datetime] = None
    confidence_band: ConfidenceBand = ConfidenceBand.LOW

    model_config = {"from_attributes": True}


# ── commands ─────────────────────────────────────────────────────────────

class EvidenceResubmission(BaseModel):
    """A student replacing the evidence set of an existing activity."""

    student_id: str
    evidence: List[EvidenceRecordCreate] = Field(min_length=1)


class MentorDecision(BaseModel):
    mentor_id: str = ""
    mentor_name: Optional[str] = None
    status: VerificationStatus
    comments: str = ""
