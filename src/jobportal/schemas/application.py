"""Application Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ApplicationStatus(str, Enum):
    """Application status enumeration."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ApplicationStatusUpdate(BaseModel):
    """Schema for an employer changing an application's status."""

    status: ApplicationStatus


class Application(BaseModel):
    """Complete application schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    job_title: str
    applicant_id: int
    applicant_name: str
    cover_letter: str | None
    resume_url: str | None
    status: ApplicationStatus
    created_at: datetime
