"""Job application schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from smartmatch.models.application import ApplicationStatus


class ApplicationCreate(BaseModel):
    job_id: UUID
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = Field(None, max_length=500)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: Optional[str] = None


class ApplicationJobSummary(BaseModel):
    id: UUID
    title: str
    location: str
    type: str
    status: str
    company: Optional[str] = None


class CandidateSummary(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None


class ApplicationResponse(BaseModel):
    id: UUID
    job_id: UUID
    candidate_id: UUID
    hr_id: UUID
    status: str
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    notes: Optional[str] = None
    applied_at: datetime
    updated_at: datetime
    job: Optional[ApplicationJobSummary] = None
    candidate: Optional[CandidateSummary] = None
