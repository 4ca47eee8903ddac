"""Internship-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from smartmatch.models.internship import InternshipStatus, InternshipApplicationStatus
from smartmatch.schemas.application import CandidateSummary
from smartmatch.schemas.common import UTCDateTime, check_salary_range, check_date_range, require_value
from smartmatch.schemas.job import HRSummary


class InternshipCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    currency: str = Field("RUB", max_length=10)
    location: str = Field(min_length=1, max_length=255)
    is_remote: bool = False
    start_date: UTCDateTime
    end_date: UTCDateTime
    duration: Optional[int] = Field(None, ge=1)  # days; derived from dates if omitted
    max_participants: int = Field(1, ge=1)
    deadline: Optional[UTCDateTime] = None
    skills: list[str] = []
    tags: list[str] = []
    status: Optional[InternshipStatus] = None
    
    @model_validator(mode="after")
    def validate_ranges(self):
        check_salary_range(self.salary_min, self.salary_max)
        check_date_range(self.start_date, self.end_date)
        return self


class InternshipUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = Field(None, max_length=10)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    is_remote: Optional[bool] = None
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    duration: Optional[int] = Field(None, ge=1)
    max_participants: Optional[int] = Field(None, ge=1)
    deadline: Optional[UTCDateTime] = None
    skills: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    status: Optional[InternshipStatus] = None
    
    @field_validator(
        "title", "description", "currency", "location", "is_remote", "start_date", "end_date",
        "duration", "max_participants", "skills", "tags", "status",
    )
    @classmethod
    def reject_null(cls, value):
        return require_value(value)
    
    @model_validator(mode="after")
    def validate_ranges(self):
        check_salary_range(self.salary_min, self.salary_max)
        check_date_range(self.start_date, self.end_date)
        return self


class InternshipResponse(BaseModel):
    id: UUID
    hr_id: UUID
    title: str
    description: str
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    currency: str
    location: str
    is_remote: bool
    start_date: datetime
    end_date: datetime
    duration: int
    max_participants: int
    deadline: Optional[datetime] = None
    skills: list[str] = []
    tags: list[str] = []
    status: str
    applications_count: int
    created_at: datetime
    updated_at: datetime
    hr: Optional[HRSummary] = None
    
    # Filled in for candidates
    has_applied: Optional[bool] = None
    application_status: Optional[str] = None
    application_id: Optional[UUID] = None
    applied_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class InternshipsPage(BaseModel):
    internships: list[InternshipResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class InternshipApply(BaseModel):
    internship_id: UUID
    cover_letter: str = ""


class InternshipApplicationStatusUpdate(BaseModel):
    status: InternshipApplicationStatus
    notes: Optional[str] = None


class InternshipSummary(BaseModel):
    id: UUID
    title: str
    location: str
    status: str
    start_date: datetime
    end_date: datetime
    company: Optional[str] = None


class InternshipApplicationResponse(BaseModel):
    id: UUID
    internship_id: UUID
    candidate_id: UUID
    status: str
    cover_letter: Optional[str] = None
    notes: Optional[str] = None
    applied_at: datetime
    updated_at: datetime
    internship: Optional[InternshipSummary] = None
    candidate: Optional[CandidateSummary] = None
