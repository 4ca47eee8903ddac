"""Job-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from smartmatch.models.job import JobType, ExperienceLevel, JobStatus
from smartmatch.schemas.common import UTCDateTime, check_salary_range, require_value
from smartmatch.schemas.skill import SkillResponse


class JobCreate(BaseModel):
    """Schema for creating a new job posting."""
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    currency: str = Field("RUB", max_length=10)
    location: str = Field(min_length=1, max_length=255)
    type: JobType = JobType.FULL_TIME
    experience_level: ExperienceLevel = ExperienceLevel.NO_EXPERIENCE
    remote: bool = False
    deadline: Optional[UTCDateTime] = None
    skill_ids: list[UUID] = []
    
    @model_validator(mode="after")
    def validate_salary(self):
        check_salary_range(self.salary_min, self.salary_max)
        return self


class JobUpdate(BaseModel):
    """Partial update. `status` may be any JobStatus."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = Field(None, max_length=10)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    remote: Optional[bool] = None
    deadline: Optional[UTCDateTime] = None
    skill_ids: Optional[list[UUID]] = None
    status: Optional[JobStatus] = None
    
    @field_validator(
        "title", "description", "currency", "location", "type", "experience_level", "remote", "status"
    )
    @classmethod
    def reject_null(cls, value):
        return require_value(value)
    
    @model_validator(mode="after")
    def validate_salary(self):
        check_salary_range(self.salary_min, self.salary_max)
        return self


class HRSummary(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    company: str
    
    model_config = ConfigDict(from_attributes=True)


class JobResponse(BaseModel):
    """Schema for job posting response."""
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
    type: str
    experience_level: str
    remote: bool
    deadline: Optional[datetime] = None
    status: str
    published_at: Optional[datetime] = None
    moderation_status: str
    moderated_at: Optional[datetime] = None
    moderator_id: Optional[UUID] = None
    moderation_notes: Optional[str] = None
    views: int
    applications_count: int
    created_at: datetime
    updated_at: datetime
    hr: Optional[HRSummary] = None
    skills: list[SkillResponse] = []
    
    # Filled in for candidates
    has_applied: Optional[bool] = None
    application_status: Optional[str] = None
    applied_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class JobsPage(BaseModel):
    jobs: list[JobResponse]
    total: int
    page: int
    limit: int
    total_pages: int
