"""Internship request and company response schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from smartmatch.models.internship_request import InternshipRequestStatus, CompanyResponseStatus
from smartmatch.schemas.common import UTCDateTime, check_date_range, require_value


class InternshipRequestCreate(BaseModel):
    specialty: str = Field(min_length=1, max_length=255)
    student_count: int = Field(ge=1)
    period: str = Field(min_length=1, max_length=100)
    start_date: UTCDateTime
    end_date: UTCDateTime
    description: str = Field(min_length=1)
    requirements: Optional[str] = None
    skills: list[str] = []
    location: str = Field(min_length=1, max_length=255)
    is_remote: bool = False
    
    @model_validator(mode="after")
    def validate_dates(self):
        check_date_range(self.start_date, self.end_date)
        return self


class InternshipRequestUpdate(BaseModel):
    specialty: Optional[str] = Field(None, min_length=1, max_length=255)
    student_count: Optional[int] = Field(None, ge=1)
    period: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = None
    skills: Optional[list[str]] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    is_remote: Optional[bool] = None
    status: Optional[InternshipRequestStatus] = None
    
    @field_validator(
        "specialty", "student_count", "period", "start_date", "end_date",
        "description", "skills", "location", "is_remote", "status",
    )
    @classmethod
    def reject_null(cls, value):
        return require_value(value)
    
    @model_validator(mode="after")
    def validate_dates(self):
        check_date_range(self.start_date, self.end_date)
        return self


class InternshipRequestStatusUpdate(BaseModel):
    status: InternshipRequestStatus


class CompanyResponseCreate(BaseModel):
    internship_request_id: UUID
    message: str = Field(min_length=1)
    contact_email: EmailStr


class CompanyResponseStatusUpdate(BaseModel):
    status: CompanyResponseStatus


class SelectCompanyRequest(BaseModel):
    company_response_id: UUID


class CompanyResponseResponse(BaseModel):
    id: UUID
    internship_request_id: UUID
    hr_id: UUID
    company_name: str
    contact_email: str
    message: str
    status: str
    responded_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class UniversitySummary(BaseModel):
    id: UUID
    name: str
    email: Optional[str] = None


class InternshipRequestResponse(BaseModel):
    id: UUID
    university_id: UUID
    specialty: str
    student_count: int
    period: str
    start_date: datetime
    end_date: datetime
    description: str
    requirements: Optional[str] = None
    skills: list[str] = []
    location: str
    is_remote: bool
    status: str
    selected_response_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    university: Optional[UniversitySummary] = None
    
    # Only for the owning university and staff
    company_responses: Optional[list[CompanyResponseResponse]] = None
    selected_company: Optional[CompanyResponseResponse] = None


class InternshipRequestsPage(BaseModel):
    requests: list[InternshipRequestResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class RequestSummary(BaseModel):
    id: UUID
    specialty: str
    period: str
    status: str
    university_name: Optional[str] = None


class HRCompanyResponseItem(CompanyResponseResponse):
    internship_request: Optional[RequestSummary] = None


class CompanyResponsesPage(BaseModel):
    responses: list[HRCompanyResponseItem]
    total: int
    page: int
    limit: int
    total_pages: int
