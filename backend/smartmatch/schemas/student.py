"""University student schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from smartmatch.schemas.common import require_value
from smartmatch.schemas.skill import StudentSkillResponse


class StudentCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    student_id: str = Field(min_length=1, max_length=50)
    year_of_study: int = Field(ge=1, le=10)
    major: str = Field(min_length=1, max_length=255)
    gpa: Optional[float] = Field(None, ge=0, le=5)
    phone: Optional[str] = None


class StudentUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    student_id: Optional[str] = Field(None, min_length=1, max_length=50)
    year_of_study: Optional[int] = Field(None, ge=1, le=10)
    major: Optional[str] = Field(None, min_length=1, max_length=255)
    gpa: Optional[float] = Field(None, ge=0, le=5)
    phone: Optional[str] = None

    @field_validator("first_name", "last_name", "email", "student_id", "year_of_study", "major")
    @classmethod
    def reject_null(cls, value):
        return require_value(value)


class StudentResponse(BaseModel):
    id: UUID
    university_id: UUID
    first_name: str
    last_name: str
    email: str
    student_id: str
    year_of_study: int
    major: str
    gpa: Optional[float] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    skills: list[StudentSkillResponse] = []
    
    model_config = ConfigDict(from_attributes=True)


class TopSkill(BaseModel):
    skill_id: UUID
    name: str
    count: int


class StudentStats(BaseModel):
    total_students: int
    students_with_skills: int
    students_without_skills: int
    top_skills: list[TopSkill]
