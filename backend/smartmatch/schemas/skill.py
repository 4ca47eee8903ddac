"""Skill-related Pydantic schemas."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class SkillCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class SkillResponse(BaseModel):
    id: UUID
    name: str
    category: str
    description: Optional[str] = None
    is_active: bool = True
    
    model_config = ConfigDict(from_attributes=True)


class PopularSkill(BaseModel):
    skill: SkillResponse
    job_count: int
    student_count: int
    total_count: int


class StudentSkillCreate(BaseModel):
    skill_id: UUID
    level: int = Field(ge=1, le=5)


class StudentSkillUpdate(BaseModel):
    level: int = Field(ge=1, le=5)


class StudentSkillResponse(BaseModel):
    id: UUID
    student_id: UUID
    skill_id: UUID
    level: int
    skill: SkillResponse
    
    model_config = ConfigDict(from_attributes=True)
