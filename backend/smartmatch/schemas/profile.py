"""Role profile schemas. Create schemas hold the required fields, update schemas make all optional."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from smartmatch.schemas.common import require_value


class HRProfileCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    company: str = Field(min_length=1, max_length=255)
    position: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = None
    avatar_url: Optional[HttpUrl] = None


class HRProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = None
    avatar_url: Optional[HttpUrl] = None

    @field_validator("first_name", "last_name", "company", "position")
    @classmethod
    def reject_null(cls, value):
        return require_value(value)


class CandidateProfileCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[HttpUrl] = None


class CandidateProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[HttpUrl] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def reject_null(cls, value):
        return require_value(value)


class UniversityProfileCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=500)
    phone: Optional[str] = None
    website: Optional[HttpUrl] = None


class UniversityProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    phone: Optional[str] = None
    website: Optional[HttpUrl] = None

    @field_validator("name", "address")
    @classmethod
    def reject_null(cls, value):
        return require_value(value)


class AdminProfileCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    position: str = Field(min_length=1, max_length=255)
    department: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = None
    permissions: Optional[str] = None


class AdminProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = None
    permissions: Optional[str] = None

    @field_validator("first_name", "last_name", "position", "department")
    @classmethod
    def reject_null(cls, value):
        return require_value(value)


class HRProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    first_name: str
    last_name: str
    company: str
    position: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class CandidateProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    first_name: str
    last_name: str
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class UniversityProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    address: str
    phone: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class AdminProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    first_name: str
    last_name: str
    position: str
    department: str
    phone: Optional[str] = None
    permissions: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
