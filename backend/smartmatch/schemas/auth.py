"""Authentication-related Pydantic schemas."""
from datetime import datetime
from typing import Any, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

from smartmatch.models.user import UserRole


class RegisterRequest(BaseModel):
    """Self-service registration."""
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: UserRole = UserRole.CANDIDATE


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public view of a user account."""
    id: UUID
    email: str
    role: str
    is_active: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    has_profile: bool = False
    last_login_at: Optional[datetime] = None
    created_at: datetime


class CurrentUserResponse(UserResponse):
    """`/auth/me` response: the account plus its role profile."""
    profile: Optional[dict[str, Any]] = None


class AuthResponse(BaseModel):
    """Response after successful login or registration."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
