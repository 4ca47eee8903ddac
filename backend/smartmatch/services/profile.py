"""Role profile business logic."""
from datetime import datetime
from typing import Optional, Type

from pydantic import BaseModel, HttpUrl
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.user import User, UserRole
from smartmatch.models.profiles import HRProfile, CandidateProfile, UniversityProfile, AdminProfile
from smartmatch.schemas.auth import UserResponse, CurrentUserResponse
from smartmatch.schemas.profile import (
    HRProfileCreate,
    HRProfileUpdate,
    HRProfileResponse,
    CandidateProfileCreate,
    CandidateProfileUpdate,
    CandidateProfileResponse,
    UniversityProfileCreate,
    UniversityProfileUpdate,
    UniversityProfileResponse,
    AdminProfileCreate,
    AdminProfileUpdate,
    AdminProfileResponse,
)


# role -> (model, create schema, update schema, response schema)
PROFILE_TYPES: dict[UserRole, tuple[type, Type[BaseModel], Type[BaseModel], Type[BaseModel]]] = {
    UserRole.HR: (HRProfile, HRProfileCreate, HRProfileUpdate, HRProfileResponse),
    UserRole.CANDIDATE: (CandidateProfile, CandidateProfileCreate, CandidateProfileUpdate, CandidateProfileResponse),
    UserRole.UNIVERSITY: (UniversityProfile, UniversityProfileCreate, UniversityProfileUpdate, UniversityProfileResponse),
    UserRole.ADMIN: (AdminProfile, AdminProfileCreate, AdminProfileUpdate, AdminProfileResponse),
    UserRole.MODERATOR: (AdminProfile, AdminProfileCreate, AdminProfileUpdate, AdminProfileResponse),
}

# Attribute on User holding each profile model
PROFILE_ATTRS = {
    HRProfile: "hr_profile",
    CandidateProfile: "candidate_profile",
    UniversityProfile: "university_profile",
    AdminProfile: "admin_profile",
}


def _clean_value(value):
    # Pydantic already validated URLs; columns store plain strings
    if isinstance(value, HttpUrl):
        return str(value)
    return value


def build_profile_data(user: User) -> Optional[dict]:
    """Serialize the user's role profile, or None if not created yet."""
    profile = user.get_profile()
    if profile is None:
        return None
    response_schema = PROFILE_TYPES[user.role][3]
    return response_schema.model_validate(profile).model_dump(mode="json")


def build_user_response(user: User) -> UserResponse:
    """Build UserResponse from User model."""
    profile = user.get_profile()
    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role.value,
        is_active=user.is_active,
        first_name=getattr(profile, "first_name", None),
        last_name=getattr(profile, "last_name", None),
        avatar_url=getattr(profile, "avatar_url", None),
        has_profile=profile is not None,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )


def build_current_user_response(user: User) -> CurrentUserResponse:
    return CurrentUserResponse(
        **build_user_response(user).model_dump(),
        profile=build_profile_data(user),
    )


async def create_profile(user: User, payload: dict, db: AsyncSession):
    """Create the role profile for `user` from validated create data."""
    model = PROFILE_TYPES[user.role][0]
    profile = model(user_id=user.id, **{k: _clean_value(v) for k, v in payload.items()})
    db.add(profile)
    await db.commit()

    # Attach so get_profile() sees it without a reload
    setattr(user, PROFILE_ATTRS[model], profile)
    return profile


async def update_profile(user: User, update_data: dict, db: AsyncSession):
    """Apply a partial update to the user's existing profile."""
    profile = user.get_profile()
    for field, value in update_data.items():
        setattr(profile, field, _clean_value(value))

    profile.updated_at = datetime.utcnow()
    await db.commit()
    return profile
