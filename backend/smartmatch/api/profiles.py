"""
Role profile endpoints.

Each user owns at most one profile, shaped by their role:
- hr: contact person and company
- candidate: personal details
- university: institution details
- admin / moderator: staff details
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.database import get_db
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import get_current_user
from smartmatch.services.profile import PROFILE_TYPES, create_profile, update_profile

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_role_segment(role: str, current_user: User) -> None:
    try:
        requested = UserRole(role.upper())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown profile type '{role}'")

    if requested != current_user.role:
        logger.warning(f"User {current_user.email} ({current_user.role.value}) tried to use {role} profile")
        raise HTTPException(status_code=403, detail="Profile type does not match your role")


def _validate(schema, payload: dict[str, Any]):
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.post("/{role}", status_code=201)
async def create_role_profile(
    role: str,
    payload: dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create the caller's profile. 409 if one already exists."""
    _check_role_segment(role, current_user)
    if current_user.get_profile() is not None:
        raise HTTPException(status_code=409, detail="Profile already exists")

    _, create_schema, _, response_schema = PROFILE_TYPES[current_user.role]
    data = _validate(create_schema, payload)

    try:
        profile = await create_profile(current_user, data.model_dump(), db)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating profile: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create profile")

    logger.info(f"Created {role} profile for {current_user.email}")
    return response_schema.model_validate(profile)


@router.get("/{role}")
async def get_role_profile(
    role: str,
    current_user: User = Depends(get_current_user)
):
    """Get the caller's profile."""
    _check_role_segment(role, current_user)
    profile = current_user.get_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    return PROFILE_TYPES[current_user.role][3].model_validate(profile)


@router.patch("")
async def patch_profile(
    payload: dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Partially update the caller's profile (validated against their role's schema)."""
    if current_user.get_profile() is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    _, _, update_schema, response_schema = PROFILE_TYPES[current_user.role]
    data = _validate(update_schema, payload)

    try:
        profile = await update_profile(current_user, data.model_dump(exclude_unset=True), db)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating profile: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update profile")

    logger.info(f"Profile updated for user {current_user.email}")
    return response_schema.model_validate(profile)
