"""
Admin user management endpoints.

All endpoints require the ADMIN role.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from smartmatch.database import get_db
from smartmatch.models.user import User, UserRole
from smartmatch.models.profiles import HRProfile, CandidateProfile, UniversityProfile, AdminProfile
from smartmatch.api.auth import require_admin
from smartmatch.schemas.admin import (
    AdminUserItem,
    UsersPage,
    UserStatusUpdate,
    BulkUserStatusUpdate,
    BulkUserDelete,
)
from smartmatch.schemas.common import BulkResult, Pagination
from smartmatch.services.accounts import delete_user_account
from smartmatch.services.pagination import paginate, contains, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)
router = APIRouter()


def build_admin_user_item(user: User) -> AdminUserItem:
    return AdminUserItem(
        id=user.id,
        email=user.email,
        role=user.role.value,
        is_active=user.is_active,
        display_name=user.display_name(),
        company=user.hr_profile.company if user.hr_profile else None,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )


def _search_condition(search: str):
    return or_(
        contains(User.email, search),
        User.id.in_(select(HRProfile.user_id).where(or_(
            contains(HRProfile.first_name, search),
            contains(HRProfile.last_name, search),
            contains(HRProfile.company, search),
        ))),
        User.id.in_(select(CandidateProfile.user_id).where(or_(
            contains(CandidateProfile.first_name, search),
            contains(CandidateProfile.last_name, search),
        ))),
        User.id.in_(select(UniversityProfile.user_id).where(contains(UniversityProfile.name, search))),
        User.id.in_(select(AdminProfile.user_id).where(or_(
            contains(AdminProfile.first_name, search),
            contains(AdminProfile.last_name, search),
        ))),
    )


async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=UsersPage)
async def list_users(
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Search email and profile names"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    query = select(User)
    if role is not None:
        query = query.where(User.role == role)
    if is_active is not None:
        query = query.where(User.is_active == is_active)
    if search:
        query = query.where(_search_condition(search))
    query = query.order_by(User.created_at.desc())

    users, total, total_pages = await paginate(db, query, page, limit)
    return UsersPage(
        users=[build_admin_user_item(user) for user in users],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=total_pages),
    )


@router.patch("/{user_id}/status", response_model=AdminUserItem)
async def update_user_status(
    user_id: UUID,
    payload: UserStatusUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Activate or deactivate an account. Admins cannot deactivate themselves."""
    if user_id == admin.id and not payload.is_active:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")

    user = await _get_user(db, user_id)
    user.is_active = payload.is_active
    await db.commit()

    logger.info(f"Admin {admin.email} set is_active={payload.is_active} for {user.email}")
    return build_admin_user_item(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete an account and everything it owns."""
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user = await _get_user(db, user_id)
    try:
        await delete_user_account(db, user)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete user")

    return {"message": "User deleted"}


@router.post("/bulk/status", response_model=BulkResult)
async def bulk_update_status(
    payload: BulkUserStatusUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Set is_active on many users. The caller and unknown ids are skipped."""
    target_ids = {uid for uid in payload.user_ids if uid != admin.id}
    result = await db.execute(select(User).where(User.id.in_(target_ids))) if target_ids else None
    users = result.scalars().all() if result is not None else []

    for user in users:
        user.is_active = payload.is_active
    await db.commit()

    logger.info(f"Admin {admin.email} set is_active={payload.is_active} for {len(users)} users")
    return BulkResult(success=True, affected=len(users), skipped=len(set(payload.user_ids)) - len(users))


@router.post("/bulk/delete", response_model=BulkResult)
async def bulk_delete(
    payload: BulkUserDelete,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete many users. The caller and unknown ids are skipped."""
    target_ids = {uid for uid in payload.user_ids if uid != admin.id}
    result = await db.execute(select(User).where(User.id.in_(target_ids))) if target_ids else None
    users = result.scalars().all() if result is not None else []

    try:
        for user in users:
            await delete_user_account(db, user)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error in bulk delete: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete users")

    return BulkResult(success=True, affected=len(users), skipped=len(set(payload.user_ids)) - len(users))
