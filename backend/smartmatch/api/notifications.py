"""
Broadcast notifications.

Admins broadcast to one or more roles (or everyone); users read the
notifications addressed to their role once they are due.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from smartmatch.database import get_db
from smartmatch.models.notification import Notification, NotificationPriority
from smartmatch.models.user import User
from smartmatch.api.auth import get_current_user, require_admin
from smartmatch.schemas.notification import BroadcastRequest, NotificationResponse, NotificationsPage
from smartmatch.services.pagination import paginate, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)
router = APIRouter()

USER_FEED_LIMIT = 50


@router.get("/admin/notifications", response_model=NotificationsPage)
async def list_notifications(
    type: Optional[str] = Query(None),
    priority: Optional[NotificationPriority] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All notifications, including scheduled ones."""
    query = select(Notification)
    if type:
        query = query.where(Notification.type == type)
    if priority is not None:
        query = query.where(Notification.priority == priority.value)
    query = query.order_by(Notification.created_at.desc())

    notifications, total, total_pages = await paginate(db, query, page, limit)
    return NotificationsPage(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


@router.post("/admin/notifications/broadcast", response_model=NotificationResponse, status_code=201)
async def broadcast(
    payload: BroadcastRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a notification for the target roles (all roles when empty)."""
    notification = Notification(
        title=payload.title,
        message=payload.message,
        type=payload.type,
        priority=payload.priority.value,
        target_roles=sorted({role.value for role in payload.target_roles}),
        created_by=admin.id,
        scheduled_at=payload.scheduled_at,
    )
    db.add(notification)
    await db.commit()

    logger.info(
        f"Admin {admin.email} broadcast '{notification.title}' "
        f"to {notification.target_roles or 'all roles'}"
    )
    return notification


@router.delete("/admin/notifications/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    notification = await db.get(Notification, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    await db.delete(notification)
    await db.commit()

    logger.info(f"Admin {admin.email} deleted notification {notification_id}")
    return {"message": "Notification deleted"}


@router.get("/notifications", response_model=List[NotificationResponse])
async def my_notifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Due notifications addressed to the caller's role, newest first."""
    now = datetime.utcnow()
    result = await db.execute(
        select(Notification)
        .where(or_(Notification.scheduled_at.is_(None), Notification.scheduled_at <= now))
        .order_by(Notification.created_at.desc())
    )

    role = current_user.role.value
    feed = [n for n in result.scalars().all() if n.targets(role)]
    return feed[:USER_FEED_LIMIT]
