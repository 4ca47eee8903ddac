"""Notification schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from smartmatch.models.notification import NotificationPriority
from smartmatch.models.user import UserRole
from smartmatch.schemas.common import UTCDateTime


class BroadcastRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    type: str = Field("INFO", min_length=1, max_length=50)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    target_roles: list[UserRole] = []  # empty = everyone
    scheduled_at: Optional[UTCDateTime] = None


class NotificationResponse(BaseModel):
    id: UUID
    title: str
    message: str
    type: str
    priority: str
    target_roles: list[str]
    created_by: Optional[UUID] = None
    scheduled_at: Optional[datetime] = None
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class NotificationsPage(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    page: int
    limit: int
    total_pages: int
