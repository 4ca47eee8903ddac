"""Admin user-management and moderation schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from smartmatch.schemas.common import Pagination
from smartmatch.schemas.job import JobResponse


class AdminUserItem(BaseModel):
    id: UUID
    email: str
    role: str
    is_active: bool
    display_name: str
    company: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: datetime


class UsersPage(BaseModel):
    users: list[AdminUserItem]
    pagination: Pagination


class UserStatusUpdate(BaseModel):
    is_active: bool


class BulkUserStatusUpdate(BaseModel):
    user_ids: list[UUID] = Field(min_length=1)
    is_active: bool


class BulkUserDelete(BaseModel):
    user_ids: list[UUID] = Field(min_length=1)


class ModerationNotes(BaseModel):
    notes: Optional[str] = None


class BulkModerationRequest(BaseModel):
    job_ids: list[UUID] = Field(min_length=1)
    notes: Optional[str] = None


class ModerationJobsPage(BaseModel):
    jobs: list[JobResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class ModerationCounts(BaseModel):
    pending: int
    approved: int
    rejected: int
    returned: int


class PendingCount(BaseModel):
    pending: int


class ModerationStats(BaseModel):
    total: ModerationCounts
    today: PendingCount
    this_week: PendingCount


class ModerationHistoryItem(BaseModel):
    id: UUID
    job_id: UUID
    job_title: Optional[str] = None
    moderator_id: UUID
    moderator_name: Optional[str] = None
    action: str
    notes: Optional[str] = None
    timestamp: datetime


class ModerationHistoryPage(BaseModel):
    history: list[ModerationHistoryItem]
    total: int
    page: int
    limit: int
    total_pages: int
