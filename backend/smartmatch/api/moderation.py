"""
Job moderation endpoints (ADMIN or MODERATOR).

Only APPROVED jobs appear in the public catalog. Every decision is
recorded in the moderation log.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from smartmatch.database import get_db
from smartmatch.models.job import Job, ModerationStatus
from smartmatch.models.moderation_log import ModerationLog, ModerationAction
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import require_roles
from smartmatch.schemas.admin import (
    ModerationNotes,
    BulkModerationRequest,
    ModerationJobsPage,
    ModerationCounts,
    PendingCount,
    ModerationStats,
    ModerationHistoryPage,
)
from smartmatch.schemas.common import ActionResult, BulkResult
from smartmatch.services.jobs import get_job, build_job_response
from smartmatch.services.moderation import moderate_job, build_history_item
from smartmatch.services.pagination import paginate, contains, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)
router = APIRouter()

require_moderator = require_roles(UserRole.ADMIN, UserRole.MODERATOR)

ACTION_MESSAGES = {
    ModerationAction.APPROVE: "Job approved",
    ModerationAction.REJECT: "Job rejected",
    ModerationAction.RETURN: "Job returned for revision",
}


async def _moderate_one(
    db: AsyncSession, job_id: UUID, moderator: User, action: ModerationAction, notes: Optional[str]
) -> ActionResult:
    job = await get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        moderate_job(db, job, moderator, action, notes)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error moderating job {job_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to moderate job")

    return ActionResult(success=True, message=ACTION_MESSAGES[action])


async def _moderate_many(
    db: AsyncSession, payload: BulkModerationRequest, moderator: User, action: ModerationAction
) -> BulkResult:
    job_ids = set(payload.job_ids)
    result = await db.execute(select(Job).where(Job.id.in_(job_ids)))
    jobs = result.scalars().all()

    try:
        for job in jobs:
            moderate_job(db, job, moderator, action, payload.notes)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error in bulk moderation: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to moderate jobs")

    logger.info(f"Bulk {action.value}: {len(jobs)} jobs by {moderator.email}")
    return BulkResult(success=True, affected=len(jobs), skipped=len(job_ids) - len(jobs))


@router.get("/jobs", response_model=ModerationJobsPage)
async def list_jobs_for_moderation(
    status: ModerationStatus = Query(ModerationStatus.PENDING),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    """Jobs in the given moderation status, oldest first."""
    query = select(Job).where(Job.moderation_status == status.value)
    if search:
        query = query.where(or_(contains(Job.title, search), contains(Job.description, search)))
    query = query.order_by(Job.created_at.asc())

    jobs, total, total_pages = await paginate(db, query, page, limit)
    return ModerationJobsPage(
        jobs=[build_job_response(job) for job in jobs],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


@router.post("/jobs/{job_id}/approve", response_model=ActionResult)
async def approve_job(
    job_id: UUID,
    payload: Optional[ModerationNotes] = None,
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    return await _moderate_one(db, job_id, moderator, ModerationAction.APPROVE, payload.notes if payload else None)


@router.post("/jobs/{job_id}/reject", response_model=ActionResult)
async def reject_job(
    job_id: UUID,
    payload: Optional[ModerationNotes] = None,
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    return await _moderate_one(db, job_id, moderator, ModerationAction.REJECT, payload.notes if payload else None)


@router.post("/jobs/{job_id}/return", response_model=ActionResult)
async def return_job(
    job_id: UUID,
    payload: Optional[ModerationNotes] = None,
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    """Send a job back to its owner for edits."""
    return await _moderate_one(db, job_id, moderator, ModerationAction.RETURN, payload.notes if payload else None)


@router.post("/bulk-approve", response_model=BulkResult)
async def bulk_approve(
    payload: BulkModerationRequest,
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    return await _moderate_many(db, payload, moderator, ModerationAction.APPROVE)


@router.post("/bulk-reject", response_model=BulkResult)
async def bulk_reject(
    payload: BulkModerationRequest,
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    return await _moderate_many(db, payload, moderator, ModerationAction.REJECT)


@router.get("/stats", response_model=ModerationStats)
async def moderation_stats(
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    """Jobs per moderation status, plus pending jobs created today and this week."""
    result = await db.execute(select(Job.moderation_status, func.count(Job.id)).group_by(Job.moderation_status))
    counts = dict(result.all())

    now = datetime.utcnow()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    pending = select(func.count(Job.id)).where(Job.moderation_status == ModerationStatus.PENDING.value)
    today = (await db.execute(pending.where(Job.created_at >= start_of_day))).scalar_one()
    this_week = (await db.execute(pending.where(Job.created_at >= now - timedelta(days=7)))).scalar_one()

    return ModerationStats(
        total=ModerationCounts(
            pending=counts.get(ModerationStatus.PENDING.value, 0),
            approved=counts.get(ModerationStatus.APPROVED.value, 0),
            rejected=counts.get(ModerationStatus.REJECTED.value, 0),
            returned=counts.get(ModerationStatus.RETURNED.value, 0),
        ),
        today=PendingCount(pending=today),
        this_week=PendingCount(pending=this_week),
    )


@router.get("/history", response_model=ModerationHistoryPage)
async def moderation_history(
    moderator_id: Optional[UUID] = Query(None),
    action: Optional[ModerationAction] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    moderator: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db)
):
    """Moderation log, newest first."""
    query = select(ModerationLog)
    if moderator_id is not None:
        query = query.where(ModerationLog.moderator_id == moderator_id)
    if action is not None:
        query = query.where(ModerationLog.action == action.value)
    query = query.order_by(ModerationLog.created_at.desc())

    logs, total, total_pages = await paginate(db, query, page, limit)
    return ModerationHistoryPage(
        history=[build_history_item(log) for log in logs],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )
