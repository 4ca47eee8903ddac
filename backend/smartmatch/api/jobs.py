"""
Jobs API endpoints.
Handles job posting CRUD, publishing and the public catalog.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func

from smartmatch.database import get_db
from smartmatch.models.job import Job, JobType, JobStatus, ModerationStatus
from smartmatch.models.skill import Skill
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import get_current_user, get_optional_user, require_roles
from smartmatch.schemas.job import JobCreate, JobUpdate, JobResponse, JobsPage
from smartmatch.schemas.common import check_salary_range
from smartmatch.services.accounts import delete_job_rows
from smartmatch.services.jobs import (
    get_job,
    load_skills,
    can_manage_job,
    apply_job_update,
    build_job_response,
    build_job_responses,
    get_candidate_applications,
)
from smartmatch.services.pagination import paginate, contains, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from smartmatch.services.status import set_status

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_hr_profile(user: User):
    if user.hr_profile is None:
        raise HTTPException(status_code=400, detail="Create your HR profile first")
    return user.hr_profile


async def _get_managed_job(db: AsyncSession, job_id: UUID, user: User) -> Job:
    job = await get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if not can_manage_job(user, job):
        logger.warning(f"User {user.email} attempted to modify job {job_id}")
        raise HTTPException(status_code=403, detail="You can only manage your own jobs")
    return job


# ============================================================
# ENDPOINTS
# ============================================================

@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    job_data: JobCreate,
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a job posting.

    New jobs start as DRAFT and wait for moderation (PENDING).
    """
    hr_profile = _require_hr_profile(current_user)

    skills = await load_skills(db, job_data.skill_ids)
    if skills is None:
        raise HTTPException(status_code=404, detail="One or more skills not found")

    try:
        job = Job(
            hr_id=hr_profile.id,
            skills=skills,
            status=JobStatus.DRAFT.value,
            moderation_status=ModerationStatus.PENDING.value,
            **{
                field: (value.value if hasattr(value, "value") else value)
                for field, value in job_data.model_dump(exclude={"skill_ids"}).items()
            },
        )
        db.add(job)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating job: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create job")

    logger.info(f"Created job {job.id}: {job.title} at {hr_profile.company}")

    return build_job_response(await get_job(db, job.id))


@router.get("", response_model=JobsPage)
async def list_jobs(
    search: Optional[str] = Query(None, description="Search in title and description"),
    location: Optional[str] = Query(None, description="Filter by location (partial match)"),
    type: Optional[JobType] = Query(None, description="Filter by job type"),
    skills: Optional[str] = Query(None, description="Comma-separated skill names (any match)"),
    remote: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Public job catalog: only ACTIVE jobs that passed moderation.
    Candidates also see whether they already applied.
    """
    conditions = [
        Job.status == JobStatus.ACTIVE.value,
        Job.moderation_status == ModerationStatus.APPROVED.value,
    ]

    if search:
        conditions.append(or_(contains(Job.title, search), contains(Job.description, search)))
    if location:
        conditions.append(contains(Job.location, location))
    if type is not None:
        conditions.append(Job.type == type.value)
    if skills:
        names = [name.strip().lower() for name in skills.split(",") if name.strip()]
        if names:
            conditions.append(Job.skills.any(func.lower(Skill.name).in_(names)))
    if remote is not None:
        conditions.append(Job.remote == remote)

    query = (
        select(Job)
        .where(and_(*conditions))
        .order_by(Job.published_at.desc(), Job.created_at.desc())
    )
    jobs, total, total_pages = await paginate(db, query, page, limit)

    return JobsPage(
        jobs=await build_job_responses(db, list(jobs), current_user),
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


@router.get("/my", response_model=JobsPage)
async def list_my_jobs(
    status: Optional[JobStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db)
):
    """Jobs owned by the calling HR user, in every status."""
    hr_profile = _require_hr_profile(current_user)

    query = select(Job).where(Job.hr_id == hr_profile.id)
    if status is not None:
        query = query.where(Job.status == status.value)
    query = query.order_by(Job.created_at.desc())

    jobs, total, total_pages = await paginate(db, query, page, limit)
    return JobsPage(
        jobs=[build_job_response(job) for job in jobs],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job_detail(
    job_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Job detail.

    The owner and staff see any status; everyone else only published jobs.
    Views by everyone else are counted.
    """
    job = await get_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    privileged = current_user is not None and (can_manage_job(current_user, job) or current_user.is_staff())
    if not privileged:
        if not job.is_published():
            raise HTTPException(status_code=404, detail="Job not found")
        job.views = (job.views or 0) + 1
        await db.commit()

    if current_user is not None and current_user.role == UserRole.CANDIDATE and current_user.candidate_profile:
        applications = await get_candidate_applications(db, current_user.candidate_profile, [job.id])
        return build_job_response(job, applications.get(job.id), for_candidate=True)

    return build_job_response(job)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    job_data: JobUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Partial update by the owner or an admin.

    Editing content of a moderated job sends it back to moderation.
    """
    job = await _get_managed_job(db, job_id, current_user)
    update_data = job_data.model_dump(exclude_unset=True)

    skills = None
    if update_data.get("skill_ids") is not None:
        skills = await load_skills(db, update_data["skill_ids"])
        if skills is None:
            raise HTTPException(status_code=404, detail="One or more skills not found")

    # Validate against stored values for the bound not being changed
    try:
        check_salary_range(
            update_data.get("salary_min", job.salary_min),
            update_data.get("salary_max", job.salary_max),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        status = update_data.pop("status", None)
        if apply_job_update(job, update_data, skills):
            logger.info(f"Job {job.id} content changed; moderation reset to PENDING")
        if status is not None:
            await set_status(db, job, status, commit=False)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating job {job_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update job")

    logger.info(f"Job {job.id} updated by {current_user.email}")
    return build_job_response(await get_job(db, job.id))


@router.delete("/{job_id}")
async def delete_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a job with its applications and moderation history."""
    job = await _get_managed_job(db, job_id, current_user)

    try:
        await delete_job_rows(db, [job.id])
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting job {job_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete job")

    logger.info(f"Job {job_id} deleted by {current_user.email}")
    return {"message": "Job deleted"}


@router.post("/{job_id}/publish", response_model=JobResponse)
async def publish_job(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Publish a job (status ACTIVE).

    It only appears in the catalog once moderation approves it.
    """
    job = await _get_managed_job(db, job_id, current_user)

    if job.moderation_status != ModerationStatus.APPROVED.value:
        job.moderation_status = ModerationStatus.PENDING.value
    await set_status(db, job, JobStatus.ACTIVE)

    logger.info(f"Job {job.id} published by {current_user.email}")
    return build_job_response(await get_job(db, job.id))
