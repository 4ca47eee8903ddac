"""
Job application endpoints.

Candidates apply to published jobs; HR reviews applications to their jobs.
"""
import logging
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from smartmatch.database import get_db
from smartmatch.models.application import Application, ApplicationStatus
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import get_current_user, require_roles
from smartmatch.schemas.application import ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse
from smartmatch.services.email import email_service
from smartmatch.services.jobs import get_job, find_job_application, build_application_response
from smartmatch.services.status import set_status

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_application(db: AsyncSession, application_id: UUID) -> Optional[Application]:
    result = await db.execute(
        select(Application).where(Application.id == application_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    payload: ApplicationCreate,
    current_user: User = Depends(require_roles(UserRole.CANDIDATE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply to a published job.

    Returns:
        201: Application created, HR notified
        400: No candidate profile, or job not open for applications
        404: Job not found
        409: Already applied
    """
    candidate = current_user.candidate_profile
    if candidate is None:
        raise HTTPException(status_code=400, detail="Create your candidate profile first")

    job = await get_job(db, payload.job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    if not job.is_published():
        raise HTTPException(status_code=400, detail="This job is not accepting applications")

    if await find_job_application(db, job.id, candidate.id):
        raise HTTPException(status_code=409, detail="You have already applied to this job")

    try:
        application = Application(
            job_id=job.id,
            candidate_id=candidate.id,
            hr_id=job.hr_id,
            status=ApplicationStatus.PENDING.value,
            cover_letter=payload.cover_letter,
            resume_url=payload.resume_url,
        )
        db.add(application)
        job.applications_count = (job.applications_count or 0) + 1
        await db.commit()
    except IntegrityError:
        # A concurrent apply won the unique constraint
        await db.rollback()
        raise HTTPException(status_code=409, detail="You have already applied to this job")
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating application: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit application")

    logger.info(f"Candidate {current_user.email} applied to job {job.id}")

    if job.hr and job.hr.user:
        await email_service.send_application_received(
            job.hr.user.email,
            job.title,
            f"{candidate.first_name} {candidate.last_name}",
        )

    return build_application_response(await _get_application(db, application.id))


@router.get("/my", response_model=List[ApplicationResponse])
async def list_my_applications(
    status: Optional[ApplicationStatus] = Query(None),
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.CANDIDATE)),
    db: AsyncSession = Depends(get_db)
):
    """
    HR: applications received for their jobs.
    Candidate: their own applications.
    """
    profile = current_user.get_profile()
    if profile is None:
        return []

    if current_user.role == UserRole.HR:
        query = select(Application).where(Application.hr_id == profile.id)
    else:
        query = select(Application).where(Application.candidate_id == profile.id)

    if status is not None:
        query = query.where(Application.status == status.value)

    result = await db.execute(query.order_by(Application.applied_at.desc()))
    include_candidate = current_user.role == UserRole.HR
    return [build_application_response(a, include_candidate) for a in result.scalars().all()]


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application_status(
    application_id: UUID,
    payload: ApplicationStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Change an application's status.

    The job owner (or an admin) may set any status.
    The applying candidate may only withdraw.
    """
    application = await _get_application(db, application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    is_reviewer = current_user.is_admin() or (
        current_user.hr_profile is not None and application.hr_id == current_user.hr_profile.id
    )
    is_applicant = (
        current_user.candidate_profile is not None
        and application.candidate_id == current_user.candidate_profile.id
    )

    if is_reviewer:
        notes = payload.notes
    elif is_applicant:
        if payload.status != ApplicationStatus.WITHDRAWN:
            raise HTTPException(status_code=403, detail="Candidates can only withdraw their application")
        notes = None
    else:
        logger.warning(f"User {current_user.email} attempted to change application {application_id}")
        raise HTTPException(status_code=403, detail="You cannot modify this application")

    previous = application.status
    await set_status(db, application, payload.status, notes=notes)

    if is_reviewer and previous != application.status and application.candidate and application.candidate.user:
        await email_service.send_application_status_changed(
            application.candidate.user.email,
            application.job.title if application.job else "your application",
            application.status,
        )

    return build_application_response(await _get_application(db, application.id))
