"""Job and job application business logic."""
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.job import Job, ModerationStatus
from smartmatch.models.application import Application
from smartmatch.models.profiles import CandidateProfile
from smartmatch.models.skill import Skill
from smartmatch.models.user import User, UserRole
from smartmatch.schemas.job import JobResponse
from smartmatch.schemas.application import ApplicationResponse, ApplicationJobSummary, CandidateSummary


# Changing any of these sends the job back to moderation
CONTENT_FIELDS = {
    "title",
    "description",
    "requirements",
    "responsibilities",
    "benefits",
    "salary_min",
    "salary_max",
    "currency",
    "location",
    "type",
    "experience_level",
    "remote",
    "deadline",
    "skill_ids",
}


async def get_job(db: AsyncSession, job_id: UUID) -> Optional[Job]:
    """Load a job with fresh relationships."""
    result = await db.execute(
        select(Job).where(Job.id == job_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def load_skills(db: AsyncSession, skill_ids: Iterable[UUID]) -> Optional[list[Skill]]:
    """Return the skills for `skill_ids`, or None if any id is unknown."""
    ids = set(skill_ids)
    if not ids:
        return []
    result = await db.execute(select(Skill).where(Skill.id.in_(ids)))
    skills = list(result.scalars().all())
    if len(skills) != len(ids):
        return None
    return skills


async def find_job_application(db: AsyncSession, job_id: UUID, candidate_id: UUID) -> Optional[Application]:
    """The candidate's existing application to `job_id`, if any."""
    result = await db.execute(
        select(Application).where(Application.job_id == job_id, Application.candidate_id == candidate_id)
    )
    return result.scalar_one_or_none()


def can_manage_job(user: User, job: Job) -> bool:
    """Owner HR or admin."""
    if user.is_admin():
        return True
    return user.hr_profile is not None and job.hr_id == user.hr_profile.id


def apply_job_update(job: Job, update_data: dict, skills: Optional[list[Skill]] = None) -> bool:
    """
    Copy content fields from `update_data` onto `job`.

    Status is not handled here; it goes through set_status.

    Returns:
        True if moderation was reset to PENDING
    """
    content_changed = False
    for field, value in update_data.items():
        if field not in CONTENT_FIELDS:
            continue
        if field == "skill_ids":
            job.skills = skills or []
        else:
            if hasattr(value, "value"):
                value = value.value
            setattr(job, field, value)
        content_changed = True

    if content_changed and job.moderation_status != ModerationStatus.PENDING.value:
        job.moderation_status = ModerationStatus.PENDING.value
        return True
    return False


async def get_candidate_applications(
    db: AsyncSession, candidate: CandidateProfile, job_ids: list[UUID]
) -> dict[UUID, Application]:
    """Map job id -> the candidate's application, for the given jobs."""
    if not job_ids:
        return {}
    result = await db.execute(
        select(Application).where(
            Application.candidate_id == candidate.id,
            Application.job_id.in_(job_ids),
        )
    )
    return {application.job_id: application for application in result.scalars().all()}


def build_job_response(job: Job, application: Optional[Application] = None, for_candidate: bool = False) -> JobResponse:
    """Build JobResponse, adding the candidate's application state when asked."""
    response = JobResponse.model_validate(job)
    if for_candidate:
        response.has_applied = application is not None
        if application is not None:
            response.application_status = application.status
            response.applied_at = application.applied_at
    return response


async def build_job_responses(db: AsyncSession, jobs: list[Job], user: Optional[User]) -> list[JobResponse]:
    """Build responses for a listing, with applied-state for candidates."""
    if user is None or user.role != UserRole.CANDIDATE or user.candidate_profile is None:
        return [build_job_response(job) for job in jobs]

    applications = await get_candidate_applications(db, user.candidate_profile, [job.id for job in jobs])
    return [build_job_response(job, applications.get(job.id), for_candidate=True) for job in jobs]


def build_application_response(application: Application, include_candidate: bool = True) -> ApplicationResponse:
    """Build ApplicationResponse with job and candidate summaries."""
    job = application.job
    candidate = application.candidate

    job_summary = None
    if job is not None:
        job_summary = ApplicationJobSummary(
            id=job.id,
            title=job.title,
            location=job.location,
            type=job.type,
            status=job.status,
            company=job.hr.company if job.hr else None,
        )

    candidate_summary = None
    if include_candidate and candidate is not None:
        candidate_summary = CandidateSummary(
            id=candidate.id,
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            email=candidate.user.email if candidate.user else None,
            phone=candidate.phone,
            location=candidate.location,
        )

    return ApplicationResponse(
        id=application.id,
        job_id=application.job_id,
        candidate_id=application.candidate_id,
        hr_id=application.hr_id,
        status=application.status,
        cover_letter=application.cover_letter,
        resume_url=application.resume_url,
        notes=application.notes,
        applied_at=application.applied_at,
        updated_at=application.updated_at,
        job=job_summary,
        candidate=candidate_summary,
    )
