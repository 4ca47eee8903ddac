"""
User account removal.

Deletes are issued explicitly, child rows first, so removal behaves the
same on databases that do not enforce foreign-key cascades (SQLite).
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.user import User
from smartmatch.models.profiles import HRProfile, CandidateProfile, UniversityProfile, AdminProfile
from smartmatch.models.skill import job_skills
from smartmatch.models.job import Job
from smartmatch.models.application import Application
from smartmatch.models.internship import Internship, InternshipApplication
from smartmatch.models.internship_request import InternshipRequest, InternshipRequestStatus, CompanyResponse
from smartmatch.models.moderation_log import ModerationLog
from smartmatch.models.notification import Notification
from smartmatch.models.student import Student, StudentSkill

logger = logging.getLogger(__name__)


async def delete_job_rows(db: AsyncSession, job_ids) -> None:
    """Delete jobs with their applications, skill links and moderation log."""
    await db.execute(delete(Application).where(Application.job_id.in_(job_ids)))
    await db.execute(delete(ModerationLog).where(ModerationLog.job_id.in_(job_ids)))
    await db.execute(delete(job_skills).where(job_skills.c.job_id.in_(job_ids)))
    await db.execute(delete(Job).where(Job.id.in_(job_ids)))


async def delete_internship_rows(db: AsyncSession, internship_ids) -> None:
    await db.execute(delete(InternshipApplication).where(InternshipApplication.internship_id.in_(internship_ids)))
    await db.execute(delete(Internship).where(Internship.id.in_(internship_ids)))


async def delete_student_rows(db: AsyncSession, student_ids) -> None:
    await db.execute(delete(StudentSkill).where(StudentSkill.student_id.in_(student_ids)))
    await db.execute(delete(Student).where(Student.id.in_(student_ids)))


async def delete_request_rows(db: AsyncSession, request_ids) -> None:
    await db.execute(delete(CompanyResponse).where(CompanyResponse.internship_request_id.in_(request_ids)))
    await db.execute(delete(InternshipRequest).where(InternshipRequest.id.in_(request_ids)))


async def delete_user_account(db: AsyncSession, user: User) -> None:
    """
    Remove `user`, their role profile and everything the profile owns.

    Not committed; the caller commits (single or bulk delete).
    """
    user_id = user.id

    hr_ids = select(HRProfile.id).where(HRProfile.user_id == user_id)
    await delete_job_rows(db, select(Job.id).where(Job.hr_id.in_(hr_ids)))
    await delete_internship_rows(db, select(Internship.id).where(Internship.hr_id.in_(hr_ids)))
    await db.execute(delete(Application).where(Application.hr_id.in_(hr_ids)))

    # Requests that selected one of these responses reopen without a selection
    hr_response_ids = select(CompanyResponse.id).where(CompanyResponse.hr_id.in_(hr_ids))
    await db.execute(
        update(InternshipRequest)
        .where(
            InternshipRequest.selected_response_id.in_(hr_response_ids),
            InternshipRequest.status == InternshipRequestStatus.IN_PROGRESS.value,
        )
        .values(status=InternshipRequestStatus.APPROVED.value)
    )
    await db.execute(
        update(InternshipRequest)
        .where(InternshipRequest.selected_response_id.in_(hr_response_ids))
        .values(selected_response_id=None)
    )
    await db.execute(delete(CompanyResponse).where(CompanyResponse.hr_id.in_(hr_ids)))

    candidate_ids = select(CandidateProfile.id).where(CandidateProfile.user_id == user_id)
    await db.execute(delete(Application).where(Application.candidate_id.in_(candidate_ids)))
    await db.execute(delete(InternshipApplication).where(InternshipApplication.candidate_id.in_(candidate_ids)))

    university_ids = select(UniversityProfile.id).where(UniversityProfile.user_id == user_id)
    await delete_student_rows(db, select(Student.id).where(Student.university_id.in_(university_ids)))
    await delete_request_rows(
        db, select(InternshipRequest.id).where(InternshipRequest.university_id.in_(university_ids))
    )

    # Staff history
    await db.execute(delete(ModerationLog).where(ModerationLog.moderator_id == user_id))
    await db.execute(update(Job).where(Job.moderator_id == user_id).values(moderator_id=None))
    await db.execute(update(Notification).where(Notification.created_by == user_id).values(created_by=None))

    for profile_model in (HRProfile, CandidateProfile, UniversityProfile, AdminProfile):
        await db.execute(delete(profile_model).where(profile_model.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))

    logger.info(f"Deleted user {user.email} ({user.role.value}) and owned records")
