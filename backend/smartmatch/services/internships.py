"""Internship business logic."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.internship import Internship, InternshipApplication, InternshipApplicationStatus
from smartmatch.models.user import User, UserRole
from smartmatch.schemas.application import CandidateSummary
from smartmatch.schemas.internship import (
    InternshipResponse,
    InternshipSummary,
    InternshipApplicationResponse,
)


def compute_duration(start_date: datetime, end_date: datetime) -> int:
    """Length in whole days, at least one."""
    return max((end_date - start_date).days, 1)


async def get_internship(db: AsyncSession, internship_id: UUID) -> Optional[Internship]:
    result = await db.execute(
        select(Internship).where(Internship.id == internship_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_internship_application(db: AsyncSession, application_id: UUID) -> Optional[InternshipApplication]:
    result = await db.execute(
        select(InternshipApplication)
        .where(InternshipApplication.id == application_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_internship_application(
    db: AsyncSession, internship_id: UUID, candidate_id: UUID
) -> Optional[InternshipApplication]:
    result = await db.execute(
        select(InternshipApplication).where(
            InternshipApplication.internship_id == internship_id,
            InternshipApplication.candidate_id == candidate_id,
        )
    )
    return result.scalar_one_or_none()


def can_manage_internship(user: User, internship: Internship) -> bool:
    if user.is_admin():
        return True
    return user.hr_profile is not None and internship.hr_id == user.hr_profile.id


async def count_accepted(db: AsyncSession, internship_id: UUID) -> int:
    result = await db.execute(
        select(func.count(InternshipApplication.id)).where(
            InternshipApplication.internship_id == internship_id,
            InternshipApplication.status == InternshipApplicationStatus.ACCEPTED.value,
        )
    )
    return result.scalar_one()


def build_internship_response(
    internship: Internship,
    application: Optional[InternshipApplication] = None,
    for_candidate: bool = False,
) -> InternshipResponse:
    response = InternshipResponse.model_validate(internship)
    if for_candidate:
        response.has_applied = application is not None
        if application is not None:
            response.application_status = application.status
            response.application_id = application.id
            response.applied_at = application.applied_at
    return response


async def build_internship_responses(
    db: AsyncSession, internships: list[Internship], user: Optional[User]
) -> list[InternshipResponse]:
    """Build responses for a listing, with applied-state for candidates."""
    if user is None or user.role != UserRole.CANDIDATE or user.candidate_profile is None:
        return [build_internship_response(internship) for internship in internships]

    ids = [internship.id for internship in internships]
    applications = {}
    if ids:
        result = await db.execute(
            select(InternshipApplication).where(
                InternshipApplication.candidate_id == user.candidate_profile.id,
                InternshipApplication.internship_id.in_(ids),
            )
        )
        applications = {a.internship_id: a for a in result.scalars().all()}

    return [
        build_internship_response(internship, applications.get(internship.id), for_candidate=True)
        for internship in internships
    ]


def build_internship_application_response(application: InternshipApplication) -> InternshipApplicationResponse:
    internship = application.internship
    candidate = application.candidate

    internship_summary = None
    if internship is not None:
        internship_summary = InternshipSummary(
            id=internship.id,
            title=internship.title,
            location=internship.location,
            status=internship.status,
            start_date=internship.start_date,
            end_date=internship.end_date,
            company=internship.hr.company if internship.hr else None,
        )

    candidate_summary = None
    if candidate is not None:
        candidate_summary = CandidateSummary(
            id=candidate.id,
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            email=candidate.user.email if candidate.user else None,
            phone=candidate.phone,
            location=candidate.location,
        )

    return InternshipApplicationResponse(
        id=application.id,
        internship_id=application.internship_id,
        candidate_id=application.candidate_id,
        status=application.status,
        cover_letter=application.cover_letter,
        notes=application.notes,
        applied_at=application.applied_at,
        updated_at=application.updated_at,
        internship=internship_summary,
        candidate=candidate_summary,
    )
