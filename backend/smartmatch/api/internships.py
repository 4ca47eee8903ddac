"""
Internship endpoints.

HR users publish internships; candidates browse and apply.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, cast, String
from sqlalchemy.exc import IntegrityError

from smartmatch.database import get_db
from smartmatch.models.internship import (
    Internship,
    InternshipStatus,
    InternshipApplication,
    InternshipApplicationStatus,
)
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import get_current_user, get_optional_user, require_roles
from smartmatch.schemas.internship import (
    InternshipCreate,
    InternshipUpdate,
    InternshipResponse,
    InternshipsPage,
    InternshipApply,
    InternshipApplicationStatusUpdate,
    InternshipApplicationResponse,
)
from smartmatch.schemas.common import check_salary_range
from smartmatch.services.accounts import delete_internship_rows
from smartmatch.services.email import email_service
from smartmatch.services.internships import (
    compute_duration,
    get_internship,
    get_internship_application,
    find_internship_application,
    can_manage_internship,
    count_accepted,
    build_internship_response,
    build_internship_responses,
    build_internship_application_response,
)
from smartmatch.services.pagination import paginate, contains, escape_like, LIKE_ESCAPE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from smartmatch.services.status import set_status

logger = logging.getLogger(__name__)
router = APIRouter()

SORT_COLUMNS = {
    "created_at": Internship.created_at,
    "start_date": Internship.start_date,
    "deadline": Internship.deadline,
    "salary_min": Internship.salary_min,
    "title": Internship.title,
}


def _json_list_contains(column, value: str):
    # Matches one element of a JSON string list, case-insensitively
    return cast(column, String).ilike(f'%"{escape_like(value)}"%', escape=LIKE_ESCAPE)


async def _get_managed_internship(db: AsyncSession, internship_id: UUID, user: User) -> Internship:
    internship = await get_internship(db, internship_id)
    if not internship:
        raise HTTPException(status_code=404, detail="Internship not found")
    if not can_manage_internship(user, internship):
        logger.warning(f"User {user.email} attempted to manage internship {internship_id}")
        raise HTTPException(status_code=403, detail="You can only manage your own internships")
    return internship


@router.post("", response_model=InternshipResponse, status_code=201)
async def create_internship(
    payload: InternshipCreate,
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db)
):
    """Create an internship (ACTIVE unless another status is given)."""
    hr_profile = current_user.hr_profile
    if hr_profile is None:
        raise HTTPException(status_code=400, detail="Create your HR profile first")

    data = payload.model_dump()
    status = data.pop("status") or InternshipStatus.ACTIVE
    if data["duration"] is None:
        data["duration"] = compute_duration(data["start_date"], data["end_date"])

    try:
        internship = Internship(hr_id=hr_profile.id, status=status.value, **data)
        db.add(internship)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating internship: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create internship")

    logger.info(f"Created internship {internship.id}: {internship.title} at {hr_profile.company}")
    return build_internship_response(await get_internship(db, internship.id))


@router.get("", response_model=InternshipsPage)
async def list_internships(
    search: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    is_remote: Optional[bool] = Query(None),
    skills: Optional[str] = Query(None, description="Comma-separated skill names (any match)"),
    tags: Optional[str] = Query(None, description="Comma-separated tags (any match)"),
    salary_min: Optional[int] = Query(None, ge=0, description="Pays at least this much"),
    salary_max: Optional[int] = Query(None, ge=0, description="Starts at or below this"),
    sort_by: str = Query("created_at", pattern="^(created_at|start_date|deadline|salary_min|title)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Active internships with filters, sorting and pagination."""
    conditions = [Internship.status == InternshipStatus.ACTIVE.value]

    if search:
        conditions.append(or_(contains(Internship.title, search), contains(Internship.description, search)))
    if location:
        conditions.append(contains(Internship.location, location))
    if is_remote is not None:
        conditions.append(Internship.is_remote == is_remote)
    if skills:
        names = [s.strip() for s in skills.split(",") if s.strip()]
        if names:
            conditions.append(or_(*[_json_list_contains(Internship.skills, name) for name in names]))
    if tags:
        names = [t.strip() for t in tags.split(",") if t.strip()]
        if names:
            conditions.append(or_(*[_json_list_contains(Internship.tags, name) for name in names]))
    if salary_min is not None:
        conditions.append(Internship.salary_max >= salary_min)
    if salary_max is not None:
        conditions.append(Internship.salary_min <= salary_max)

    column = SORT_COLUMNS[sort_by]
    query = (
        select(Internship)
        .where(and_(*conditions))
        .order_by(column.asc() if sort_order == "asc" else column.desc())
    )
    internships, total, total_pages = await paginate(db, query, page, limit)

    return InternshipsPage(
        internships=await build_internship_responses(db, list(internships), current_user),
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


@router.get("/my", response_model=InternshipsPage)
async def list_my_internships(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db)
):
    hr_profile = current_user.hr_profile
    if hr_profile is None:
        raise HTTPException(status_code=400, detail="Create your HR profile first")

    query = select(Internship).where(Internship.hr_id == hr_profile.id).order_by(Internship.created_at.desc())
    internships, total, total_pages = await paginate(db, query, page, limit)
    return InternshipsPage(
        internships=[build_internship_response(i) for i in internships],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


@router.get("/my-applications", response_model=List[InternshipApplicationResponse])
async def list_my_internship_applications(
    current_user: User = Depends(require_roles(UserRole.CANDIDATE)),
    db: AsyncSession = Depends(get_db)
):
    candidate = current_user.candidate_profile
    if candidate is None:
        return []

    result = await db.execute(
        select(InternshipApplication)
        .where(InternshipApplication.candidate_id == candidate.id)
        .order_by(InternshipApplication.applied_at.desc())
    )
    return [build_internship_application_response(a) for a in result.scalars().all()]


@router.post("/apply", response_model=InternshipApplicationResponse, status_code=201)
async def apply_to_internship(
    payload: InternshipApply,
    current_user: User = Depends(require_roles(UserRole.CANDIDATE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply to an internship.

    Returns:
        201: Application created
        400: No profile, internship not active, or deadline passed
        404: Internship not found
        409: Already applied, or all places taken
    """
    candidate = current_user.candidate_profile
    if candidate is None:
        raise HTTPException(status_code=400, detail="Create your candidate profile first")

    internship = await get_internship(db, payload.internship_id)
    if not internship:
        raise HTTPException(status_code=404, detail="Internship not found")
    if internship.status != InternshipStatus.ACTIVE.value:
        raise HTTPException(status_code=400, detail="This internship is not accepting applications")
    if internship.deadline and internship.deadline < datetime.utcnow():
        raise HTTPException(status_code=400, detail="The application deadline has passed")

    if await find_internship_application(db, internship.id, candidate.id):
        raise HTTPException(status_code=409, detail="You have already applied to this internship")

    if await count_accepted(db, internship.id) >= internship.max_participants:
        raise HTTPException(status_code=409, detail="All places for this internship are taken")

    try:
        application = InternshipApplication(
            internship_id=internship.id,
            candidate_id=candidate.id,
            status=InternshipApplicationStatus.PENDING.value,
            cover_letter=payload.cover_letter,
        )
        db.add(application)
        internship.applications_count = (internship.applications_count or 0) + 1
        await db.commit()
    except IntegrityError:
        # A concurrent apply won the unique constraint
        await db.rollback()
        raise HTTPException(status_code=409, detail="You have already applied to this internship")
    except Exception as e:
        await db.rollback()
        logger.error(f"Error applying to internship: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit application")

    logger.info(f"Candidate {current_user.email} applied to internship {internship.id}")

    if internship.hr and internship.hr.user:
        await email_service.send_application_received(
            internship.hr.user.email,
            internship.title,
            f"{candidate.first_name} {candidate.last_name}",
        )

    return build_internship_application_response(await get_internship_application(db, application.id))


@router.get("/{internship_id}", response_model=InternshipResponse)
async def get_internship_detail(
    internship_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db)
):
    """Internship detail. Inactive internships are visible only to the owner and staff."""
    internship = await get_internship(db, internship_id)
    if not internship:
        raise HTTPException(status_code=404, detail="Internship not found")

    privileged = current_user is not None and (
        can_manage_internship(current_user, internship) or current_user.is_staff()
    )
    if not privileged and internship.status != InternshipStatus.ACTIVE.value:
        raise HTTPException(status_code=404, detail="Internship not found")

    return (await build_internship_responses(db, [internship], current_user))[0]


@router.patch("/{internship_id}", response_model=InternshipResponse)
async def update_internship(
    internship_id: UUID,
    payload: InternshipUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    internship = await _get_managed_internship(db, internship_id, current_user)
    update_data = payload.model_dump(exclude_unset=True)
    status = update_data.pop("status", None)

    start_date = update_data.get("start_date") or internship.start_date
    end_date = update_data.get("end_date") or internship.end_date
    if end_date <= start_date:
        raise HTTPException(status_code=422, detail="end_date must be after start_date")
    if ("start_date" in update_data or "end_date" in update_data) and "duration" not in update_data:
        update_data["duration"] = compute_duration(start_date, end_date)

    try:
        check_salary_range(
            update_data.get("salary_min", internship.salary_min),
            update_data.get("salary_max", internship.salary_max),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        for field, value in update_data.items():
            setattr(internship, field, value)
        if status is not None:
            await set_status(db, internship, status, commit=False)
        internship.updated_at = datetime.utcnow()
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating internship {internship_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update internship")

    logger.info(f"Internship {internship.id} updated by {current_user.email}")
    return build_internship_response(await get_internship(db, internship.id))


@router.delete("/{internship_id}")
async def delete_internship(
    internship_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    internship = await _get_managed_internship(db, internship_id, current_user)

    try:
        await delete_internship_rows(db, [internship.id])
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting internship {internship_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete internship")

    logger.info(f"Internship {internship_id} deleted by {current_user.email}")
    return {"message": "Internship deleted"}


@router.get("/{internship_id}/applications", response_model=List[InternshipApplicationResponse])
async def list_internship_applications(
    internship_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    internship = await _get_managed_internship(db, internship_id, current_user)

    result = await db.execute(
        select(InternshipApplication)
        .where(InternshipApplication.internship_id == internship.id)
        .order_by(InternshipApplication.applied_at.desc())
    )
    return [build_internship_application_response(a) for a in result.scalars().all()]


@router.patch(
    "/{internship_id}/applications/{application_id}",
    response_model=InternshipApplicationResponse,
)
async def update_internship_application_status(
    internship_id: UUID,
    application_id: UUID,
    payload: InternshipApplicationStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    internship = await _get_managed_internship(db, internship_id, current_user)

    application = await get_internship_application(db, application_id)
    if not application or application.internship_id != internship.id:
        raise HTTPException(status_code=404, detail="Application not found")

    previous = application.status
    await set_status(db, application, payload.status, notes=payload.notes)

    if previous != application.status and application.candidate and application.candidate.user:
        await email_service.send_application_status_changed(
            application.candidate.user.email,
            internship.title,
            application.status,
        )

    return build_internship_application_response(await get_internship_application(db, application.id))
