"""
Internship request endpoints.

Universities ask companies to host groups of students; HR users respond,
and the university selects one company.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from smartmatch.database import get_db
from smartmatch.models.internship_request import (
    InternshipRequest,
    InternshipRequestStatus,
    CompanyResponse,
    CompanyResponseStatus,
    OPEN_REQUEST_STATUSES,
)
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import get_current_user, require_roles
from smartmatch.schemas.internship_request import (
    InternshipRequestCreate,
    InternshipRequestUpdate,
    InternshipRequestStatusUpdate,
    InternshipRequestResponse,
    InternshipRequestsPage,
    CompanyResponseCreate,
    CompanyResponseResponse,
    SelectCompanyRequest,
)
from smartmatch.services.accounts import delete_request_rows
from smartmatch.services.email import email_service
from smartmatch.services.internship_requests import (
    apply_request_filters,
    apply_request_sort,
    get_request,
    get_responses,
    find_company_response,
    is_request_owner,
    can_manage_request,
    build_request_response,
    select_company,
)
from smartmatch.services.pagination import paginate, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from smartmatch.services.status import set_status

logger = logging.getLogger(__name__)
router = APIRouter()


def request_filters(
    search: Optional[str] = Query(None),
    specialty: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    status: Optional[InternshipRequestStatus] = Query(None),
    is_remote: Optional[bool] = Query(None),
    sort_by: str = Query("created_at", pattern="^(created_at|start_date|end_date|student_count|specialty)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> dict:
    """Query parameters shared by the request listings."""
    return {
        "search": search,
        "specialty": specialty,
        "location": location,
        "status": status.value if status else None,
        "is_remote": is_remote,
        "sort_by": sort_by,
        "sort_order": sort_order,
        "page": page,
        "limit": limit,
    }


async def _list_requests(db: AsyncSession, query, filters: dict, with_responses: bool) -> InternshipRequestsPage:
    query = apply_request_filters(
        query,
        search=filters["search"],
        specialty=filters["specialty"],
        location=filters["location"],
        status=filters["status"],
        is_remote=filters["is_remote"],
    )
    query = apply_request_sort(query, filters["sort_by"], filters["sort_order"])
    requests, total, total_pages = await paginate(db, query, filters["page"], filters["limit"])

    items = []
    for request in requests:
        responses = await get_responses(db, request.id) if with_responses else None
        items.append(build_request_response(request, responses))

    return InternshipRequestsPage(
        requests=items,
        total=total,
        page=filters["page"],
        limit=filters["limit"],
        total_pages=total_pages,
    )


async def _get_managed_request(db: AsyncSession, request_id: UUID, user: User) -> InternshipRequest:
    request = await get_request(db, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Internship request not found")
    if not can_manage_request(user, request):
        logger.warning(f"User {user.email} attempted to manage internship request {request_id}")
        raise HTTPException(status_code=403, detail="You can only manage your own internship requests")
    return request


@router.post("", response_model=InternshipRequestResponse, status_code=201)
async def create_request(
    payload: InternshipRequestCreate,
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY)),
    db: AsyncSession = Depends(get_db)
):
    university = current_user.university_profile
    if university is None:
        raise HTTPException(status_code=400, detail="Create your university profile first")

    try:
        request = InternshipRequest(
            university_id=university.id,
            status=InternshipRequestStatus.PENDING.value,
            **payload.model_dump(),
        )
        db.add(request)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating internship request: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create internship request")

    logger.info(f"Internship request {request.id} ({request.specialty}) created by {university.name}")
    return build_request_response(await get_request(db, request.id), [])


@router.get("", response_model=InternshipRequestsPage)
async def list_all_requests(
    filters: dict = Depends(request_filters),
    current_user: User = Depends(require_roles(UserRole.ADMIN, UserRole.MODERATOR)),
    db: AsyncSession = Depends(get_db)
):
    """All requests (staff)."""
    return await _list_requests(db, select(InternshipRequest), filters, with_responses=True)


@router.get("/my", response_model=InternshipRequestsPage)
async def list_my_requests(
    filters: dict = Depends(request_filters),
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY)),
    db: AsyncSession = Depends(get_db)
):
    university = current_user.university_profile
    if university is None:
        raise HTTPException(status_code=400, detail="Create your university profile first")

    query = select(InternshipRequest).where(InternshipRequest.university_id == university.id)
    return await _list_requests(db, query, filters, with_responses=True)


@router.get("/public", response_model=InternshipRequestsPage)
async def list_open_requests(
    filters: dict = Depends(request_filters),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Requests companies can still respond to (PENDING or APPROVED)."""
    query = select(InternshipRequest).where(InternshipRequest.status.in_(OPEN_REQUEST_STATUSES))
    return await _list_requests(db, query, filters, with_responses=False)


@router.post("/respond", response_model=CompanyResponseResponse, status_code=201)
async def respond_to_request(
    payload: CompanyResponseCreate,
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db)
):
    """
    Offer to host the request's students.

    Returns:
        201: Response recorded (PENDING)
        400: No HR profile, or request no longer open
        404: Request not found
        409: This HR user already responded
    """
    hr_profile = current_user.hr_profile
    if hr_profile is None:
        raise HTTPException(status_code=400, detail="Create your HR profile first")

    request = await get_request(db, payload.internship_request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Internship request not found")
    if request.status not in OPEN_REQUEST_STATUSES:
        raise HTTPException(status_code=400, detail="This internship request is no longer open")

    if await find_company_response(db, request.id, hr_profile.id):
        raise HTTPException(status_code=409, detail="You have already responded to this request")

    response = CompanyResponse(
        internship_request_id=request.id,
        hr_id=hr_profile.id,
        company_name=hr_profile.company,
        contact_email=payload.contact_email,
        message=payload.message,
        status=CompanyResponseStatus.PENDING.value,
    )
    db.add(response)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="You have already responded to this request")

    logger.info(f"{hr_profile.company} responded to internship request {request.id}")
    return response


@router.get("/{request_id}", response_model=InternshipRequestResponse)
async def get_request_detail(
    request_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Request detail. Company responses are shown to the owner and staff only."""
    request = await get_request(db, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Internship request not found")

    responses = None
    if current_user.is_staff() or is_request_owner(current_user, request):
        responses = await get_responses(db, request.id)
    return build_request_response(request, responses)


@router.patch("/{request_id}", response_model=InternshipRequestResponse)
async def update_request(
    request_id: UUID,
    payload: InternshipRequestUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    request = await _get_managed_request(db, request_id, current_user)
    update_data = payload.model_dump(exclude_unset=True)
    status = update_data.pop("status", None)

    start_date = update_data.get("start_date") or request.start_date
    end_date = update_data.get("end_date") or request.end_date
    if end_date <= start_date:
        raise HTTPException(status_code=422, detail="end_date must be after start_date")

    try:
        for field, value in update_data.items():
            setattr(request, field, value)
        if status is not None:
            await set_status(db, request, status, commit=False)
        request.updated_at = datetime.utcnow()
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating internship request {request_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update internship request")

    logger.info(f"Internship request {request.id} updated by {current_user.email}")
    return build_request_response(await get_request(db, request.id), await get_responses(db, request.id))


@router.delete("/{request_id}")
async def delete_request(
    request_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a request and all company responses to it."""
    request = await _get_managed_request(db, request_id, current_user)

    try:
        await delete_request_rows(db, [request.id])
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting internship request {request_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete internship request")

    logger.info(f"Internship request {request_id} deleted by {current_user.email}")
    return {"message": "Internship request deleted"}


@router.patch("/{request_id}/status", response_model=InternshipRequestResponse)
async def update_request_status(
    request_id: UUID,
    payload: InternshipRequestStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    request = await _get_managed_request(db, request_id, current_user)
    await set_status(db, request, payload.status)
    return build_request_response(await get_request(db, request.id), await get_responses(db, request.id))


@router.get("/{request_id}/responses", response_model=List[CompanyResponseResponse])
async def list_request_responses(
    request_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    request = await _get_managed_request(db, request_id, current_user)
    return await get_responses(db, request.id)


@router.post("/{request_id}/select-company", response_model=InternshipRequestResponse)
async def select_company_response(
    request_id: UUID,
    payload: SelectCompanyRequest,
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY)),
    db: AsyncSession = Depends(get_db)
):
    """
    Pick the company that will host the students.

    The chosen response is accepted, other pending responses are rejected
    and the request moves to IN_PROGRESS.
    """
    request = await get_request(db, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Internship request not found")
    if not is_request_owner(current_user, request):
        raise HTTPException(status_code=403, detail="You can only manage your own internship requests")

    chosen = await db.get(CompanyResponse, payload.company_response_id)
    if not chosen or chosen.internship_request_id != request.id:
        raise HTTPException(status_code=404, detail="Company response not found for this request")

    try:
        responses = await select_company(db, request, chosen)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error selecting company for request {request_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to select company")

    logger.info(f"Request {request.id}: {chosen.company_name} selected by {current_user.email}")

    await email_service.send_company_selected(
        chosen.contact_email,
        request.specialty,
        request.university.name if request.university else "A university",
    )

    return build_request_response(await get_request(db, request.id), responses)
