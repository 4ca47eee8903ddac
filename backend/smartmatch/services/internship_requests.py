"""Internship request and company response business logic."""
from typing import Optional
from uuid import UUID

from sqlalchemy import select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.internship_request import (
    InternshipRequest,
    CompanyResponse,
    CompanyResponseStatus,
    InternshipRequestStatus,
)
from smartmatch.models.user import User
from smartmatch.schemas.internship_request import (
    InternshipRequestResponse,
    CompanyResponseResponse,
    UniversitySummary,
    HRCompanyResponseItem,
    RequestSummary,
)
from smartmatch.services.pagination import contains
from smartmatch.services.status import set_status

# Columns accepted by ?sort_by= on request listings
SORT_COLUMNS = {
    "created_at": InternshipRequest.created_at,
    "start_date": InternshipRequest.start_date,
    "end_date": InternshipRequest.end_date,
    "student_count": InternshipRequest.student_count,
    "specialty": InternshipRequest.specialty,
}


def apply_request_filters(
    query,
    search: Optional[str] = None,
    specialty: Optional[str] = None,
    location: Optional[str] = None,
    status: Optional[str] = None,
    is_remote: Optional[bool] = None,
):
    """Add listing filters shared by the admin, university and public lists."""
    conditions = []
    if search:
        conditions.append(or_(
            contains(InternshipRequest.specialty, search),
            contains(InternshipRequest.description, search),
        ))
    if specialty:
        conditions.append(contains(InternshipRequest.specialty, specialty))
    if location:
        conditions.append(contains(InternshipRequest.location, location))
    if status:
        conditions.append(InternshipRequest.status == status)
    if is_remote is not None:
        conditions.append(InternshipRequest.is_remote == is_remote)

    if conditions:
        query = query.where(and_(*conditions))
    return query


def apply_request_sort(query, sort_by: str, sort_order: str):
    column = SORT_COLUMNS.get(sort_by, InternshipRequest.created_at)
    return query.order_by(column.asc() if sort_order == "asc" else column.desc())


async def get_request(db: AsyncSession, request_id: UUID) -> Optional[InternshipRequest]:
    result = await db.execute(
        select(InternshipRequest)
        .where(InternshipRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_responses(db: AsyncSession, request_id: UUID) -> list[CompanyResponse]:
    result = await db.execute(
        select(CompanyResponse)
        .where(CompanyResponse.internship_request_id == request_id)
        .order_by(CompanyResponse.responded_at.desc())
    )
    return list(result.scalars().all())


async def find_company_response(db: AsyncSession, request_id: UUID, hr_id: UUID) -> Optional[CompanyResponse]:
    """The HR user's existing response to `request_id`, if any."""
    result = await db.execute(
        select(CompanyResponse).where(
            CompanyResponse.internship_request_id == request_id,
            CompanyResponse.hr_id == hr_id,
        )
    )
    return result.scalar_one_or_none()


def is_request_owner(user: User, request: InternshipRequest) -> bool:
    return user.university_profile is not None and request.university_id == user.university_profile.id


def can_manage_request(user: User, request: InternshipRequest) -> bool:
    return user.is_admin() or is_request_owner(user, request)


def build_request_response(
    request: InternshipRequest,
    responses: Optional[list[CompanyResponse]] = None,
) -> InternshipRequestResponse:
    """
    Build InternshipRequestResponse.

    Pass `responses` only for viewers allowed to see company responses
    (the owning university and staff); otherwise they are omitted.
    """
    university = request.university
    university_summary = None
    if university is not None:
        university_summary = UniversitySummary(
            id=university.id,
            name=university.name,
            email=university.user.email if university.user else None,
        )

    company_responses = None
    selected_company = None
    if responses is not None:
        company_responses = [CompanyResponseResponse.model_validate(r) for r in responses]
        for response in company_responses:
            if response.id == request.selected_response_id:
                selected_company = response

    return InternshipRequestResponse(
        id=request.id,
        university_id=request.university_id,
        specialty=request.specialty,
        student_count=request.student_count,
        period=request.period,
        start_date=request.start_date,
        end_date=request.end_date,
        description=request.description,
        requirements=request.requirements,
        skills=request.skills or [],
        location=request.location,
        is_remote=request.is_remote,
        status=request.status,
        selected_response_id=request.selected_response_id,
        created_at=request.created_at,
        updated_at=request.updated_at,
        university=university_summary,
        company_responses=company_responses,
        selected_company=selected_company,
    )


def build_hr_response_item(response: CompanyResponse, request: Optional[InternshipRequest]) -> HRCompanyResponseItem:
    item = HRCompanyResponseItem.model_validate(response)
    if request is not None:
        item.internship_request = RequestSummary(
            id=request.id,
            specialty=request.specialty,
            period=request.period,
            status=request.status,
            university_name=request.university.name if request.university else None,
        )
    return item


async def select_company(
    db: AsyncSession, request: InternshipRequest, chosen: CompanyResponse
) -> list[CompanyResponse]:
    """
    Accept `chosen`, reject the other pending responses and move the
    request to IN_PROGRESS. Commits once.

    Returns:
        All responses for the request, after the update
    """
    responses = await get_responses(db, request.id)
    for response in responses:
        if response.id == chosen.id:
            await set_status(db, response, CompanyResponseStatus.ACCEPTED, commit=False)
        elif response.status == CompanyResponseStatus.PENDING.value:
            await set_status(db, response, CompanyResponseStatus.REJECTED, commit=False)

    request.selected_response_id = chosen.id
    await set_status(db, request, InternshipRequestStatus.IN_PROGRESS, commit=False)
    await db.commit()
    return responses
