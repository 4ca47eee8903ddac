"""
HR-side view of company responses to internship requests.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from smartmatch.database import get_db
from smartmatch.models.internship_request import InternshipRequest, CompanyResponse
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import require_roles
from smartmatch.schemas.internship_request import (
    CompanyResponseStatusUpdate,
    CompanyResponsesPage,
    HRCompanyResponseItem,
)
from smartmatch.services.internship_requests import build_hr_response_item, get_request
from smartmatch.services.pagination import paginate, contains, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from smartmatch.services.status import set_status

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/company-responses", response_model=CompanyResponsesPage)
async def list_company_responses(
    search: Optional[str] = Query(None, description="Search request specialty"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db)
):
    """The caller's responses, each with a summary of the request."""
    hr_profile = current_user.hr_profile
    if hr_profile is None:
        return CompanyResponsesPage(responses=[], total=0, page=page, limit=limit, total_pages=0)

    query = select(CompanyResponse).where(CompanyResponse.hr_id == hr_profile.id)
    if search:
        query = query.join(
            InternshipRequest, InternshipRequest.id == CompanyResponse.internship_request_id
        ).where(contains(InternshipRequest.specialty, search))
    query = query.order_by(CompanyResponse.responded_at.desc())

    responses, total, total_pages = await paginate(db, query, page, limit)

    items = []
    for response in responses:
        request = await get_request(db, response.internship_request_id)
        items.append(build_hr_response_item(response, request))

    return CompanyResponsesPage(
        responses=items,
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
    )


@router.patch("/company-responses/{response_id}/status", response_model=HRCompanyResponseItem)
async def update_company_response_status(
    response_id: UUID,
    payload: CompanyResponseStatusUpdate,
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db)
):
    response = await db.get(CompanyResponse, response_id)
    if not response:
        raise HTTPException(status_code=404, detail="Company response not found")
    if current_user.hr_profile is None or response.hr_id != current_user.hr_profile.id:
        raise HTTPException(status_code=403, detail="You can only manage your own responses")

    await set_status(db, response, payload.status)
    return build_hr_response_item(response, await get_request(db, response.internship_request_id))
