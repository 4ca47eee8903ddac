"""
Admin dashboard analytics and data exports (ADMIN only).

Every endpoint takes an optional start_date / end_date window.
"""
import logging
from datetime import datetime
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.database import get_db
from smartmatch.models.user import User
from smartmatch.api.auth import require_admin
from smartmatch.schemas.analytics import (
    OverviewResponse,
    CompanyAnalytics,
    UniversityAnalytics,
    SkillAnalytics,
    JobsAnalytics,
    ApplicationsAnalytics,
    UsersAnalytics,
    ExportResponse,
)
from smartmatch.schemas.common import UTCDateTime
from smartmatch.services import analytics

logger = logging.getLogger(__name__)
router = APIRouter()


class DateRange:
    """Optional [start_date, end_date] query window."""

    def __init__(
        self,
        start_date: Optional[UTCDateTime] = Query(None),
        end_date: Optional[UTCDateTime] = Query(None),
    ):
        if start_date and end_date and end_date < start_date:
            raise HTTPException(status_code=422, detail="end_date must not be before start_date")
        self.start_date = start_date
        self.end_date = end_date


@router.get("/analytics/overview", response_model=OverviewResponse)
async def overview(
    window: DateRange = Depends(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await analytics.get_overview(db, window.start_date, window.end_date)


@router.get("/analytics/companies", response_model=List[CompanyAnalytics])
async def companies(
    window: DateRange = Depends(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await analytics.get_company_analytics(db, window.start_date, window.end_date)


@router.get("/analytics/universities", response_model=List[UniversityAnalytics])
async def universities(
    window: DateRange = Depends(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await analytics.get_university_analytics(db, window.start_date, window.end_date)


@router.get("/analytics/skills", response_model=List[SkillAnalytics])
async def skills(
    window: DateRange = Depends(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await analytics.get_skill_analytics(db, window.start_date, window.end_date)


@router.get("/analytics/jobs", response_model=JobsAnalytics)
async def jobs(
    window: DateRange = Depends(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await analytics.get_jobs_analytics(db, window.start_date, window.end_date)


@router.get("/analytics/applications", response_model=ApplicationsAnalytics)
async def applications(
    window: DateRange = Depends(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await analytics.get_applications_analytics(db, window.start_date, window.end_date)


@router.get("/analytics/users", response_model=UsersAnalytics)
async def users(
    window: DateRange = Depends(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """User totals; new_users defaults to the last 30 days when no start_date is given."""
    return await analytics.get_users_analytics(db, window.start_date, window.end_date)


EXPORTERS = {
    "users": analytics.export_users,
    "jobs": analytics.export_jobs,
    "applications": analytics.export_applications,
}


@router.get("/export/{dataset}", response_model=ExportResponse)
async def export_dataset(
    dataset: str,
    window: DateRange = Depends(),
    limit: int = Query(1000, ge=1, le=10000),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Export users, jobs or applications as flat records."""
    exporter = EXPORTERS.get(dataset)
    if exporter is None:
        raise HTTPException(status_code=404, detail=f"Unknown export '{dataset}'")

    rows = await exporter(db, window.start_date, window.end_date, limit)
    logger.info(f"Admin {admin.email} exported {len(rows)} {dataset}")
    return ExportResponse(data=rows, count=len(rows), exported_at=datetime.utcnow())
