"""Admin analytics and export schemas."""
from datetime import datetime
from typing import Any, Optional
from uuid import UUID
from pydantic import BaseModel


class AnalyticsOverview(BaseModel):
    total_users: int
    total_jobs: int
    total_applications: int
    total_companies: int
    total_universities: int
    pending_moderation: int


class RecentActivity(BaseModel):
    id: UUID
    type: str  # USER_REGISTERED | JOB_CREATED | APPLICATION_SUBMITTED
    description: str
    timestamp: datetime
    user_id: Optional[UUID] = None


class OverviewResponse(BaseModel):
    overview: AnalyticsOverview
    recent_activity: list[RecentActivity]


class CompanyAnalytics(BaseModel):
    name: str
    total_jobs: int
    total_applications: int


class UniversityAnalytics(BaseModel):
    name: str
    address: str
    total_students: int
    total_requests: int


class SkillAnalytics(BaseModel):
    id: UUID
    name: str
    category: str
    total_jobs: int
    total_students: int
    demand_score: float


class LabelCount(BaseModel):
    label: str
    count: int


class SalaryAverages(BaseModel):
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None


class TopCompany(BaseModel):
    company: str
    job_count: int


class JobsAnalytics(BaseModel):
    total_jobs: int
    jobs_by_status: list[LabelCount]
    jobs_by_type: list[LabelCount]
    jobs_by_location: list[LabelCount]
    average_salary: SalaryAverages
    top_companies: list[TopCompany]
    job_views: int
    applications_per_job: float


class TopJob(BaseModel):
    job_id: UUID
    title: str
    application_count: int


class DailyCount(BaseModel):
    date: str
    count: int


class ApplicationsAnalytics(BaseModel):
    total_applications: int
    applications_by_status: list[LabelCount]
    top_jobs_by_applications: list[TopJob]
    applications_by_day: list[DailyCount]


class UsersAnalytics(BaseModel):
    total_users: int
    users_by_role: list[LabelCount]
    active_users: int
    new_users: int
    registrations_by_day: list[DailyCount]


class ExportResponse(BaseModel):
    data: list[dict[str, Any]]
    count: int
    exported_at: datetime
