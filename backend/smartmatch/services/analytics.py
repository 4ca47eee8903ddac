"""
Admin dashboard analytics and CSV-style exports.

Every query accepts an optional [start_date, end_date] window applied to
the entity's creation timestamp.
"""
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.user import User
from smartmatch.models.profiles import HRProfile, UniversityProfile
from smartmatch.models.skill import Skill, job_skills
from smartmatch.models.job import Job, ModerationStatus
from smartmatch.models.application import Application
from smartmatch.models.internship_request import InternshipRequest
from smartmatch.models.student import Student, StudentSkill
from smartmatch.schemas.analytics import (
    AnalyticsOverview,
    RecentActivity,
    OverviewResponse,
    CompanyAnalytics,
    UniversityAnalytics,
    SkillAnalytics,
    LabelCount,
    SalaryAverages,
    TopCompany,
    JobsAnalytics,
    TopJob,
    DailyCount,
    ApplicationsAnalytics,
    UsersAnalytics,
)

RECENT_ACTIVITY_LIMIT = 10
NEW_USERS_DEFAULT_DAYS = 30


def in_range(query, column, start_date: Optional[datetime], end_date: Optional[datetime]):
    if start_date is not None:
        query = query.where(column >= start_date)
    if end_date is not None:
        query = query.where(column <= end_date)
    return query


async def _count(db: AsyncSession, query) -> int:
    return (await db.execute(query)).scalar_one()


async def _label_counts(db: AsyncSession, column, query) -> list[LabelCount]:
    result = await db.execute(query.group_by(column).order_by(desc(func.count())))
    return [LabelCount(label=str(label), count=count) for label, count in result.all()]


def _daily_counts(timestamps) -> list[DailyCount]:
    counts = Counter(ts.date().isoformat() for ts in timestamps)
    return [DailyCount(date=day, count=counts[day]) for day in sorted(counts)]


async def get_overview(
    db: AsyncSession, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
) -> OverviewResponse:
    overview = AnalyticsOverview(
        total_users=await _count(db, in_range(select(func.count(User.id)), User.created_at, start_date, end_date)),
        total_jobs=await _count(db, in_range(select(func.count(Job.id)), Job.created_at, start_date, end_date)),
        total_applications=await _count(
            db, in_range(select(func.count(Application.id)), Application.applied_at, start_date, end_date)
        ),
        total_companies=await _count(
            db,
            in_range(select(func.count(func.distinct(HRProfile.company))), HRProfile.created_at, start_date, end_date),
        ),
        total_universities=await _count(
            db, in_range(select(func.count(UniversityProfile.id)), UniversityProfile.created_at, start_date, end_date)
        ),
        pending_moderation=await _count(
            db,
            in_range(
                select(func.count(Job.id)).where(Job.moderation_status == ModerationStatus.PENDING.value),
                Job.created_at,
                start_date,
                end_date,
            ),
        ),
    )

    activity: list[RecentActivity] = []

    users = await db.execute(
        in_range(select(User), User.created_at, start_date, end_date)
        .order_by(User.created_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    )
    for user in users.scalars().all():
        activity.append(RecentActivity(
            id=user.id,
            type="USER_REGISTERED",
            description=f"{user.email} registered as {user.role.value}",
            timestamp=user.created_at,
            user_id=user.id,
        ))

    jobs = await db.execute(
        in_range(select(Job), Job.created_at, start_date, end_date)
        .order_by(Job.created_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    )
    for job in jobs.scalars().all():
        activity.append(RecentActivity(
            id=job.id,
            type="JOB_CREATED",
            description=f"Job '{job.title}' created",
            timestamp=job.created_at,
            user_id=job.hr.user_id if job.hr else None,
        ))

    applications = await db.execute(
        in_range(select(Application), Application.applied_at, start_date, end_date)
        .order_by(Application.applied_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    )
    for application in applications.scalars().all():
        title = application.job.title if application.job else "a job"
        activity.append(RecentActivity(
            id=application.id,
            type="APPLICATION_SUBMITTED",
            description=f"Application submitted to '{title}'",
            timestamp=application.applied_at,
            user_id=application.candidate.user_id if application.candidate else None,
        ))

    activity.sort(key=lambda item: item.timestamp, reverse=True)
    return OverviewResponse(overview=overview, recent_activity=activity[:RECENT_ACTIVITY_LIMIT])


async def get_company_analytics(
    db: AsyncSession, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
) -> list[CompanyAnalytics]:
    jobs_query = in_range(
        select(HRProfile.company, func.count(Job.id)).join(Job, Job.hr_id == HRProfile.id),
        Job.created_at,
        start_date,
        end_date,
    ).group_by(HRProfile.company)
    job_counts = dict((await db.execute(jobs_query)).all())

    applications_query = in_range(
        select(HRProfile.company, func.count(Application.id)).join(Application, Application.hr_id == HRProfile.id),
        Application.applied_at,
        start_date,
        end_date,
    ).group_by(HRProfile.company)
    application_counts = dict((await db.execute(applications_query)).all())

    companies = (await db.execute(select(HRProfile.company).distinct())).scalars().all()
    rows = [
        CompanyAnalytics(
            name=company,
            total_jobs=job_counts.get(company, 0),
            total_applications=application_counts.get(company, 0),
        )
        for company in companies
    ]
    rows.sort(key=lambda row: (row.total_jobs, row.total_applications), reverse=True)
    return rows


async def get_university_analytics(
    db: AsyncSession, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
) -> list[UniversityAnalytics]:
    student_counts = dict((await db.execute(
        in_range(
            select(Student.university_id, func.count(Student.id)),
            Student.created_at,
            start_date,
            end_date,
        ).group_by(Student.university_id)
    )).all())
    request_counts = dict((await db.execute(
        in_range(
            select(InternshipRequest.university_id, func.count(InternshipRequest.id)),
            InternshipRequest.created_at,
            start_date,
            end_date,
        ).group_by(InternshipRequest.university_id)
    )).all())

    universities = (await db.execute(select(UniversityProfile).order_by(UniversityProfile.name))).scalars().all()
    return [
        UniversityAnalytics(
            name=university.name,
            address=university.address,
            total_students=student_counts.get(university.id, 0),
            total_requests=request_counts.get(university.id, 0),
        )
        for university in universities
    ]


async def get_skill_analytics(
    db: AsyncSession, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
) -> list[SkillAnalytics]:
    job_counts = dict((await db.execute(
        in_range(
            select(job_skills.c.skill_id, func.count(job_skills.c.job_id)).join(Job, Job.id == job_skills.c.job_id),
            Job.created_at,
            start_date,
            end_date,
        ).group_by(job_skills.c.skill_id)
    )).all())
    student_counts = dict((await db.execute(
        in_range(
            select(StudentSkill.skill_id, func.count(StudentSkill.student_id)).join(
                Student, Student.id == StudentSkill.student_id
            ),
            Student.created_at,
            start_date,
            end_date,
        ).group_by(StudentSkill.skill_id)
    )).all())

    skills = (await db.execute(select(Skill).where(Skill.is_active.is_(True)))).scalars().all()
    rows = []
    for skill in skills:
        jobs = job_counts.get(skill.id, 0)
        students = student_counts.get(skill.id, 0)
        rows.append(SkillAnalytics(
            id=skill.id,
            name=skill.name,
            category=skill.category,
            total_jobs=jobs,
            total_students=students,
            demand_score=round(jobs / (students + 1), 2),
        ))
    rows.sort(key=lambda row: row.demand_score, reverse=True)
    return rows


async def get_jobs_analytics(
    db: AsyncSession, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
) -> JobsAnalytics:
    def ranged(query):
        return in_range(query, Job.created_at, start_date, end_date)

    total_jobs = await _count(db, ranged(select(func.count(Job.id))))
    total_applications = await _count(
        db, in_range(select(func.count(Application.id)), Application.applied_at, start_date, end_date)
    )

    averages = (await db.execute(ranged(select(func.avg(Job.salary_min), func.avg(Job.salary_max))))).one()
    top_companies = await db.execute(
        ranged(select(HRProfile.company, func.count(Job.id)).select_from(Job).join(HRProfile, HRProfile.id == Job.hr_id))
        .group_by(HRProfile.company)
        .order_by(desc(func.count(Job.id)))
        .limit(5)
    )

    return JobsAnalytics(
        total_jobs=total_jobs,
        jobs_by_status=await _label_counts(db, Job.status, ranged(select(Job.status, func.count()))),
        jobs_by_type=await _label_counts(db, Job.type, ranged(select(Job.type, func.count()))),
        jobs_by_location=(await _label_counts(db, Job.location, ranged(select(Job.location, func.count()))))[:10],
        average_salary=SalaryAverages(
            salary_min=round(float(averages[0]), 2) if averages[0] is not None else None,
            salary_max=round(float(averages[1]), 2) if averages[1] is not None else None,
        ),
        top_companies=[TopCompany(company=company, job_count=count) for company, count in top_companies.all()],
        job_views=await _count(db, ranged(select(func.coalesce(func.sum(Job.views), 0)))),
        applications_per_job=round(total_applications / total_jobs, 2) if total_jobs else 0.0,
    )


async def get_applications_analytics(
    db: AsyncSession, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
) -> ApplicationsAnalytics:
    def ranged(query):
        return in_range(query, Application.applied_at, start_date, end_date)

    top_jobs = await db.execute(
        ranged(
            select(Job.id, Job.title, func.count(Application.id)).select_from(Application).join(Job, Job.id == Application.job_id)
        )
        .group_by(Job.id, Job.title)
        .order_by(desc(func.count(Application.id)))
        .limit(5)
    )
    applied = (await db.execute(ranged(select(Application.applied_at)))).scalars().all()

    return ApplicationsAnalytics(
        total_applications=await _count(db, ranged(select(func.count(Application.id)))),
        applications_by_status=await _label_counts(
            db, Application.status, ranged(select(Application.status, func.count()))
        ),
        top_jobs_by_applications=[
            TopJob(job_id=job_id, title=title, application_count=count) for job_id, title, count in top_jobs.all()
        ],
        applications_by_day=_daily_counts(applied),
    )


async def get_users_analytics(
    db: AsyncSession, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
) -> UsersAnalytics:
    def ranged(query):
        return in_range(query, User.created_at, start_date, end_date)

    new_since = start_date or datetime.utcnow() - timedelta(days=NEW_USERS_DEFAULT_DAYS)
    new_users_query = in_range(select(func.count(User.id)), User.created_at, new_since, end_date)
    roles = await db.execute(ranged(select(User.role, func.count())).group_by(User.role).order_by(desc(func.count())))
    registered = (await db.execute(in_range(select(User.created_at), User.created_at, new_since, end_date))).scalars().all()

    return UsersAnalytics(
        total_users=await _count(db, ranged(select(func.count(User.id)))),
        users_by_role=[LabelCount(label=role.value, count=count) for role, count in roles.all()],
        active_users=await _count(db, ranged(select(func.count(User.id)).where(User.is_active.is_(True)))),
        new_users=await _count(db, new_users_query),
        registrations_by_day=_daily_counts(registered),
    )


async def export_users(db: AsyncSession, start_date=None, end_date=None, limit: int = 1000) -> list[dict]:
    result = await db.execute(
        in_range(select(User), User.created_at, start_date, end_date).order_by(User.created_at.desc()).limit(limit)
    )
    return [
        {
            "id": str(user.id),
            "email": user.email,
            "role": user.role.value,
            "is_active": user.is_active,
            "name": user.display_name(),
            "created_at": user.created_at.isoformat(),
            "last_login_at": user.last_login_at.isoformat() if user.last_login_at else None,
        }
        for user in result.scalars().all()
    ]


async def export_jobs(db: AsyncSession, start_date=None, end_date=None, limit: int = 1000) -> list[dict]:
    result = await db.execute(
        in_range(select(Job), Job.created_at, start_date, end_date).order_by(Job.created_at.desc()).limit(limit)
    )
    return [
        {
            "id": str(job.id),
            "title": job.title,
            "company": job.hr.company if job.hr else None,
            "location": job.location,
            "type": job.type,
            "status": job.status,
            "moderation_status": job.moderation_status,
            "salary_min": job.salary_min,
            "salary_max": job.salary_max,
            "views": job.views,
            "applications_count": job.applications_count,
            "created_at": job.created_at.isoformat(),
        }
        for job in result.scalars().all()
    ]


async def export_applications(db: AsyncSession, start_date=None, end_date=None, limit: int = 1000) -> list[dict]:
    result = await db.execute(
        in_range(select(Application), Application.applied_at, start_date, end_date)
        .order_by(Application.applied_at.desc())
        .limit(limit)
    )
    rows = []
    for application in result.scalars().all():
        candidate = application.candidate
        rows.append({
            "id": str(application.id),
            "job_id": str(application.job_id),
            "job_title": application.job.title if application.job else None,
            "candidate": f"{candidate.first_name} {candidate.last_name}" if candidate else None,
            "candidate_email": candidate.user.email if candidate and candidate.user else None,
            "status": application.status,
            "applied_at": application.applied_at.isoformat(),
        })
    return rows
