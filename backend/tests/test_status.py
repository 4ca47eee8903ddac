"""
Tests for the shared status helper.
"""
import pytest
from datetime import datetime

from smartmatch.models.application import Application, ApplicationStatus
from smartmatch.models.internship_request import CompanyResponse, CompanyResponseStatus
from smartmatch.models.job import Job, JobStatus
from smartmatch.models.skill import Skill
from smartmatch.services.status import InvalidStatusError, coerce_status, set_status


def test_coerce_accepts_members_and_values():
    assert coerce_status(JobStatus, JobStatus.PAUSED) is JobStatus.PAUSED
    assert coerce_status(JobStatus, "CLOSED") is JobStatus.CLOSED
    assert coerce_status(ApplicationStatus, "interview_scheduled") is ApplicationStatus.INTERVIEW_SCHEDULED


def test_coerce_rejects_unknown_value():
    with pytest.raises(InvalidStatusError) as exc_info:
        coerce_status(CompanyResponseStatus, "MAYBE")

    assert "PENDING, ACCEPTED, REJECTED" in str(exc_info.value)


def test_coerce_rejects_member_of_other_enum():
    # HIRED exists only for job applications
    with pytest.raises(InvalidStatusError):
        coerce_status(JobStatus, ApplicationStatus.HIRED)


@pytest.mark.asyncio
async def test_set_status_stamps_first_publication():
    job = Job(title="Analyst", description="Numbers", location="Moscow", status=JobStatus.DRAFT.value)

    await set_status(None, job, JobStatus.ACTIVE, commit=False)
    first_published = job.published_at

    assert job.status == "ACTIVE"
    assert first_published is not None

    await set_status(None, job, "PAUSED", commit=False)
    await set_status(None, job, "ACTIVE", commit=False)

    assert job.published_at == first_published


@pytest.mark.asyncio
async def test_set_status_keeps_explicit_publication_date():
    published = datetime(2025, 1, 1)
    job = Job(title="Analyst", description="Numbers", location="Moscow", published_at=published)

    await set_status(None, job, "ACTIVE", commit=False)

    assert job.published_at == published


@pytest.mark.asyncio
async def test_set_status_stores_notes_where_supported():
    application = Application(status=ApplicationStatus.PENDING.value)
    response = CompanyResponse(status=CompanyResponseStatus.PENDING.value)

    await set_status(None, application, "REJECTED", notes="Position filled", commit=False)
    await set_status(None, response, "ACCEPTED", notes="ignored", commit=False)

    assert application.status == "REJECTED"
    assert application.notes == "Position filled"
    assert response.status == "ACCEPTED"
    assert application.updated_at is not None


@pytest.mark.asyncio
async def test_set_status_rejects_entities_without_status():
    with pytest.raises(TypeError):
        await set_status(None, Skill(name="Python", category="Programming"), "ACTIVE", commit=False)


@pytest.mark.asyncio
async def test_set_status_commits_by_default(hr_user, job_factory, db):
    job = await job_factory(hr_user, published=False)

    await set_status(db, job, JobStatus.CLOSED)
    await db.refresh(job)

    assert job.status == "CLOSED"
