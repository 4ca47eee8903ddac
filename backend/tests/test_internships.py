"""
Tests for internships and internship applications.
"""
import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import UUID

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from smartmatch.api import internships as internships_api
from smartmatch.models.internship import Internship, InternshipApplication
from smartmatch.models.user import User, UserRole
from smartmatch.services.email import email_service
from smartmatch.services.internships import compute_duration


def _payload(**overrides) -> dict:
    start = datetime(2026, 6, 1)
    data = {
        "title": "Data Engineering Intern",
        "description": "Build pipelines",
        "location": "Moscow",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=90)).isoformat(),
        "salary_min": 40000,
        "salary_max": 60000,
        "max_participants": 2,
        "skills": ["Python", "SQL"],
        "tags": ["data", "summer"],
    }
    data.update(overrides)
    return data


async def _create(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/internships", json=_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture(autouse=True)
def quiet_emails(monkeypatch):
    monkeypatch.setattr(email_service, "send_application_received", AsyncMock(return_value=True))
    monkeypatch.setattr(email_service, "send_application_status_changed", AsyncMock(return_value=True))


# ============================================================
# DURATION
# ============================================================

def test_compute_duration_in_days():
    assert compute_duration(datetime(2026, 6, 1), datetime(2026, 8, 30)) == 90


def test_compute_duration_is_at_least_one_day():
    start = datetime(2026, 6, 1, 9, 0)
    assert compute_duration(start, start + timedelta(hours=3)) == 1


# ============================================================
# CREATE / LIST
# ============================================================

@pytest.mark.asyncio
async def test_create_internship_derives_duration(hr_client: AsyncClient, hr_user: User):
    data = await _create(hr_client)

    assert data["status"] == "ACTIVE"
    assert data["duration"] == 90
    assert data["skills"] == ["Python", "SQL"]
    assert data["hr"]["company"] == hr_user.hr_profile.company
    assert data["applications_count"] == 0


@pytest.mark.asyncio
async def test_create_internship_explicit_duration_and_status(hr_client: AsyncClient):
    data = await _create(hr_client, duration=60, status="DRAFT")

    assert data["duration"] == 60
    assert data["status"] == "DRAFT"


@pytest.mark.asyncio
async def test_create_internship_rejects_inverted_dates(hr_client: AsyncClient):
    response = await hr_client.post(
        "/api/internships",
        json=_payload(start_date="2026-09-01T00:00:00", end_date="2026-06-01T00:00:00")
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_internships_filters(hr_client: AsyncClient, async_client: AsyncClient):
    await _create(hr_client, title="Python Intern", skills=["Python"], tags=["backend"], is_remote=True)
    await _create(hr_client, title="Design Intern", skills=["Figma"], tags=["design"], salary_min=10000, salary_max=20000)
    await _create(hr_client, title="Hidden Intern", status="DRAFT")

    everything = (await async_client.get("/api/internships")).json()
    assert everything["total"] == 2

    by_skill = (await async_client.get("/api/internships", params={"skills": "python"})).json()
    assert [i["title"] for i in by_skill["internships"]] == ["Python Intern"]

    by_tag = (await async_client.get("/api/internships", params={"tags": "design,marketing"})).json()
    assert [i["title"] for i in by_tag["internships"]] == ["Design Intern"]

    by_remote = (await async_client.get("/api/internships", params={"is_remote": "true"})).json()
    assert [i["title"] for i in by_remote["internships"]] == ["Python Intern"]

    by_salary = (await async_client.get("/api/internships", params={"salary_min": 30000})).json()
    assert [i["title"] for i in by_salary["internships"]] == ["Python Intern"]


@pytest.mark.asyncio
async def test_list_internships_sorting(hr_client: AsyncClient, async_client: AsyncClient):
    await _create(hr_client, title="B Intern")
    await _create(hr_client, title="A Intern")

    response = await async_client.get("/api/internships", params={"sort_by": "title", "sort_order": "asc"})

    assert [i["title"] for i in response.json()["internships"]] == ["A Intern", "B Intern"]


@pytest.mark.asyncio
async def test_list_internships_rejects_unknown_sort(async_client: AsyncClient):
    response = await async_client.get("/api/internships", params={"sort_by": "password"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_my_internships(hr_client: AsyncClient, client_factory, user_factory):
    await _create(hr_client, title="Mine")
    other = client_factory(await user_factory(UserRole.HR))
    await _create(other, title="Theirs")

    response = await hr_client.get("/api/internships/my")

    assert [i["title"] for i in response.json()["internships"]] == ["Mine"]


@pytest.mark.asyncio
async def test_draft_internship_hidden_from_public(hr_client: AsyncClient, async_client: AsyncClient):
    draft = await _create(hr_client, status="DRAFT")

    assert (await async_client.get(f"/api/internships/{draft['id']}")).status_code == 404
    assert (await hr_client.get(f"/api/internships/{draft['id']}")).status_code == 200


# ============================================================
# UPDATE / DELETE
# ============================================================

@pytest.mark.asyncio
async def test_update_dates_recomputes_duration(hr_client: AsyncClient):
    internship = await _create(hr_client)

    response = await hr_client.patch(
        f"/api/internships/{internship['id']}",
        json={"end_date": "2026-06-11T00:00:00", "status": "PAUSED"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["duration"] == 10
    assert data["status"] == "PAUSED"


@pytest.mark.asyncio
async def test_update_rejects_end_before_existing_start(hr_client: AsyncClient):
    internship = await _create(hr_client)

    response = await hr_client.patch(
        f"/api/internships/{internship['id']}",
        json={"end_date": "2026-01-01T00:00:00"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_partial_salary_update_checked_against_stored_bound(hr_client: AsyncClient, db: AsyncSession):
    internship = await _create(hr_client, salary_min=100, salary_max=200)

    lowered_max = await hr_client.patch(f"/api/internships/{internship['id']}", json={"salary_max": 50})
    raised_min = await hr_client.patch(f"/api/internships/{internship['id']}", json={"salary_min": 500})

    assert lowered_max.status_code == 422
    assert raised_min.status_code == 422
    stored = (await db.execute(
        select(Internship).where(Internship.id == UUID(internship["id"])).execution_options(populate_existing=True)
    )).scalar_one()
    assert (stored.salary_min, stored.salary_max) == (100, 200)

    widened = await hr_client.patch(f"/api/internships/{internship['id']}", json={"salary_max": 300})
    assert widened.status_code == 200
    assert widened.json()["salary_max"] == 300


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "location", "start_date", "end_date", "max_participants", "skills"])
async def test_null_for_required_field_returns_422(hr_client: AsyncClient, field: str):
    internship = await _create(hr_client)

    response = await hr_client.patch(f"/api/internships/{internship['id']}", json={field: None})

    assert response.status_code == 422
    unchanged = (await hr_client.get(f"/api/internships/{internship['id']}")).json()
    assert unchanged["title"] == internship["title"]
    assert unchanged["start_date"] == internship["start_date"]


@pytest.mark.asyncio
async def test_list_filters_treat_wildcards_literally(hr_client: AsyncClient, async_client: AsyncClient):
    await _create(hr_client, title="R Intern", skills=["R"], tags=["stats"])
    await _create(hr_client, title="C_plus Intern", skills=["C_plus"], tags=["systems"])

    any_single_char = (await async_client.get("/api/internships", params={"skills": "_"})).json()
    underscore_skill = (await async_client.get("/api/internships", params={"skills": "c_plus"})).json()
    percent_search = (await async_client.get("/api/internships", params={"search": "%"})).json()

    assert any_single_char["total"] == 0
    assert [i["title"] for i in underscore_skill["internships"]] == ["C_plus Intern"]
    assert percent_search["total"] == 0


@pytest.mark.asyncio
async def test_other_hr_cannot_delete(hr_client: AsyncClient, client_factory, user_factory):
    internship = await _create(hr_client)
    other = client_factory(await user_factory(UserRole.HR))

    assert (await other.delete(f"/api/internships/{internship['id']}")).status_code == 403
    assert (await hr_client.delete(f"/api/internships/{internship['id']}")).status_code == 200
    assert (await hr_client.get(f"/api/internships/{internship['id']}")).status_code == 404


# ============================================================
# APPLICATIONS
# ============================================================

@pytest.mark.asyncio
async def test_apply_to_internship(
    hr_client: AsyncClient, candidate_client: AsyncClient, db: AsyncSession
):
    internship = await _create(hr_client)

    response = await candidate_client.post(
        "/api/internships/apply",
        json={"internship_id": internship["id"], "cover_letter": "Pick me"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "PENDING"
    assert data["internship"]["title"] == internship["title"]
    assert data["candidate"]["email"] == "candidate@example.com"

    detail = (await candidate_client.get(f"/api/internships/{internship['id']}")).json()
    assert detail["applications_count"] == 1
    assert detail["has_applied"] is True
    assert detail["application_id"] == data["id"]

    mine = (await candidate_client.get("/api/internships/my-applications")).json()
    assert [a["id"] for a in mine] == [data["id"]]


@pytest.mark.asyncio
async def test_apply_twice_returns_409(hr_client: AsyncClient, candidate_client: AsyncClient):
    internship = await _create(hr_client)
    payload = {"internship_id": internship["id"]}

    assert (await candidate_client.post("/api/internships/apply", json=payload)).status_code == 201
    assert (await candidate_client.post("/api/internships/apply", json=payload)).status_code == 409


@pytest.mark.asyncio
async def test_racing_duplicate_apply_returns_409(
    hr_client: AsyncClient, candidate_client: AsyncClient, db: AsyncSession, monkeypatch
):
    """The unique constraint answers 409 when the existence check misses a parallel insert."""
    internship = await _create(hr_client)
    payload = {"internship_id": internship["id"]}
    assert (await candidate_client.post("/api/internships/apply", json=payload)).status_code == 201

    monkeypatch.setattr(internships_api, "find_internship_application", AsyncMock(return_value=None))
    response = await candidate_client.post("/api/internships/apply", json=payload)

    assert response.status_code == 409
    rows = (await db.execute(
        select(InternshipApplication).where(InternshipApplication.internship_id == UUID(internship["id"]))
    )).scalars().all()
    assert len(rows) == 1


@pytest.mark.asyncio
async def test_apply_after_deadline_returns_400(hr_client: AsyncClient, candidate_client: AsyncClient):
    deadline = (datetime.utcnow() - timedelta(days=1)).isoformat()
    internship = await _create(hr_client, deadline=deadline)

    response = await candidate_client.post("/api/internships/apply", json={"internship_id": internship["id"]})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_apply_to_inactive_internship_returns_400(hr_client: AsyncClient, candidate_client: AsyncClient):
    internship = await _create(hr_client, status="PAUSED")

    response = await candidate_client.post("/api/internships/apply", json={"internship_id": internship["id"]})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_apply_when_places_taken_returns_409(
    hr_client: AsyncClient, user_factory, client_factory, db: AsyncSession
):
    """Capacity counts ACCEPTED applications only."""
    internship = await _create(hr_client, max_participants=1)

    first = await user_factory(UserRole.CANDIDATE)
    db.add(InternshipApplication(
        internship_id=UUID(internship["id"]),
        candidate_id=first.candidate_profile.id,
        status="ACCEPTED",
    ))
    await db.commit()

    late = client_factory(await user_factory(UserRole.CANDIDATE))
    response = await late.post("/api/internships/apply", json={"internship_id": internship["id"]})

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_hr_reviews_internship_applications(hr_client: AsyncClient, candidate_client: AsyncClient):
    internship = await _create(hr_client)
    application = (await candidate_client.post(
        "/api/internships/apply", json={"internship_id": internship["id"]}
    )).json()

    listing = await hr_client.get(f"/api/internships/{internship['id']}/applications")
    assert [a["id"] for a in listing.json()] == [application["id"]]

    response = await hr_client.patch(
        f"/api/internships/{internship['id']}/applications/{application['id']}",
        json={"status": "ACCEPTED", "notes": "Welcome aboard"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "ACCEPTED"
    assert response.json()["notes"] == "Welcome aboard"
    email_service.send_application_status_changed.assert_awaited_once()


@pytest.mark.asyncio
async def test_candidate_cannot_review_applications(hr_client: AsyncClient, candidate_client: AsyncClient):
    internship = await _create(hr_client)

    response = await candidate_client.get(f"/api/internships/{internship['id']}/applications")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_internship_stored_with_owner(hr_client: AsyncClient, hr_user: User, db: AsyncSession):
    data = await _create(hr_client)

    internship = (await db.execute(select(Internship))).scalar_one()
    assert str(internship.id) == data["id"]
    assert internship.hr_id == hr_user.hr_profile.id
