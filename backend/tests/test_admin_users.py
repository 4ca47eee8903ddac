"""
Tests for admin user management.
"""
import pytest
from unittest.mock import AsyncMock

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from smartmatch.models.job import Job
from smartmatch.models.profiles import HRProfile
from smartmatch.models.user import User, UserRole
from smartmatch.services.email import email_service


UNKNOWN_ID = "00000000-0000-0000-0000-000000000000"


@pytest.mark.asyncio
async def test_list_users(admin_client: AsyncClient, hr_user: User, candidate_user: User):
    response = await admin_client.get("/api/admin/users")

    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["total"] == 3
    emails = {u["email"] for u in data["users"]}
    assert emails == {"admin@example.com", "hr@example.com", "candidate@example.com"}

    hr_item = next(u for u in data["users"] if u["email"] == "hr@example.com")
    assert hr_item["company"] == hr_user.hr_profile.company
    assert hr_item["display_name"].startswith("Hanna ")


@pytest.mark.asyncio
async def test_list_users_filters(admin_client: AsyncClient, hr_user: User, user_factory):
    await user_factory(UserRole.CANDIDATE, is_active=False)

    by_role = (await admin_client.get("/api/admin/users", params={"role": "HR"})).json()
    assert [u["email"] for u in by_role["users"]] == ["hr@example.com"]

    inactive = (await admin_client.get("/api/admin/users", params={"is_active": "false"})).json()
    assert [u["role"] for u in inactive["users"]] == ["CANDIDATE"]

    by_company = (await admin_client.get("/api/admin/users", params={"search": hr_user.hr_profile.company})).json()
    assert [u["email"] for u in by_company["users"]] == ["hr@example.com"]


@pytest.mark.asyncio
async def test_non_admin_is_forbidden(moderator_client: AsyncClient, hr_client: AsyncClient):
    assert (await moderator_client.get("/api/admin/users")).status_code == 403
    assert (await hr_client.get("/api/admin/users")).status_code == 403


# ============================================================
# STATUS
# ============================================================

@pytest.mark.asyncio
async def test_deactivate_user(admin_client: AsyncClient, hr_user: User, hr_client: AsyncClient):
    response = await admin_client.patch(f"/api/admin/users/{hr_user.id}/status", json={"is_active": False})

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert (await hr_client.get("/api/auth/me")).status_code == 403


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_self(admin_client: AsyncClient, admin_user: User):
    response = await admin_client.patch(f"/api/admin/users/{admin_user.id}/status", json={"is_active": False})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_status_of_unknown_user_returns_404(admin_client: AsyncClient):
    response = await admin_client.patch(f"/api/admin/users/{UNKNOWN_ID}/status", json={"is_active": True})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_bulk_status_skips_self_and_unknown(
    admin_client: AsyncClient, admin_user: User, user_factory, reload_user
):
    first = await user_factory(UserRole.CANDIDATE)
    second = await user_factory(UserRole.HR)

    response = await admin_client.post(
        "/api/admin/users/bulk/status",
        json={"user_ids": [str(first.id), str(second.id), str(admin_user.id), UNKNOWN_ID], "is_active": False}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "affected": 2, "skipped": 2}
    assert (await reload_user(first.id)).is_active is False
    assert (await reload_user(second.id)).is_active is False
    assert (await reload_user(admin_user.id)).is_active is True


# ============================================================
# DELETE
# ============================================================

@pytest.mark.asyncio
async def test_delete_user_removes_owned_records(
    admin_client: AsyncClient, hr_user: User, published_job: Job, db: AsyncSession
):
    response = await admin_client.delete(f"/api/admin/users/{hr_user.id}")

    assert response.status_code == 200
    assert (await db.execute(select(User).where(User.id == hr_user.id))).scalar_one_or_none() is None
    assert (await db.execute(select(HRProfile))).scalars().all() == []
    assert (await db.execute(select(Job))).scalars().all() == []


@pytest.mark.asyncio
async def test_deleting_selected_hr_reopens_internship_request(
    admin_client: AsyncClient, university_client: AsyncClient, hr_client: AsyncClient, hr_user: User, monkeypatch
):
    monkeypatch.setattr(email_service, "send_company_selected", AsyncMock(return_value=True))
    request = (await university_client.post("/api/internship-requests", json={
        "specialty": "Software Engineering",
        "student_count": 2,
        "period": "Summer 2026",
        "start_date": "2026-06-01T00:00:00",
        "end_date": "2026-08-31T00:00:00",
        "description": "Backend practice",
        "skills": ["Python"],
        "location": "Tomsk",
    })).json()
    chosen = (await hr_client.post(
        "/api/internship-requests/respond",
        json={"internship_request_id": request["id"], "message": "We can host", "contact_email": "jobs@acme.com"}
    )).json()
    await university_client.post(
        f"/api/internship-requests/{request['id']}/select-company", json={"company_response_id": chosen["id"]}
    )

    assert (await admin_client.delete(f"/api/admin/users/{hr_user.id}")).status_code == 200

    data = (await university_client.get(f"/api/internship-requests/{request['id']}")).json()
    assert data["selected_response_id"] is None
    assert data["selected_company"] is None
    assert data["company_responses"] == []
    assert data["status"] == "APPROVED"


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(admin_client: AsyncClient, admin_user: User):
    response = await admin_client.delete(f"/api/admin/users/{admin_user.id}")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bulk_delete(admin_client: AsyncClient, user_factory, db: AsyncSession):
    users = [await user_factory(UserRole.CANDIDATE) for _ in range(2)]

    response = await admin_client.post(
        "/api/admin/users/bulk/delete",
        json={"user_ids": [str(u.id) for u in users] + [UNKNOWN_ID]}
    )

    assert response.json() == {"success": True, "affected": 2, "skipped": 1}
    remaining = (await db.execute(select(User.role))).scalars().all()
    assert remaining == [UserRole.ADMIN]


@pytest.mark.asyncio
async def test_bulk_requires_ids(admin_client: AsyncClient):
    response = await admin_client.post("/api/admin/users/bulk/delete", json={"user_ids": []})
    assert response.status_code == 422
