"""
Tests for role profile endpoints.
"""
import pytest
from httpx import AsyncClient

from smartmatch.models.user import User, UserRole


@pytest.mark.asyncio
async def test_create_hr_profile(client_factory, user_factory):
    user = await user_factory(UserRole.HR, with_profile=False)
    client = client_factory(user)

    response = await client.post(
        "/api/profiles/hr",
        json={
            "first_name": "Irina",
            "last_name": "Petrova",
            "company": "Yandex",
            "position": "Tech Recruiter",
            "avatar_url": "https://cdn.example.com/irina.png",
        }
    )

    assert response.status_code == 201
    data = response.json()
    assert data["company"] == "Yandex"
    assert data["user_id"] == str(user.id)
    assert data["avatar_url"] == "https://cdn.example.com/irina.png"

    me = (await client.get("/api/auth/me")).json()
    assert me["has_profile"] is True
    assert me["profile"]["company"] == "Yandex"


@pytest.mark.asyncio
async def test_create_university_profile(client_factory, user_factory):
    user = await user_factory(UserRole.UNIVERSITY, with_profile=False)
    client = client_factory(user)

    response = await client.post(
        "/api/profiles/university",
        json={"name": "MIPT", "address": "Dolgoprudny", "website": "https://mipt.ru"}
    )

    assert response.status_code == 201
    assert response.json()["name"] == "MIPT"


@pytest.mark.asyncio
async def test_create_profile_twice_returns_409(hr_client: AsyncClient):
    response = await hr_client.post(
        "/api/profiles/hr",
        json={"first_name": "A", "last_name": "B", "company": "C", "position": "D"}
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_profile_for_other_role_forbidden(client_factory, user_factory):
    user = await user_factory(UserRole.CANDIDATE, with_profile=False)
    client = client_factory(user)

    response = await client.post(
        "/api/profiles/hr",
        json={"first_name": "A", "last_name": "B", "company": "C", "position": "D"}
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_profile_type_returns_404(candidate_client: AsyncClient):
    response = await candidate_client.get("/api/profiles/astronaut")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_profile_missing_fields_returns_422(client_factory, user_factory):
    user = await user_factory(UserRole.HR, with_profile=False)
    client = client_factory(user)

    response = await client.post("/api/profiles/hr", json={"first_name": "Only"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_profile(candidate_client: AsyncClient, candidate_user: User):
    response = await candidate_client.get("/api/profiles/candidate")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(candidate_user.candidate_profile.id)
    assert data["first_name"] == "Carl"


@pytest.mark.asyncio
async def test_get_missing_profile_returns_404(client_factory, user_factory):
    user = await user_factory(UserRole.CANDIDATE, with_profile=False)
    client = client_factory(user)

    response = await client.get("/api/profiles/candidate")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patch_profile_updates_only_given_fields(candidate_client: AsyncClient):
    response = await candidate_client.patch(
        "/api/profiles",
        json={"bio": "Python developer", "location": "Kazan"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["bio"] == "Python developer"
    assert data["location"] == "Kazan"
    assert data["first_name"] == "Carl"


@pytest.mark.asyncio
async def test_patch_profile_validates_against_role_schema(candidate_client: AsyncClient):
    response = await candidate_client.patch("/api/profiles", json={"first_name": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_patch_profile_rejects_null_for_required_field(
    candidate_client: AsyncClient, hr_client: AsyncClient, hr_user: User
):
    assert (await candidate_client.patch("/api/profiles", json={"last_name": None})).status_code == 422
    assert (await hr_client.patch("/api/profiles", json={"company": None})).status_code == 422

    profile = (await hr_client.get("/api/profiles/hr")).json()
    assert profile["company"] == hr_user.hr_profile.company

    cleared = await candidate_client.patch("/api/profiles", json={"bio": None})
    assert cleared.status_code == 200
    assert cleared.json()["bio"] is None


@pytest.mark.asyncio
async def test_moderator_uses_admin_profile_shape(client_factory, user_factory):
    user = await user_factory(UserRole.MODERATOR, with_profile=False)
    client = client_factory(user)

    response = await client.post(
        "/api/profiles/moderator",
        json={"first_name": "Mira", "last_name": "K", "position": "Moderator", "department": "Trust"}
    )

    assert response.status_code == 201
    assert response.json()["department"] == "Trust"
