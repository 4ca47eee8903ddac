"""
Tests for registration, login and session handling.
"""
import pytest
from datetime import datetime, timedelta

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from smartmatch.models.user import User, UserRole
from smartmatch.services.security import create_access_token

TEST_PASSWORD = "password123"


# ============================================================
# REGISTRATION
# ============================================================

@pytest.mark.asyncio
async def test_register_creates_user_and_sets_cookie(async_client: AsyncClient, db: AsyncSession):
    """Registration returns a token, sets the session cookie and hashes the password."""
    response = await async_client.post(
        "/api/auth/register",
        json={"email": "New.User@Example.com", "password": "secret123", "role": "HR"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["role"] == "HR"
    assert data["user"]["has_profile"] is False
    assert "auth_token" in response.cookies

    result = await db.execute(select(User).where(User.email == "new.user@example.com"))
    user = result.scalar_one()
    assert user.role == UserRole.HR
    assert user.password_hash != "secret123"


@pytest.mark.asyncio
async def test_register_defaults_to_candidate(async_client: AsyncClient):
    response = await async_client.post(
        "/api/auth/register",
        json={"email": "default@example.com", "password": "secret123"}
    )

    assert response.status_code == 201
    assert response.json()["user"]["role"] == "CANDIDATE"


@pytest.mark.asyncio
async def test_register_duplicate_email_returns_409(async_client: AsyncClient, candidate_user: User):
    """Email uniqueness is case-insensitive."""
    response = await async_client.post(
        "/api/auth/register",
        json={"email": "CANDIDATE@example.com", "password": "secret123"}
    )

    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["ADMIN", "MODERATOR"])
async def test_register_staff_role_forbidden(async_client: AsyncClient, role: str):
    """Staff accounts cannot be self-registered."""
    response = await async_client.post(
        "/api/auth/register",
        json={"email": "sneaky@example.com", "password": "secret123", "role": role}
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_register_validates_password_length(async_client: AsyncClient):
    response = await async_client.post(
        "/api/auth/register",
        json={"email": "short@example.com", "password": "123"}
    )

    assert response.status_code == 422


# ============================================================
# LOGIN
# ============================================================

@pytest.mark.asyncio
async def test_login_success_records_ip(async_client: AsyncClient, db: AsyncSession, hr_user: User, reload_user):
    response = await async_client.post(
        "/api/auth/login",
        json={"email": "hr@example.com", "password": TEST_PASSWORD},
        headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == str(hr_user.id)
    assert data["user"]["has_profile"] is True
    assert data["user"]["first_name"] == "Hanna"

    user = await reload_user(hr_user.id)
    assert user.last_login_ip == "203.0.113.7"
    assert user.last_login_at is not None
    assert user.failed_login_attempts == 0


@pytest.mark.asyncio
async def test_login_wrong_password_returns_401(async_client: AsyncClient, db: AsyncSession, hr_user: User, reload_user):
    response = await async_client.post(
        "/api/auth/login",
        json={"email": "hr@example.com", "password": "wrong-password"}
    )

    assert response.status_code == 401
    user = await reload_user(hr_user.id)
    assert user.failed_login_attempts == 1


@pytest.mark.asyncio
async def test_login_unknown_email_returns_401(async_client: AsyncClient):
    response = await async_client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": "whatever"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_account_lockout_after_failed_attempts(async_client: AsyncClient, db: AsyncSession, hr_user: User, reload_user):
    """
    Five failed logins lock the account for 30 minutes.

    Even the correct password is refused while locked.
    """
    for _ in range(5):
        response = await async_client.post(
            "/api/auth/login",
            json={"email": "hr@example.com", "password": "wrong-password"}
        )
        assert response.status_code == 401

    user = await reload_user(hr_user.id)
    assert user.failed_login_attempts == 5
    assert user.account_locked_until is not None
    assert user.account_locked_until > datetime.utcnow() + timedelta(minutes=29)

    response = await async_client.post(
        "/api/auth/login",
        json={"email": "hr@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_successful_login_resets_failed_attempts(async_client: AsyncClient, db: AsyncSession, hr_user: User, reload_user):
    hr_user.failed_login_attempts = 3
    await db.commit()

    response = await async_client.post(
        "/api/auth/login",
        json={"email": "hr@example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    user = await reload_user(hr_user.id)
    assert user.failed_login_attempts == 0


@pytest.mark.asyncio
async def test_login_deactivated_account_returns_403(async_client: AsyncClient, user_factory):
    await user_factory(UserRole.CANDIDATE, email="inactive@example.com", is_active=False)

    response = await async_client.post(
        "/api/auth/login",
        json={"email": "inactive@example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == 403


# ============================================================
# SESSION
# ============================================================

@pytest.mark.asyncio
async def test_me_returns_profile(candidate_client: AsyncClient, candidate_user: User):
    response = await candidate_client.get("/api/auth/me")

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "candidate@example.com"
    assert data["role"] == "CANDIDATE"
    assert data["profile"]["first_name"] == "Carl"
    assert data["profile"]["location"] == "Moscow"


@pytest.mark.asyncio
async def test_me_requires_authentication(async_client: AsyncClient):
    response = await async_client.get("/api/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_bearer_header_is_accepted(async_client: AsyncClient, hr_user: User):
    token = create_access_token(str(hr_user.id), hr_user.role.value)

    response = await async_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["id"] == str(hr_user.id)


@pytest.mark.asyncio
async def test_invalid_token_returns_401(async_client: AsyncClient):
    async_client.cookies.set("auth_token", "not-a-jwt")

    response = await async_client.get("/api/auth/me")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_returns_401(async_client: AsyncClient, hr_user: User):
    token = create_access_token(str(hr_user.id), hr_user.role.value, expires_delta=timedelta(minutes=-1))
    async_client.cookies.set("auth_token", token)

    response = await async_client.get("/api/auth/me")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_deactivated_user_session_rejected(hr_client: AsyncClient, db: AsyncSession, hr_user: User):
    hr_user.is_active = False
    await db.commit()

    response = await hr_client.get("/api/auth/me")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_logout_clears_cookie(hr_client: AsyncClient):
    response = await hr_client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully logged out"
    assert 'auth_token=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]
