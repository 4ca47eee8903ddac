"""
Pytest fixtures for testing.
"""
import pytest
import pytest_asyncio
from datetime import datetime
from typing import AsyncGenerator, Optional

from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import smartmatch.database
from smartmatch.database import Base
# Import ALL models so Base.metadata knows about all tables
from smartmatch.models import (
    User,
    UserRole,
    HRProfile,
    CandidateProfile,
    UniversityProfile,
    AdminProfile,
    Job,
    JobStatus,
    ModerationStatus,
)
from smartmatch.services.security import hash_password, create_access_token

# Now import app (after we can override database)
from smartmatch.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "password123"


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # StaticPool keeps a single connection alive so every session
    # sees the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test database
    original_engine = smartmatch.database.engine
    original_sessionmaker = smartmatch.database.AsyncSessionLocal

    smartmatch.database.engine = test_engine
    smartmatch.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    session = async_session()

    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await test_engine.dispose()

        smartmatch.database.engine = original_engine
        smartmatch.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous HTTP client against the test database."""
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ============================================================
# USERS
# ============================================================

PROFILE_FACTORIES = {
    UserRole.HR: lambda user_id, n: HRProfile(
        user_id=user_id, first_name="Hanna", last_name=f"Recruiter{n}", company=f"Acme {n}", position="Recruiter"
    ),
    UserRole.CANDIDATE: lambda user_id, n: CandidateProfile(
        user_id=user_id, first_name="Carl", last_name=f"Candidate{n}", location="Moscow"
    ),
    UserRole.UNIVERSITY: lambda user_id, n: UniversityProfile(
        user_id=user_id, name=f"State University {n}", address="1 Campus Road"
    ),
    UserRole.ADMIN: lambda user_id, n: AdminProfile(
        user_id=user_id, first_name="Ada", last_name=f"Admin{n}", position="Administrator", department="Ops"
    ),
    UserRole.MODERATOR: lambda user_id, n: AdminProfile(
        user_id=user_id, first_name="Mo", last_name=f"Moderator{n}", position="Moderator", department="Trust"
    ),
}


async def _reload_user(db: AsyncSession, user_id) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


@pytest.fixture
def reload_user(db: AsyncSession):
    """Re-read a user from the database, bypassing the identity map."""

    async def _reload(user_id) -> User:
        return await _reload_user(db, user_id)

    return _reload


@pytest_asyncio.fixture
async def user_factory(db: AsyncSession):
    """
    Create users directly in the database.

    Usage: await user_factory(UserRole.HR) or
           await user_factory(UserRole.CANDIDATE, email="c@example.com", with_profile=False)
    """
    counter = {"n": 0}

    async def _create(
        role: UserRole,
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        with_profile: bool = True,
        is_active: bool = True,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=email or f"{role.value.lower()}{n}@example.com",
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
        db.add(user)
        await db.flush()

        if with_profile:
            db.add(PROFILE_FACTORIES[role](user.id, n))
        await db.commit()

        return await _reload_user(db, user.id)

    return _create


@pytest_asyncio.fixture
async def client_factory(db: AsyncSession):
    """Create HTTP clients authenticated as a given user via the session cookie."""
    clients = []
    transport = ASGITransport(app=fastapi_app)

    def _create(user: Optional[User] = None) -> AsyncClient:
        client = AsyncClient(transport=transport, base_url="http://test")
        if user is not None:
            client.cookies.set("auth_token", create_access_token(str(user.id), user.role.value))
        clients.append(client)
        return client

    yield _create

    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def hr_user(user_factory) -> User:
    return await user_factory(UserRole.HR, email="hr@example.com")


@pytest_asyncio.fixture
async def candidate_user(user_factory) -> User:
    return await user_factory(UserRole.CANDIDATE, email="candidate@example.com")


@pytest_asyncio.fixture
async def university_user(user_factory) -> User:
    return await user_factory(UserRole.UNIVERSITY, email="university@example.com")


@pytest_asyncio.fixture
async def admin_user(user_factory) -> User:
    return await user_factory(UserRole.ADMIN, email="admin@example.com")


@pytest_asyncio.fixture
async def moderator_user(user_factory) -> User:
    return await user_factory(UserRole.MODERATOR, email="moderator@example.com")


@pytest.fixture
def hr_client(client_factory, hr_user) -> AsyncClient:
    return client_factory(hr_user)


@pytest.fixture
def candidate_client(client_factory, candidate_user) -> AsyncClient:
    return client_factory(candidate_user)


@pytest.fixture
def university_client(client_factory, university_user) -> AsyncClient:
    return client_factory(university_user)


@pytest.fixture
def admin_client(client_factory, admin_user) -> AsyncClient:
    return client_factory(admin_user)


@pytest.fixture
def moderator_client(client_factory, moderator_user) -> AsyncClient:
    return client_factory(moderator_user)


# ============================================================
# DOMAIN DATA
# ============================================================

@pytest_asyncio.fixture
async def job_factory(db: AsyncSession):
    """Create jobs directly; published=True makes them ACTIVE and APPROVED."""

    async def _create(hr: User, title: str = "Backend Developer", published: bool = True, **fields) -> Job:
        values = {
            "description": f"{title} working on our platform",
            "location": "Moscow",
            "status": JobStatus.ACTIVE.value if published else JobStatus.DRAFT.value,
            "moderation_status": ModerationStatus.APPROVED.value if published else ModerationStatus.PENDING.value,
            "published_at": datetime.utcnow() if published else None,
        }
        values.update(fields)
        job = Job(hr_id=hr.hr_profile.id, title=title, **values)
        db.add(job)
        await db.commit()
        return job

    return _create


@pytest_asyncio.fixture
async def published_job(job_factory, hr_user) -> Job:
    return await job_factory(hr_user)
