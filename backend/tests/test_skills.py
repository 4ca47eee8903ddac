"""
Tests for the skills catalog and student skills.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.skill import Skill, job_skills
from smartmatch.models.user import User, UserRole


@pytest_asyncio.fixture
async def catalog(db: AsyncSession) -> dict:
    skills = {
        "python": Skill(name="Python", category="Programming", description="General purpose language"),
        "go": Skill(name="Go", category="Programming"),
        "figma": Skill(name="Figma", category="Design"),
        "cobol": Skill(name="COBOL", category="Programming", is_active=False),
    }
    db.add_all(skills.values())
    await db.commit()
    return skills


@pytest_asyncio.fixture
async def student(university_client: AsyncClient) -> dict:
    response = await university_client.post("/api/universities/students", json={
        "first_name": "Olga",
        "last_name": "Smirnova",
        "email": "olga@uni.com",
        "student_id": "S-7",
        "year_of_study": 2,
        "major": "Informatics",
    })
    assert response.status_code == 201
    return response.json()


# ============================================================
# CATALOG
# ============================================================

@pytest.mark.asyncio
async def test_list_active_skills(async_client: AsyncClient, catalog):
    data = (await async_client.get("/api/skills")).json()

    assert [s["name"] for s in data] == ["Figma", "Go", "Python"]


@pytest.mark.asyncio
async def test_list_skills_filters(async_client: AsyncClient, catalog):
    design = (await async_client.get("/api/skills", params={"category": "Design"})).json()
    assert [s["name"] for s in design] == ["Figma"]

    by_description = (await async_client.get("/api/skills", params={"search": "general"})).json()
    assert [s["name"] for s in by_description] == ["Python"]


@pytest.mark.asyncio
async def test_popular_skills(
    async_client: AsyncClient, catalog, job_factory, hr_user: User, db: AsyncSession
):
    job = await job_factory(hr_user)
    await db.execute(job_skills.insert().values(job_id=job.id, skill_id=catalog["go"].id))
    await db.commit()

    data = (await async_client.get("/api/skills/popular", params={"limit": 2})).json()

    assert len(data) == 2
    assert data[0]["skill"]["name"] == "Go"
    assert data[0]["job_count"] == 1
    assert data[0]["total_count"] == 1


@pytest.mark.asyncio
async def test_create_skill(hr_client: AsyncClient):
    response = await hr_client.post("/api/skills", json={"name": "Rust", "category": "Programming"})

    assert response.status_code == 201
    assert response.json()["is_active"] is True


@pytest.mark.asyncio
async def test_create_duplicate_skill_is_case_insensitive(admin_client: AsyncClient, catalog):
    response = await admin_client.post("/api/skills", json={"name": "python", "category": "Programming"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_candidate_cannot_create_skill(candidate_client: AsyncClient):
    response = await candidate_client.post("/api/skills", json={"name": "Rust", "category": "Programming"})
    assert response.status_code == 403


# ============================================================
# STUDENT SKILLS
# ============================================================

@pytest.mark.asyncio
async def test_add_and_list_student_skills(university_client: AsyncClient, student: dict, catalog):
    url = f"/api/skills/student/{student['id']}"

    added = await university_client.post(url, json={"skill_id": str(catalog["python"].id), "level": 2})
    assert added.status_code == 201
    assert added.json()["skill"]["name"] == "Python"

    await university_client.post(url, json={"skill_id": str(catalog["go"].id), "level": 5})

    listed = (await university_client.get(url)).json()
    assert [(s["skill"]["name"], s["level"]) for s in listed] == [("Go", 5), ("Python", 2)]


@pytest.mark.asyncio
async def test_add_student_skill_errors(university_client: AsyncClient, student: dict, catalog):
    url = f"/api/skills/student/{student['id']}"
    payload = {"skill_id": str(catalog["python"].id), "level": 3}

    await university_client.post(url, json=payload)
    assert (await university_client.post(url, json=payload)).status_code == 409

    unknown = {"skill_id": "00000000-0000-0000-0000-000000000000", "level": 3}
    assert (await university_client.post(url, json=unknown)).status_code == 404

    too_high = {"skill_id": str(catalog["go"].id), "level": 6}
    assert (await university_client.post(url, json=too_high)).status_code == 422


@pytest.mark.asyncio
async def test_update_and_remove_student_skill(university_client: AsyncClient, student: dict, catalog):
    base = f"/api/skills/student/{student['id']}"
    skill_url = f"{base}/{catalog['python'].id}"

    assert (await university_client.patch(skill_url, json={"level": 4})).status_code == 404

    await university_client.post(base, json={"skill_id": str(catalog["python"].id), "level": 1})
    updated = await university_client.patch(skill_url, json={"level": 4})
    assert updated.status_code == 200
    assert updated.json()["level"] == 4

    assert (await university_client.delete(skill_url)).status_code == 200
    assert (await university_client.get(base)).json() == []
    assert (await university_client.delete(skill_url)).status_code == 404


@pytest.mark.asyncio
async def test_other_university_cannot_edit_skills(
    student: dict, catalog, client_factory, user_factory
):
    other = client_factory(await user_factory(UserRole.UNIVERSITY))

    response = await other.post(
        f"/api/skills/student/{student['id']}", json={"skill_id": str(catalog["python"].id), "level": 3}
    )

    assert response.status_code == 403
