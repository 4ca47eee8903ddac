"""
Tests for university student records.
"""
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.api import students as students_api
from smartmatch.models.skill import Skill
from smartmatch.models.user import UserRole


def _student(number: str = "S-100", **fields) -> dict:
    data = {
        "first_name": "Ivan",
        "last_name": "Petrov",
        "email": f"{number.lower()}@uni.com",
        "student_id": number,
        "year_of_study": 3,
        "major": "Computer Science",
        "gpa": 4.5,
    }
    data.update(fields)
    return data


async def _add_student(client: AsyncClient, number: str = "S-100", **fields) -> dict:
    response = await client.post("/api/universities/students", json=_student(number, **fields))
    assert response.status_code == 201, response.text
    return response.json()


@pytest_asyncio.fixture
async def skills(db: AsyncSession) -> dict:
    python = Skill(name="Python", category="Programming")
    sql = Skill(name="SQL", category="Databases")
    db.add_all([python, sql])
    await db.commit()
    return {"python": python, "sql": sql}


# ============================================================
# CRUD
# ============================================================

@pytest.mark.asyncio
async def test_create_student(university_client: AsyncClient, university_user):
    data = await _add_student(university_client)

    assert data["university_id"] == str(university_user.university_profile.id)
    assert data["student_id"] == "S-100"
    assert data["skills"] == []


@pytest.mark.asyncio
async def test_duplicate_student_number_returns_409(university_client: AsyncClient):
    await _add_student(university_client)

    response = await university_client.post("/api/universities/students", json=_student("S-100"))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_same_number_at_another_university(university_client: AsyncClient, client_factory, user_factory):
    await _add_student(university_client)
    other = client_factory(await user_factory(UserRole.UNIVERSITY))

    assert (await other.post("/api/universities/students", json=_student("S-100"))).status_code == 201


@pytest.mark.asyncio
async def test_list_students_with_search(university_client: AsyncClient):
    await _add_student(university_client, "S-1", last_name="Abramov")
    await _add_student(university_client, "S-2", last_name="Zaitsev", major="Biology")

    everyone = (await university_client.get("/api/universities/students")).json()
    assert [s["last_name"] for s in everyone] == ["Abramov", "Zaitsev"]

    biology = (await university_client.get("/api/universities/students", params={"search": "bio"})).json()
    assert [s["student_id"] for s in biology] == ["S-2"]


@pytest.mark.asyncio
async def test_update_student(university_client: AsyncClient):
    student = await _add_student(university_client)

    response = await university_client.patch(
        f"/api/universities/students/{student['id']}", json={"year_of_study": 4, "gpa": 4.8}
    )

    assert response.status_code == 200
    assert response.json()["year_of_study"] == 4
    assert response.json()["gpa"] == 4.8


@pytest.mark.asyncio
async def test_update_to_taken_number_returns_409(university_client: AsyncClient):
    await _add_student(university_client, "S-1")
    second = await _add_student(university_client, "S-2")

    response = await university_client.patch(
        f"/api/universities/students/{second['id']}", json={"student_id": "S-1"}
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_racing_duplicate_number_returns_409(university_client: AsyncClient, monkeypatch):
    """The unique constraint answers 409 when the number check misses a parallel insert."""
    await _add_student(university_client)
    monkeypatch.setattr(students_api, "_check_unique_number", AsyncMock(return_value=None))

    response = await university_client.post("/api/universities/students", json=_student("S-100"))

    assert response.status_code == 409
    assert len((await university_client.get("/api/universities/students")).json()) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["first_name", "last_name", "email", "student_id", "year_of_study", "major"])
async def test_null_for_required_field_returns_422(university_client: AsyncClient, field: str):
    student = await _add_student(university_client)

    response = await university_client.patch(f"/api/universities/students/{student['id']}", json={field: None})

    assert response.status_code == 422
    unchanged = (await university_client.get(f"/api/universities/students/{student['id']}")).json()
    assert unchanged[field] == student[field]


@pytest.mark.asyncio
async def test_optional_fields_can_be_cleared(university_client: AsyncClient):
    student = await _add_student(university_client)

    response = await university_client.patch(
        f"/api/universities/students/{student['id']}", json={"gpa": None, "phone": None}
    )

    assert response.status_code == 200
    assert response.json()["gpa"] is None


@pytest.mark.asyncio
async def test_other_university_cannot_read(university_client: AsyncClient, client_factory, user_factory):
    student = await _add_student(university_client)
    other = client_factory(await user_factory(UserRole.UNIVERSITY))

    assert (await other.get(f"/api/universities/students/{student['id']}")).status_code == 403


@pytest.mark.asyncio
async def test_admin_can_read_any_student(university_client: AsyncClient, admin_client: AsyncClient):
    student = await _add_student(university_client)

    assert (await admin_client.get(f"/api/universities/students/{student['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_delete_student(university_client: AsyncClient, skills):
    student = await _add_student(university_client)
    await university_client.post(
        f"/api/skills/student/{student['id']}", json={"skill_id": str(skills["python"].id), "level": 3}
    )

    assert (await university_client.delete(f"/api/universities/students/{student['id']}")).status_code == 200
    assert (await university_client.get(f"/api/universities/students/{student['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_hr_cannot_manage_students(hr_client: AsyncClient):
    assert (await hr_client.post("/api/universities/students", json=_student())).status_code == 403


# ============================================================
# STATS / SKILL SEARCH
# ============================================================

@pytest.mark.asyncio
async def test_student_stats(university_client: AsyncClient, skills):
    first = await _add_student(university_client, "S-1")
    second = await _add_student(university_client, "S-2")
    await _add_student(university_client, "S-3")
    for student in (first, second):
        await university_client.post(
            f"/api/skills/student/{student['id']}", json={"skill_id": str(skills["python"].id), "level": 4}
        )

    response = await university_client.get("/api/universities/students/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["total_students"] == 3
    assert data["students_with_skills"] == 2
    assert data["students_without_skills"] == 1
    assert data["top_skills"] == [{"skill_id": str(skills["python"].id), "name": "Python", "count": 2}]


@pytest.mark.asyncio
async def test_search_by_skill_level(university_client: AsyncClient, skills):
    novice = await _add_student(university_client, "S-1", last_name="Novikov")
    expert = await _add_student(university_client, "S-2", last_name="Expertov")
    await university_client.post(
        f"/api/skills/student/{novice['id']}", json={"skill_id": str(skills["python"].id), "level": 1}
    )
    await university_client.post(
        f"/api/skills/student/{expert['id']}", json={"skill_id": str(skills["python"].id), "level": 5}
    )

    response = await university_client.get(
        "/api/universities/students/search",
        params={"skill_ids": f"{skills['python'].id},{skills['sql'].id}", "min_level": 3}
    )

    assert response.status_code == 200
    assert [s["last_name"] for s in response.json()] == ["Expertov"]
    assert response.json()[0]["skills"][0]["skill"]["name"] == "Python"


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [
    {"skill_ids": "not-a-uuid"},
    {"skill_ids": " , "},
    {"skill_ids": "00000000-0000-0000-0000-000000000000", "min_level": 4, "max_level": 2},
])
async def test_search_rejects_bad_params(university_client: AsyncClient, params: dict):
    response = await university_client.get("/api/universities/students/search", params=params)
    assert response.status_code == 422
