"""
Skills catalog and student skill endpoints.
"""
import logging
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, desc

from smartmatch.database import get_db
from smartmatch.models.skill import Skill, job_skills
from smartmatch.models.student import Student, StudentSkill
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import require_roles
from smartmatch.schemas.skill import (
    SkillCreate,
    SkillResponse,
    PopularSkill,
    StudentSkillCreate,
    StudentSkillUpdate,
    StudentSkillResponse,
)
from smartmatch.services.students import get_student, get_student_skill, can_manage_student
from smartmatch.services.pagination import contains

logger = logging.getLogger(__name__)
router = APIRouter()

manage_students = require_roles(UserRole.UNIVERSITY, UserRole.ADMIN)


async def _get_managed_student(db: AsyncSession, student_id: UUID, user: User) -> Student:
    student = await get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    if not can_manage_student(user, student):
        raise HTTPException(status_code=403, detail="You can only manage your own students")
    return student


@router.get("", response_model=List[SkillResponse])
async def list_skills(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Active skills, optionally filtered by category or name."""
    query = select(Skill).where(Skill.is_active.is_(True))
    if category:
        query = query.where(Skill.category == category)
    if search:
        query = query.where(or_(contains(Skill.name, search), contains(Skill.description, search)))

    result = await db.execute(query.order_by(Skill.category, Skill.name))
    return result.scalars().all()


@router.get("/popular", response_model=List[PopularSkill])
async def popular_skills(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """Skills ranked by jobs requiring them plus students holding them."""
    job_counts = dict((await db.execute(
        select(job_skills.c.skill_id, func.count(job_skills.c.job_id)).group_by(job_skills.c.skill_id)
    )).all())
    student_counts = dict((await db.execute(
        select(StudentSkill.skill_id, func.count(StudentSkill.id)).group_by(StudentSkill.skill_id)
    )).all())

    skills = (await db.execute(select(Skill).where(Skill.is_active.is_(True)))).scalars().all()
    ranked = []
    for skill in skills:
        job_count = job_counts.get(skill.id, 0)
        student_count = student_counts.get(skill.id, 0)
        ranked.append(PopularSkill(
            skill=SkillResponse.model_validate(skill),
            job_count=job_count,
            student_count=student_count,
            total_count=job_count + student_count,
        ))

    ranked.sort(key=lambda item: (item.total_count, item.skill.name), reverse=True)
    return ranked[:limit]


@router.post("", response_model=SkillResponse, status_code=201)
async def create_skill(
    skill_data: SkillCreate,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    existing = await db.execute(select(Skill).where(func.lower(Skill.name) == skill_data.name.lower()))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Skill already exists")

    skill = Skill(**skill_data.model_dump())
    db.add(skill)
    await db.commit()

    logger.info(f"Skill '{skill.name}' created by {current_user.email}")
    return skill


# ============================================================
# STUDENT SKILLS
# ============================================================

@router.post("/student/{student_id}", response_model=StudentSkillResponse, status_code=201)
async def add_student_skill(
    student_id: UUID,
    payload: StudentSkillCreate,
    current_user: User = Depends(manage_students),
    db: AsyncSession = Depends(get_db)
):
    await _get_managed_student(db, student_id, current_user)

    skill = await db.get(Skill, payload.skill_id)
    if not skill:
        raise HTTPException(status_code=404, detail="Skill not found")
    if await get_student_skill(db, student_id, payload.skill_id):
        raise HTTPException(status_code=409, detail="Student already has this skill")

    db.add(StudentSkill(student_id=student_id, skill_id=payload.skill_id, level=payload.level))
    await db.commit()

    logger.info(f"Skill {skill.name} (level {payload.level}) added to student {student_id}")
    return await get_student_skill(db, student_id, payload.skill_id)


@router.get("/student/{student_id}", response_model=List[StudentSkillResponse])
async def list_student_skills(
    student_id: UUID,
    current_user: User = Depends(manage_students),
    db: AsyncSession = Depends(get_db)
):
    await _get_managed_student(db, student_id, current_user)

    result = await db.execute(
        select(StudentSkill)
        .where(StudentSkill.student_id == student_id)
        .order_by(desc(StudentSkill.level))
    )
    return result.scalars().all()


@router.patch("/student/{student_id}/{skill_id}", response_model=StudentSkillResponse)
async def update_student_skill(
    student_id: UUID,
    skill_id: UUID,
    payload: StudentSkillUpdate,
    current_user: User = Depends(manage_students),
    db: AsyncSession = Depends(get_db)
):
    await _get_managed_student(db, student_id, current_user)

    student_skill = await get_student_skill(db, student_id, skill_id)
    if not student_skill:
        raise HTTPException(status_code=404, detail="Student does not have this skill")

    student_skill.level = payload.level
    await db.commit()

    logger.info(f"Skill {skill_id} level set to {payload.level} for student {student_id}")
    return student_skill


@router.delete("/student/{student_id}/{skill_id}")
async def remove_student_skill(
    student_id: UUID,
    skill_id: UUID,
    current_user: User = Depends(manage_students),
    db: AsyncSession = Depends(get_db)
):
    await _get_managed_student(db, student_id, current_user)

    student_skill = await get_student_skill(db, student_id, skill_id)
    if not student_skill:
        raise HTTPException(status_code=404, detail="Student does not have this skill")

    await db.delete(student_skill)
    await db.commit()

    logger.info(f"Skill {skill_id} removed from student {student_id}")
    return {"message": "Skill removed"}
