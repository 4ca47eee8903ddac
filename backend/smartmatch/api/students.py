"""
University student records.

Students are records kept by a university, not login accounts.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError

from smartmatch.database import get_db
from smartmatch.models.student import Student, StudentSkill
from smartmatch.models.user import User, UserRole
from smartmatch.api.auth import require_roles
from smartmatch.schemas.student import StudentCreate, StudentUpdate, StudentResponse, StudentStats
from smartmatch.services.accounts import delete_student_rows
from smartmatch.services.students import get_student, can_manage_student, get_student_stats
from smartmatch.services.pagination import contains

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_university(user: User):
    if user.university_profile is None:
        raise HTTPException(status_code=400, detail="Create your university profile first")
    return user.university_profile


async def _get_managed_student(db: AsyncSession, student_id: UUID, user: User) -> Student:
    student = await get_student(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    if not can_manage_student(user, student):
        logger.warning(f"User {user.email} attempted to access student {student_id}")
        raise HTTPException(status_code=403, detail="You can only manage your own students")
    return student


async def _check_unique_number(db: AsyncSession, university_id: UUID, number: str, exclude_id=None) -> None:
    query = select(Student).where(Student.university_id == university_id, Student.student_id == number)
    if exclude_id is not None:
        query = query.where(Student.id != exclude_id)
    if (await db.execute(query)).scalar_one_or_none():
        raise HTTPException(status_code=409, detail=f"Student number {number} already exists")


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    payload: StudentCreate,
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY)),
    db: AsyncSession = Depends(get_db)
):
    university = _require_university(current_user)
    await _check_unique_number(db, university.id, payload.student_id)

    try:
        student = Student(university_id=university.id, **payload.model_dump())
        db.add(student)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail=f"Student number {payload.student_id} already exists")
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating student: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create student")

    logger.info(f"Student {student.student_id} added by {university.name}")
    return await get_student(db, student.id)


@router.get("", response_model=List[StudentResponse])
async def list_students(
    search: Optional[str] = Query(None, description="Search name, email, number or major"),
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY)),
    db: AsyncSession = Depends(get_db)
):
    university = _require_university(current_user)

    query = select(Student).where(Student.university_id == university.id)
    if search:
        query = query.where(or_(
            contains(Student.first_name, search),
            contains(Student.last_name, search),
            contains(Student.email, search),
            contains(Student.student_id, search),
            contains(Student.major, search),
        ))

    result = await db.execute(query.order_by(Student.last_name, Student.first_name))
    return result.scalars().all()


@router.get("/stats", response_model=StudentStats)
async def student_stats(
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY)),
    db: AsyncSession = Depends(get_db)
):
    university = _require_university(current_user)
    return await get_student_stats(db, university.id)


@router.get("/search", response_model=List[StudentResponse])
async def search_students_by_skills(
    skill_ids: str = Query(..., description="Comma-separated skill ids (any match)"),
    min_level: int = Query(1, ge=1, le=5),
    max_level: int = Query(5, ge=1, le=5),
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    """Students holding any of the skills at a level within [min_level, max_level]."""
    try:
        ids = [UUID(value.strip()) for value in skill_ids.split(",") if value.strip()]
    except ValueError:
        raise HTTPException(status_code=422, detail="skill_ids must be comma-separated UUIDs")
    if not ids:
        raise HTTPException(status_code=422, detail="skill_ids must not be empty")
    if min_level > max_level:
        raise HTTPException(status_code=422, detail="min_level must not exceed max_level")

    matching = select(StudentSkill.student_id).where(
        StudentSkill.skill_id.in_(ids),
        StudentSkill.level >= min_level,
        StudentSkill.level <= max_level,
    )
    query = select(Student).where(Student.id.in_(matching))
    if not current_user.is_admin():
        query = query.where(Student.university_id == _require_university(current_user).id)

    result = await db.execute(query.order_by(Student.last_name, Student.first_name))
    return result.scalars().all()


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student_detail(
    student_id: UUID,
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    return await _get_managed_student(db, student_id, current_user)


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    student = await _get_managed_student(db, student_id, current_user)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("student_id"):
        await _check_unique_number(db, student.university_id, update_data["student_id"], exclude_id=student.id)

    try:
        for field, value in update_data.items():
            setattr(student, field, value)
        student.updated_at = datetime.utcnow()
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Student number already exists")
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating student {student_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update student")

    logger.info(f"Student {student.id} updated by {current_user.email}")
    return await get_student(db, student.id)


@router.delete("/{student_id}")
async def delete_student(
    student_id: UUID,
    current_user: User = Depends(require_roles(UserRole.UNIVERSITY, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db)
):
    student = await _get_managed_student(db, student_id, current_user)

    try:
        await delete_student_rows(db, [student.id])
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting student {student_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete student")

    logger.info(f"Student {student_id} deleted by {current_user.email}")
    return {"message": "Student deleted"}
