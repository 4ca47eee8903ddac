"""University student records and their skills."""
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.skill import Skill
from smartmatch.models.student import Student, StudentSkill
from smartmatch.models.user import User
from smartmatch.schemas.student import StudentStats, TopSkill

TOP_SKILLS_LIMIT = 10


async def get_student(db: AsyncSession, student_id: UUID) -> Optional[Student]:
    result = await db.execute(
        select(Student).where(Student.id == student_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_student_skill(db: AsyncSession, student_id: UUID, skill_id: UUID) -> Optional[StudentSkill]:
    result = await db.execute(
        select(StudentSkill).where(
            StudentSkill.student_id == student_id,
            StudentSkill.skill_id == skill_id,
        ).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def can_manage_student(user: User, student: Student) -> bool:
    if user.is_admin():
        return True
    return user.university_profile is not None and student.university_id == user.university_profile.id


async def get_student_stats(db: AsyncSession, university_id: UUID) -> StudentStats:
    total = (await db.execute(
        select(func.count(Student.id)).where(Student.university_id == university_id)
    )).scalar_one()

    with_skills = (await db.execute(
        select(func.count(func.distinct(StudentSkill.student_id)))
        .select_from(StudentSkill)
        .join(Student, Student.id == StudentSkill.student_id)
        .where(Student.university_id == university_id)
    )).scalar_one()

    top = await db.execute(
        select(Skill.id, Skill.name, func.count(StudentSkill.id))
        .select_from(StudentSkill)
        .join(Student, Student.id == StudentSkill.student_id)
        .join(Skill, Skill.id == StudentSkill.skill_id)
        .where(Student.university_id == university_id)
        .group_by(Skill.id, Skill.name)
        .order_by(desc(func.count(StudentSkill.id)))
        .limit(TOP_SKILLS_LIMIT)
    )

    return StudentStats(
        total_students=total,
        students_with_skills=with_skills,
        students_without_skills=total - with_skills,
        top_skills=[TopSkill(skill_id=skill_id, name=name, count=count) for skill_id, name, count in top.all()],
    )
