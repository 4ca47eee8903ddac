from datetime import datetime
from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from smartmatch.database import Base
from smartmatch.database_types import GUID


class Student(Base):
    """Student record kept by a university (not a login account)."""
    __tablename__ = "students"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    university_id = Column(GUID, ForeignKey("university_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    student_id = Column(String(50), nullable=False)  # University-issued number
    year_of_study = Column(Integer, nullable=False)
    major = Column(String(255), nullable=False)
    gpa = Column(Float, nullable=True)
    phone = Column(String(30), nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    skills = relationship("StudentSkill", lazy="selectin", viewonly=True)
    
    __table_args__ = (
        UniqueConstraint('university_id', 'student_id', name='uq_student_university_number'),
    )


class StudentSkill(Base):
    __tablename__ = "student_skills"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    student_id = Column(GUID, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(GUID, ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True)
    level = Column(Integer, nullable=False, default=1)  # 1..5
    
    skill = relationship("Skill", lazy="selectin")
    
    __table_args__ = (
        UniqueConstraint('student_id', 'skill_id', name='uq_student_skill'),
    )
