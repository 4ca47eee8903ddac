from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid
import enum

from smartmatch.database import Base
from smartmatch.database_types import GUID, JSON


class InternshipStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class InternshipApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Internship(Base):
    __tablename__ = "internships"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    hr_id = Column(GUID, ForeignKey("hr_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    responsibilities = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    currency = Column(String(10), nullable=False, default="RUB")
    location = Column(String(255), nullable=False)
    is_remote = Column(Boolean, nullable=False, default=False)
    
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)  # days
    max_participants = Column(Integer, nullable=False, default=1)
    deadline = Column(DateTime, nullable=True)
    
    # Free-form skill names and tags: ["Python", "SQL"]
    skills = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    
    status = Column(String(20), nullable=False, default=InternshipStatus.ACTIVE.value, index=True)
    applications_count = Column(Integer, nullable=False, default=0)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    hr = relationship("HRProfile", lazy="selectin")


class InternshipApplication(Base):
    __tablename__ = "internship_applications"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    internship_id = Column(GUID, ForeignKey("internships.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = Column(GUID, ForeignKey("candidate_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    status = Column(String(20), nullable=False, default=InternshipApplicationStatus.PENDING.value)
    cover_letter = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    internship = relationship("Internship", lazy="selectin")
    candidate = relationship("CandidateProfile", lazy="selectin")
    
    __table_args__ = (
        UniqueConstraint('internship_id', 'candidate_id', name='uq_internship_application_candidate'),
    )
