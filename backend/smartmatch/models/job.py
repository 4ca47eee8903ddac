from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
import uuid
import enum

from smartmatch.database import Base
from smartmatch.database_types import GUID
from smartmatch.models.skill import job_skills


class JobType(str, enum.Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    FREELANCE = "FREELANCE"
    INTERNSHIP = "INTERNSHIP"


class ExperienceLevel(str, enum.Enum):
    NO_EXPERIENCE = "NO_EXPERIENCE"
    JUNIOR = "JUNIOR"
    MIDDLE = "MIDDLE"
    SENIOR = "SENIOR"
    LEAD = "LEAD"


class JobStatus(str, enum.Enum):
    """Lifecycle status controlled by the owning HR user."""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CLOSED = "CLOSED"


class ModerationStatus(str, enum.Enum):
    """Moderation outcome. Only APPROVED jobs are publicly listed."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    RETURNED = "RETURNED"  # Sent back to HR for edits


class Job(Base):
    __tablename__ = "jobs"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    hr_id = Column(GUID, ForeignKey("hr_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Posting content
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    responsibilities = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    currency = Column(String(10), nullable=False, default="RUB")
    location = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, default=JobType.FULL_TIME.value, index=True)
    experience_level = Column(String(20), nullable=False, default=ExperienceLevel.NO_EXPERIENCE.value)
    remote = Column(Boolean, nullable=False, default=False)
    deadline = Column(DateTime, nullable=True)
    
    # Status: DRAFT | ACTIVE | PAUSED | CLOSED
    status = Column(String(20), nullable=False, default=JobStatus.DRAFT.value, index=True)
    published_at = Column(DateTime, nullable=True)
    
    # Moderation: PENDING | APPROVED | REJECTED | RETURNED
    moderation_status = Column(String(20), nullable=False, default=ModerationStatus.PENDING.value, index=True)
    moderated_at = Column(DateTime, nullable=True)
    moderator_id = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    moderation_notes = Column(Text, nullable=True)
    
    # Counters (denormalized for listing)
    views = Column(Integer, nullable=False, default=0)
    applications_count = Column(Integer, nullable=False, default=0)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    hr = relationship("HRProfile", lazy="selectin")
    skills = relationship("Skill", secondary=job_skills, lazy="selectin")
    
    def is_published(self) -> bool:
        """Visible in the public catalog and open for applications."""
        return (
            self.status == JobStatus.ACTIVE.value
            and self.moderation_status == ModerationStatus.APPROVED.value
        )
