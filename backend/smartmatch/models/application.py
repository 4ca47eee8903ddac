from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid
import enum

from smartmatch.database import Base
from smartmatch.database_types import GUID


class ApplicationStatus(str, enum.Enum):
    """Job application status. Any value may be set by the reviewing HR."""
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    HIRED = "HIRED"
    WITHDRAWN = "WITHDRAWN"  # Only value a candidate may set


class Application(Base):
    __tablename__ = "applications"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_id = Column(GUID, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = Column(GUID, ForeignKey("candidate_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    # Denormalized owner of the job, so HR listings don't need a join
    hr_id = Column(GUID, ForeignKey("hr_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    status = Column(String(30), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    cover_letter = Column(Text, nullable=True)
    resume_url = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)  # HR-only notes
    
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    job = relationship("Job", lazy="selectin")
    candidate = relationship("CandidateProfile", lazy="selectin")
    
    __table_args__ = (
        # One application per candidate per job
        UniqueConstraint('job_id', 'candidate_id', name='uq_application_job_candidate'),
    )
