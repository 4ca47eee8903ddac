from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid
import enum

from smartmatch.database import Base
from smartmatch.database_types import GUID, JSON


class InternshipRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    IN_PROGRESS = "IN_PROGRESS"  # A company has been selected
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Requests companies may still respond to
OPEN_REQUEST_STATUSES = (InternshipRequestStatus.PENDING.value, InternshipRequestStatus.APPROVED.value)


class CompanyResponseStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class InternshipRequest(Base):
    """A university asking companies to host a group of students."""
    __tablename__ = "internship_requests"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    university_id = Column(GUID, ForeignKey("university_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    specialty = Column(String(255), nullable=False, index=True)
    student_count = Column(Integer, nullable=False)
    period = Column(String(100), nullable=False)  # e.g. "Summer 2026"
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    location = Column(String(255), nullable=False)
    is_remote = Column(Boolean, nullable=False, default=False)
    
    status = Column(String(20), nullable=False, default=InternshipRequestStatus.PENDING.value, index=True)
    # Set when the university picks one of the company responses
    selected_response_id = Column(GUID, nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    university = relationship("UniversityProfile", lazy="selectin")


class CompanyResponse(Base):
    """An HR user's offer to host students for an internship request."""
    __tablename__ = "company_responses"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    internship_request_id = Column(
        GUID, ForeignKey("internship_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hr_id = Column(GUID, ForeignKey("hr_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Snapshot of the company at response time
    company_name = Column(String(255), nullable=False)
    contact_email = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    
    status = Column(String(20), nullable=False, default=CompanyResponseStatus.PENDING.value)
    responded_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    __table_args__ = (
        UniqueConstraint('internship_request_id', 'hr_id', name='uq_company_response_request_hr'),
    )
