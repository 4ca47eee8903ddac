from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from smartmatch.database import Base
from smartmatch.database_types import GUID


class UserRole(str, enum.Enum):
    """User role for role-based access control (RBAC)."""
    CANDIDATE = "CANDIDATE"    # Browses and applies to jobs/internships
    HR = "HR"                  # Company side: posts jobs, reviews applications
    UNIVERSITY = "UNIVERSITY"  # Submits internship requests, manages students
    ADMIN = "ADMIN"            # Full access, analytics, user management
    MODERATOR = "MODERATOR"    # Job moderation only


# Roles a visitor may pick at registration; staff accounts are created by admins
SELF_REGISTER_ROLES = {UserRole.CANDIDATE, UserRole.HR, UserRole.UNIVERSITY}
STAFF_ROLES = {UserRole.ADMIN, UserRole.MODERATOR}


class User(Base):
    __tablename__ = "users"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    
    role = Column(
        SQLEnum(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.CANDIDATE,
        index=True
    )
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    
    # Security & audit fields
    last_login_at = Column(DateTime, nullable=True)
    last_login_ip = Column(String(45), nullable=True)  # IPv4 or IPv6
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    account_locked_until = Column(DateTime, nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    # Role profiles (at most one is populated, matching `role`)
    hr_profile = relationship("HRProfile", uselist=False, lazy="selectin")
    candidate_profile = relationship("CandidateProfile", uselist=False, lazy="selectin")
    university_profile = relationship("UniversityProfile", uselist=False, lazy="selectin")
    admin_profile = relationship("AdminProfile", uselist=False, lazy="selectin")
    
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == UserRole.ADMIN
    
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
    
    def is_account_locked(self) -> bool:
        """Check if account is currently locked due to failed login attempts."""
        if not self.account_locked_until:
            return False
        return datetime.utcnow() < self.account_locked_until
    
    def get_profile(self):
        """Return the profile that belongs to this user's role, if created."""
        if self.role == UserRole.HR:
            return self.hr_profile
        if self.role == UserRole.CANDIDATE:
            return self.candidate_profile
        if self.role == UserRole.UNIVERSITY:
            return self.university_profile
        return self.admin_profile
    
    def display_name(self) -> str:
        profile = self.get_profile()
        if profile is None:
            return self.email
        if self.role == UserRole.UNIVERSITY:
            return profile.name
        return f"{profile.first_name} {profile.last_name}"
