"""Database models"""
from smartmatch.models.user import User, UserRole
from smartmatch.models.profiles import HRProfile, CandidateProfile, UniversityProfile, AdminProfile
from smartmatch.models.skill import Skill, job_skills
from smartmatch.models.job import Job, JobType, ExperienceLevel, JobStatus, ModerationStatus
from smartmatch.models.application import Application, ApplicationStatus
from smartmatch.models.internship import (
    Internship,
    InternshipStatus,
    InternshipApplication,
    InternshipApplicationStatus,
)
from smartmatch.models.internship_request import (
    InternshipRequest,
    InternshipRequestStatus,
    CompanyResponse,
    CompanyResponseStatus,
)
from smartmatch.models.notification import Notification, NotificationPriority
from smartmatch.models.moderation_log import ModerationLog, ModerationAction
from smartmatch.models.student import Student, StudentSkill

__all__ = [
    "User",
    "UserRole",
    "HRProfile",
    "CandidateProfile",
    "UniversityProfile",
    "AdminProfile",
    "Skill",
    "job_skills",
    "Job",
    "JobType",
    "ExperienceLevel",
    "JobStatus",
    "ModerationStatus",
    "Application",
    "ApplicationStatus",
    "Internship",
    "InternshipStatus",
    "InternshipApplication",
    "InternshipApplicationStatus",
    "InternshipRequest",
    "InternshipRequestStatus",
    "CompanyResponse",
    "CompanyResponseStatus",
    "Notification",
    "NotificationPriority",
    "ModerationLog",
    "ModerationAction",
    "Student",
    "StudentSkill",
]
