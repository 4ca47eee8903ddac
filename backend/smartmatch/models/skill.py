from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Text, Table, ForeignKey
import uuid

from smartmatch.database import Base
from smartmatch.database_types import GUID


# Many-to-many: skills required by a job
job_skills = Table(
    "job_skills",
    Base.metadata,
    Column("job_id", GUID, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", GUID, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


class Skill(Base):
    __tablename__ = "skills"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True, index=True)
    category = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
