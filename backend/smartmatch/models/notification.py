from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text
import uuid
import enum

from smartmatch.database import Base
from smartmatch.database_types import GUID, JSON


class NotificationPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Notification(Base):
    """Admin broadcast shown to every user whose role is targeted."""
    __tablename__ = "notifications"
    
    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, default="INFO", index=True)
    priority = Column(String(20), nullable=False, default=NotificationPriority.MEDIUM.value)
    
    # Role names; empty list means everyone
    target_roles = Column(JSON, nullable=False, default=list)
    
    created_by = Column(GUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    scheduled_at = Column(DateTime, nullable=True)  # Hidden until this time
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    def targets(self, role: str) -> bool:
        return not self.target_roles or role in self.target_roles
    
    def is_due(self, now: datetime) -> bool:
        return self.scheduled_at is None or self.scheduled_at <= now
