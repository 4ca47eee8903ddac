"""
Status updates for every entity with a status enum.
ALL status writes go through this module.

Statuses are closed enums but not state machines: any member may follow
any other. This module only guarantees the value is a member, stamps the
related timestamps and logs the change.
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Optional, Type, Union

from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.job import Job, JobStatus
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

logger = logging.getLogger(__name__)


STATUS_ENUMS: dict[type, Type[Enum]] = {
    Job: JobStatus,
    Application: ApplicationStatus,
    Internship: InternshipStatus,
    InternshipApplication: InternshipApplicationStatus,
    InternshipRequest: InternshipRequestStatus,
    CompanyResponse: CompanyResponseStatus,
}


class InvalidStatusError(Exception):
    """Raised when a value is not a member of the entity's status enum"""
    pass


def coerce_status(enum_cls: Type[Enum], value: Union[str, Enum]) -> Enum:
    """Return the enum member for `value`, accepting members or their string values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidStatusError(f"Invalid status '{value}'. Allowed: {allowed}")


async def set_status(
    db: AsyncSession,
    entity,
    status: Union[str, Enum],
    notes: Optional[str] = None,
    commit: bool = True,
):
    """
    Set `entity.status` to `status`.
    
    Args:
        db: Database session
        entity: Any model listed in STATUS_ENUMS
        status: Target status (enum member or its value)
        notes: Stored on entities that carry reviewer notes (applications)
        commit: Commit immediately; pass False to batch with other writes
    
    Returns:
        The updated entity
    
    Raises:
        InvalidStatusError: If status is not a member of the entity's enum
    """
    enum_cls = STATUS_ENUMS.get(type(entity))
    if enum_cls is None:
        raise TypeError(f"{type(entity).__name__} has no status enum")
    
    new_status = coerce_status(enum_cls, status)
    old_status = entity.status
    now = datetime.utcnow()
    
    entity.status = new_status.value
    entity.updated_at = now
    
    if notes is not None and hasattr(entity, "notes"):
        entity.notes = notes
    
    # First publication date is kept across pause/resume
    if isinstance(entity, Job) and new_status == JobStatus.ACTIVE and entity.published_at is None:
        entity.published_at = now
    
    if commit:
        await db.commit()
    
    logger.info(
        f"{type(entity).__name__} {entity.id} status: {old_status} → {new_status.value}",
        extra={"entity_id": str(entity.id), "from_status": old_status, "to_status": new_status.value},
    )
    
    return entity
