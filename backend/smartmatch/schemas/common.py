"""Shared request/response pieces."""
from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel


def _to_naive_utc(value: datetime) -> datetime:
    # Columns store naive UTC; compare against datetime.utcnow()
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]


def check_salary_range(salary_min: Optional[int], salary_max: Optional[int]) -> None:
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        raise ValueError("salary_min must not exceed salary_max")


def require_value(value):
    """Reject an explicit null for a column that cannot be emptied."""
    if value is None:
        raise ValueError("must not be null")
    return value


def check_date_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and end <= start:
        raise ValueError("end_date must be after start_date")


class ActionResult(BaseModel):
    """Generic result for moderation and admin actions."""
    success: bool
    message: str


class BulkResult(BaseModel):
    success: bool
    affected: int
    skipped: int = 0


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
