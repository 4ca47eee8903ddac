"""Listing helpers: page/limit pagination and substring search."""
import math
from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Make LIKE wildcards in user input match literally (use with escape=LIKE_ESCAPE)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(column, value: str):
    """Case-insensitive substring match of `value` in `column`."""
    return column.ilike(f"%{escape_like(value)}%", escape=LIKE_ESCAPE)


async def paginate(db: AsyncSession, query: Select, page: int, limit: int) -> tuple[Sequence[Any], int, int]:
    """
    Run `query` for one page.
    
    Returns:
        (items, total, total_pages)
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()
    
    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    items = result.scalars().all()
    
    total_pages = math.ceil(total / limit) if total else 0
    return items, total, total_pages
