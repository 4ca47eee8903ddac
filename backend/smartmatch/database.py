"""
Async database engine and session factory.

Routes receive a session through the `get_db` dependency. Tests swap
`engine` and `AsyncSessionLocal` for an in-memory database.
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from smartmatch.config import settings


class Base(DeclarativeBase):
    pass


engine = create_async_engine(settings.database_url, echo=settings.debug)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session per request, closing it afterwards."""
    async with AsyncSessionLocal() as session:
        yield session
