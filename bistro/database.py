from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from bistro.config import settings

_engine_options: dict = {"echo": settings.database_echo}
# aiosqlite connections must not outlive the event loop that opened them
if settings.database_url.startswith("sqlite"):
    _engine_options["poolclass"] = NullPool

engine = create_async_engine(settings.database_url, **_engine_options)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session
