"""Async engine and session factory for the SQL record store."""
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from freightdesk.core.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.APP_ENV == "development" and settings.LOG_LEVEL.upper() == "DEBUG",
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def dispose_engine() -> None:
    await engine.dispose()
