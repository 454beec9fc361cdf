# lifetrack/app/db/session.py
"""
Async engine and session factory.

SQLite (local use) runs without a pool; PostgreSQL gets a small bounded
pool with pre-ping so connections dropped by the server are replaced.
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool

from lifetrack.app.core.config import settings


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """Build an async engine with pool settings suited to the backend in ``url``."""
    if "sqlite" in url.lower():
        return create_async_engine(
            url,
            echo=echo,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        echo=echo,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
    )


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps loaded rows readable after commit
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine: AsyncEngine = create_engine_for(settings.DATABASE_URL, settings.DATABASE_ECHO)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = create_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Nothing is committed automatically; services commit their own work.
    """
    async with AsyncSessionLocal() as session:
        yield session
