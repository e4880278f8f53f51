# app/db/session.py
import os
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import get_settings
from app.db.base import Base

# Register every ORM model on Base.metadata.
from app.models import availability_rule, booking, calendar_token, meeting_type  # noqa: F401

settings = get_settings()

# Detect if we're running under pytest. PYTEST_CURRENT_TEST is only set while
# a test runs, so DB_NULL_POOL covers imports made during collection.
IS_TEST = "PYTEST_CURRENT_TEST" in os.environ or settings.DB_NULL_POOL

# ---------------------------------------------------------------------------
# Main application engine + session
# ---------------------------------------------------------------------------
engine = create_async_engine(
    settings.DB_URL,
    echo=False,
    # Under pytest, use NullPool to avoid connection reuse across event loops.
    poolclass=NullPool if IS_TEST else None,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async SQLAlchemy session.

    The session is automatically closed when the request is completed.
    """
    async with AsyncSessionLocal() as session:
        yield session


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    FastAPI dependency returning the session factory, for collaborators that
    need a session of their own (e.g. the calendar reader running
    concurrently with booking queries).
    """
    return AsyncSessionLocal


async def init_db() -> None:
    """
    Create any missing tables for the current models.

    Safe to call from FastAPI startup. Typically you'd eventually replace
    this with Alembic migrations.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
