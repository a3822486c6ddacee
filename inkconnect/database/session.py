"""
inkconnect/database/session.py

Initializes the SQLAlchemy asynchronous engine and session factory.
Provides an AsyncGenerator for database session dependency injection.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from inkconnect.core.config import settings
from inkconnect.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

# -----------------------------------------------------
# SQLAlchemy Async Engine Initialization
# -----------------------------------------------------
engine = create_async_engine(
    settings.db_url,
    echo=False,  # Set to True for SQL debugging output
)

# -----------------------------------------------------
# Session Factory for Async Database Access
# -----------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,  # Prevents auto-expiration of ORM objects after commit
)


# -----------------------------------------------------
# Dependency: Get Async DB Session
# -----------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI endpoints to provide an async DB session.
    Yields a single session per request, rolls back on exceptions, and closes cleanly.
    """
    async with AsyncSessionLocal() as db:
        try:
            yield db
        except Exception:
            await db.rollback()
            raise


# -----------------------------------------------------
# Commit Helper
# -----------------------------------------------------
async def commit_or_rollback(db: AsyncSession, action: str) -> None:
    """
    Commit the current unit of work. On a database error the session is rolled
    back and the failure surfaces as UpstreamError; nothing is retried.
    """
    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.error(f"[DB] Commit failed while trying to {action}: {e}", exc_info=True)
        await db.rollback()
        raise UpstreamError(f"Failed to {action}.") from e
