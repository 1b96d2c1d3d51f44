"""Database session management with transaction utilities.

This module provides:
- AsyncSession factory for dependency injection
- A transaction context manager that makes every multi-row write
  all-or-nothing and turns store failures into StoreError
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from moneybook.core.config import settings
from moneybook.core.exceptions import StoreError

logger = logging.getLogger(__name__)

# SQLite (used in tests and local runs) does not accept pool sizing arguments
_pool_options = (
    {}
    if settings.DATABASE_URL.startswith("sqlite")
    else {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }
)

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    **_pool_options,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency for route handlers.

    One session per request. Commits whatever is still pending when the
    handler returns and rolls back if it raised.

    Yields:
        AsyncSession: Database session for the request
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transactional(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Run a unit of work that must be written completely or not at all.

    Commits on success. On any exception the session is rolled back so no
    partial rows survive; SQLAlchemy errors are re-raised as StoreError,
    application errors are re-raised unchanged.

    Args:
        db: The database session

    Yields:
        AsyncSession: The database session

    Raises:
        StoreError: If the store rejected or failed the unit of work

    Example:
        ```python
        async with transactional(db):
            db.add(allocation)
            db.add_all(items)
        ```
    """
    try:
        yield db
        await db.commit()
        logger.debug("Transaction committed successfully")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Transaction rolled back due to store error: {type(e).__name__}: {e}")
        raise StoreError(f"Database operation failed: {type(e).__name__}") from e
    except Exception as e:
        await db.rollback()
        logger.warning(f"Transaction rolled back: {type(e).__name__}: {e}")
        raise
