"""Commit helper shared by the write services."""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from donorbase.core.logging import get_logger
from donorbase.domain.exceptions import PersistenceError

logger = get_logger(__name__)


async def commit_or_raise(session: AsyncSession, operation: str, **context: Any) -> None:
    """Commit the session, rolling back and raising PersistenceError on failure.

    Failed writes are not retried.
    """
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Write failed", operation=operation, error=str(e), **context)
        raise PersistenceError(f"Failed to {operation}: {e}") from e
