"""Async SQLAlchemy engine and session handling.

One ``DatabaseManager`` per process owns the engine. Request handlers get a
session from ``get_db_session``; long-lived connections (WebSocket, SSE)
open short scopes with ``get_db_manager().session()`` for every read.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from donorbase.core.config import Settings, get_settings
from donorbase.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for the events, donor_forms and donations tables."""


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    SQLite connections are shared across the event loop's tasks, so the
    same-thread check is disabled; pool sizing only applies to server
    databases.
    """
    options: dict[str, Any] = {"echo": settings.db_echo}
    if settings.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )
    return options


def sqlite_directory(database_url: str) -> Path | None:
    """Directory holding a file-backed SQLite database, else None."""
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite") or not url.database:
        return None
    if url.database == ":memory:" or url.database.startswith("file::memory:"):
        return None
    return Path(url.database).parent


class DatabaseManager:
    """Lazily created engine and session factory."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url, **engine_options(self.settings)
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        # Services return entities built after commit, so nothing may expire
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scope that rolls back whatever the caller left uncommitted.

        Example:
            async with get_db_manager().session() as session:
                events = await EventService(session).list_events()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready", tables=sorted(Base.metadata.tables))

    async def check_connection(self) -> bool:
        """Run ``SELECT 1``; used by ``/ready`` and at startup."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")


_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db_manager().session() as session:
        yield session


async def init_database() -> None:
    """Create the SQLite directory if needed, check connectivity, create tables.

    Raises:
        RuntimeError: If the database cannot be reached.
    """
    # Importing the models registers their tables on Base.metadata
    from donorbase.infrastructure.persistence import models  # noqa: F401

    db = get_db_manager()

    directory = sqlite_directory(db.settings.database_url)
    if directory is not None and not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
        logger.info("Database directory created", path=str(directory))

    if not await db.check_connection():
        raise RuntimeError("Failed to connect to database")

    await db.create_tables()


async def close_database() -> None:
    await get_db_manager().disconnect()
