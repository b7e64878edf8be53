"""Pytest configuration for all tests."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import donorbase.infrastructure.persistence.models  # noqa: F401
from donorbase.domain.entities import AccessContext, AccessRole, CustomField, FieldType
from donorbase.domain.services.event_service import EventService
from donorbase.infrastructure.persistence.database import Base
from donorbase.infrastructure.realtime.snapshot_hub import SnapshotHub
from donorbase.infrastructure.realtime.snapshot_publisher import SnapshotPublisher

ADMIN_PASSWORD = "1234"
VISITOR_PASSWORD = "5678"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def hub() -> SnapshotHub:
    return SnapshotHub()


@pytest.fixture
def publisher(hub: SnapshotHub) -> SnapshotPublisher:
    return SnapshotPublisher(hub)


@pytest_asyncio.fixture
async def event(db_session: AsyncSession):
    """An event with an empty donor form."""
    return await EventService(db_session).create(
        name="Temple Renovation",
        admin_password=ADMIN_PASSWORD,
        visitor_password=VISITOR_PASSWORD,
        description="Annual fundraiser",
    )


@pytest.fixture
def admin(event) -> AccessContext:
    return AccessContext(event_id=event.id, role=AccessRole.ADMIN)


@pytest.fixture
def visitor(event) -> AccessContext:
    return AccessContext(event_id=event.id, role=AccessRole.VISITOR)


@pytest.fixture
def sample_schema() -> list[CustomField]:
    """Text, selector and radio fields in order."""
    return [
        CustomField(id="1", label="City", field_type=FieldType.TEXT, required=True, order=0),
        CustomField(
            id="2",
            label="Payment Mode",
            field_type=FieldType.SELECTOR,
            options=("Cash", "UPI"),
            order=1,
        ),
        CustomField(
            id="3",
            label="Member",
            field_type=FieldType.RADIO,
            options=("Yes", "No"),
            order=2,
        ),
    ]


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependencies."""
    from donorbase.infrastructure.api.app import app
    from donorbase.infrastructure.api.dependencies import get_session_scope
    from donorbase.infrastructure.persistence.database import get_db_session

    @asynccontextmanager
    async def shared_session():
        yield db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_session_scope] = lambda: shared_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Event-Password": ADMIN_PASSWORD}


@pytest.fixture
def visitor_headers() -> dict[str, str]:
    return {"X-Event-Password": VISITOR_PASSWORD}
