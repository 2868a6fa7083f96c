"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets its own outer transaction that rolls back after the test.
- The database comes from ``TEST_DATABASE_URL``; without it a throwaway
  SQLite file (via aiosqlite) is created for the session.
"""

import os
import tempfile
import uuid
from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path

_test_db_url = os.environ.get("TEST_DATABASE_URL") or (
    f"sqlite+aiosqlite:///{Path(tempfile.mkdtemp()) / 'hotel_booking_test.db'}"
)
# Must be set before hotel_booking.config is imported.
os.environ["DATABASE_URL"] = _test_db_url

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402

from hotel_booking.auth.jwt import create_token_pair  # noqa: E402
from hotel_booking.auth.passwords import hash_password  # noqa: E402
from hotel_booking.database import Base, get_db  # noqa: E402
from hotel_booking.main import app  # noqa: E402
from hotel_booking.models import Guest, Room, RoomType, User  # noqa: E402

TEST_PASSWORD = "testpass123"


def pytest_collection_modifyitems(items):
    """Run every async test on the session event loop shared with the engine."""
    session_loop = pytest.mark.asyncio(loop_scope="session")
    for item in items:
        if pytest_asyncio.is_async_test(item):
            item.add_marker(session_loop, append=False)


# ---------------------------------------------------------------------------
# Session-scoped: create / drop all tables once per test session
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def test_engine():
    """Create a session-scoped engine tied to the session event loop."""
    engine = create_async_engine(_test_db_url, echo=False)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def setup_test_db(test_engine):
    """Create all tables at the start of the session and drop them at the end."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ---------------------------------------------------------------------------
# Per-test: transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(test_engine, setup_test_db) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back.

    ``session.commit()`` inside services does not end the outer transaction,
    so committed bookings still disappear after the test.
    """
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: staff accounts
# ---------------------------------------------------------------------------


async def _create_staff(db: AsyncSession, role: str, status: str = "ACTIVE") -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role.lower()}-{unique}@example.com",
        phone=f"+1555{unique}",
        first_name="Test",
        last_name=role.title(),
        hashed_password=hash_password(TEST_PASSWORD),
        role=role,
        status=status,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def _bearer(principal_id: uuid.UUID, role: str) -> dict[str, str]:
    tokens = create_token_pair(str(principal_id), role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_staff(db_session, "ADMIN")


@pytest_asyncio.fixture
async def receptionist_user(db_session: AsyncSession) -> User:
    return await _create_staff(db_session, "RECEPTIONIST")


@pytest_asyncio.fixture
async def room_manager_user(db_session: AsyncSession) -> User:
    return await _create_staff(db_session, "ROOM_MANAGER")


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict[str, str]:
    return _bearer(admin_user.id, "ADMIN")


@pytest_asyncio.fixture
async def receptionist_headers(receptionist_user: User) -> dict[str, str]:
    return _bearer(receptionist_user.id, "RECEPTIONIST")


@pytest_asyncio.fixture
async def room_manager_headers(room_manager_user: User) -> dict[str, str]:
    return _bearer(room_manager_user.id, "ROOM_MANAGER")


# ---------------------------------------------------------------------------
# Convenience fixtures: guest, room type, room
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_guest(db_session: AsyncSession) -> Guest:
    """An active, verified guest with a password."""
    unique = uuid.uuid4().hex[:8]
    guest = Guest(
        first_name="Test",
        last_name="Guest",
        email=f"guest-{unique}@example.com",
        phone=f"+6140{unique}",
        hashed_password=hash_password(TEST_PASSWORD),
        status="ACTIVE",
    )
    db_session.add(guest)
    await db_session.flush()
    await db_session.refresh(guest)
    return guest


@pytest_asyncio.fixture
async def guest_headers(test_guest: Guest) -> dict[str, str]:
    return _bearer(test_guest.id, "GUEST")


@pytest_asyncio.fixture
async def test_room_type(db_session: AsyncSession) -> RoomType:
    room_type = RoomType(name=f"Deluxe-{uuid.uuid4().hex[:6]}", description="King bed")
    db_session.add(room_type)
    await db_session.flush()
    await db_session.refresh(room_type)
    return room_type


@pytest_asyncio.fixture
async def test_room(db_session: AsyncSession, test_room_type: RoomType) -> Room:
    """An AVAILABLE room priced at 100.00 per night."""
    room = Room(
        room_number=f"R{uuid.uuid4().hex[:6]}",
        price=Decimal("100.00"),
        status="AVAILABLE",
        room_type_id=test_room_type.id,
    )
    db_session.add(room)
    await db_session.flush()
    await db_session.refresh(room)
    return room
