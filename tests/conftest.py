"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test runs inside a connection-level transaction that rolls back
  after the test.
- By default the database is an in-memory SQLite database (aiosqlite); set
  ``TEST_DATABASE_URL`` to run against PostgreSQL instead.
"""

import os
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from staylocal.auth.jwt import create_token_pair
from staylocal.auth.passwords import hash_password
from staylocal.database import Base, get_db
from staylocal.main import app
from staylocal.models.enums import Role
from staylocal.models.property import Property
from staylocal.models.user import User

TEST_PASSWORD = "testpass123"
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)

_test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


def _make_engine() -> AsyncEngine:
    if not _test_db_url.startswith("sqlite"):
        return create_async_engine(_test_db_url, echo=False, pool_pre_ping=True)

    engine = create_async_engine(
        _test_db_url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite's implicit transaction handling breaks SAVEPOINT; take over BEGIN ourselves.
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


# ---------------------------------------------------------------------------
# Engine and schema
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Engine with every table created (a fresh database per test on SQLite)."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


# ---------------------------------------------------------------------------
# Per-test: transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
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
# Users of each role
# ---------------------------------------------------------------------------


def headers_for(user: User) -> dict[str, str]:
    tokens = create_token_pair(user)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def user_password() -> str:
    """Plain-text password of every user created by ``make_user``."""
    return TEST_PASSWORD


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory: ``await make_user(Role.host, name="...")``."""

    async def _make(role: Role = Role.traveler, **overrides) -> User:
        unique = uuid.uuid4().hex[:8]
        values = {
            "email": f"{role.value}-{unique}@test.com",
            "hashed_password": _TEST_PASSWORD_HASH,
            "name": f"Test {role.value.title()}",
            "role": role.value,
            "is_active": True,
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        await db_session.flush()
        return user

    return _make


@pytest_asyncio.fixture
async def traveler(make_user) -> User:
    return await make_user(Role.traveler, name="Tina Traveler")


@pytest_asyncio.fixture
async def other_traveler(make_user) -> User:
    return await make_user(Role.traveler, name="Otto Traveler")


@pytest_asyncio.fixture
async def host(make_user) -> User:
    return await make_user(Role.host, name="Hank Host")


@pytest_asyncio.fixture
async def other_host(make_user) -> User:
    return await make_user(Role.host, name="Olga Host")


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(Role.admin, name="Ada Admin")


@pytest_asyncio.fixture
async def traveler_headers(traveler: User) -> dict[str, str]:
    return headers_for(traveler)


@pytest_asyncio.fixture
async def other_traveler_headers(other_traveler: User) -> dict[str, str]:
    return headers_for(other_traveler)


@pytest_asyncio.fixture
async def host_headers(host: User) -> dict[str, str]:
    return headers_for(host)


@pytest_asyncio.fixture
async def other_host_headers(other_host: User) -> dict[str, str]:
    return headers_for(other_host)


@pytest_asyncio.fixture
async def admin_headers(admin: User) -> dict[str, str]:
    return headers_for(admin)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def make_property(db_session: AsyncSession) -> Callable[..., Awaitable[Property]]:
    """Factory for properties inserted directly in the DB (approved unless told otherwise)."""

    async def _make(host: User, **overrides) -> Property:
        values = {
            "host_id": host.id,
            "title": "Test Cabin",
            "description": "A quiet cabin for automated tests.",
            "property_type": "cabin",
            "city": "Bend",
            "country": "USA",
            "price_per_night": Decimal("100.00"),
            "currency": "USD",
            "max_guests": 4,
            "amenities": ["wifi", "parking"],
            "is_available": True,
            "is_approved": True,
        }
        values.update(overrides)
        prop = Property(**values)
        db_session.add(prop)
        await db_session.flush()
        await db_session.refresh(prop)
        return prop

    return _make


@pytest_asyncio.fixture
async def listed_property(make_property, host: User) -> Property:
    """An approved, available property owned by ``host``: $100/night, up to 4 guests."""
    return await make_property(host)
