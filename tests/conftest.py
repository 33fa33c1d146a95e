"""
Pytest configuration and fixtures for testing.
"""
import os

# Settings are read at import time, so the test environment goes first
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./eventspotter_test.db")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
import pytest_asyncio
from datetime import date, time
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from eventspotter.main import app
from eventspotter.db.session import Base, get_session, register_sqlite_functions
from eventspotter.core.security import hash_password, create_access_token
from eventspotter.db.models import User, Event


test_engine = register_sqlite_functions(create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
))

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh schema and session for each test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory():
    """Factory for independent sessions, standing in for a concurrent request."""
    return TestSessionLocal


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client bound to the app, sharing the test session.
    """
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(session: AsyncSession, username: str, email: str) -> User:
    user = User(
        username=username,
        email=email,
        hashed_password=hash_password("Password123!"),
    )
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "testuser", "testuser@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "otheruser", "otheruser@example.com")


@pytest.fixture
def user_token(test_user: User) -> str:
    """Valid access token for test_user."""
    return create_access_token({"sub": str(test_user.id), "username": test_user.username})


@pytest.fixture
def other_token(other_user: User) -> str:
    return create_access_token({"sub": str(other_user.id), "username": other_user.username})


@pytest.fixture
def auth_headers(user_token: str) -> dict:
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def make_event(db_session: AsyncSession, test_user: User):
    """Factory that inserts an event owned by test_user."""
    owner_id = test_user.id
    owner_name = test_user.username
    counter = {"n": 0}

    async def _make(**overrides) -> Event:
        counter["n"] += 1
        fields = dict(
            title=f"Event {counter['n']}",
            description="A community gathering used in tests.",
            event_date=date(2030, 1, counter["n"] % 28 + 1),
            event_time=time(18, 30),
            location_description="Community Hall",
            organizer_name=owner_name,
            category="Community",
            tags=[],
            user_id=owner_id,
        )
        fields.update(overrides)
        event = Event(**fields)
        db_session.add(event)
        await db_session.commit()
        return event

    return _make


@pytest_asyncio.fixture
async def catalog(make_event) -> list:
    """A small, varied corpus for discovery tests."""
    return [
        await make_event(title="python meetup", category="Tech", tags=["python", "meetup"],
                         event_date=date(2030, 3, 1), location_description="Oslo Library"),
        await make_event(title="Board Games Night", category="Social", tags=["games"],
                         event_date=date(2030, 3, 5), organizer_name="Dice Club"),
        await make_event(title="Rust Workshop", category="Tech", tags=["rust", "workshop"],
                         event_date=date(2030, 3, 10), description="Hands-on systems programming."),
        await make_event(title="art walk", category="Arts", tags=["outdoor"],
                         event_date=date(2030, 4, 2), location_description="Old Town"),
        await make_event(title="Jazz Evening", category="Music", tags=["music", "outdoor"],
                         event_date=date(2030, 4, 20)),
        await make_event(title="Data Science 101", category="Tech", tags=["python", "data"],
                         event_date=date(2030, 5, 15)),
    ]


@pytest.fixture(autouse=True)
def mock_password_hashing(monkeypatch):
    """
    Replace bcrypt hashing with a cheap deterministic stand-in.
    """
    class MockPasswordContext:
        def hash(self, password: str) -> str:
            return f"$2b$12$mockedhash{password}"

        def verify(self, plain: str, hashed: str) -> bool:
            return hashed == f"$2b$12$mockedhash{plain}"

    from eventspotter.core import security
    monkeypatch.setattr(security, "pwd_context", MockPasswordContext())
