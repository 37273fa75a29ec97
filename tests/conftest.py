"""
Shared pytest fixtures for testing PaperFX.

Each test runs against its own in-memory SQLite database. Service tests use
`test_session` directly; API tests go through `test_client`.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from paperfx.database import Base, get_session
from paperfx.main import app
from paperfx.services import accounts


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session")
def anyio_backend():
    """Use asyncio backend for pytest-asyncio."""
    return "asyncio"


@pytest_asyncio.fixture
async def test_engine():
    """Engine with the PaperFX schema created, dropped again after the test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def test_session(session_factory):
    """Session for calling services directly; uncommitted work is rolled back."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_client(session_factory):
    """ASGI client for the app, with every request getting a session on the
    test engine."""

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Accounts ---

@pytest_asyncio.fixture
async def registration(test_session):
    """Register Ana's account through the account service."""
    return await accounts.register(test_session, "Ana", "ana@x.com", "s3cret")


@pytest_asyncio.fixture
async def account(registration):
    """The registered account."""
    return registration.account


@pytest_asyncio.fixture
async def auth_headers(test_client):
    """Register through the API and return bearer auth headers."""
    response = await test_client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": "ana@x.com", "password": "s3cret"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
