"""
Setups API - Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite +
       StaticPool so all sessions share one connection), two seeded users
       with bearer tokens, and an HTTPX client wired to the app with
       get_db_session overridden to use that database.

Fixture Hierarchy (all function-scoped):
    db_engine → session_factory → db_session
                               └→ users → client
    mock_db_session: AsyncMock session for error-path unit tests
"""

import os
import uuid
from unittest.mock import AsyncMock, MagicMock

# Must be set before setups_api is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import setups_api.models  # noqa: F401  (registers tables on Base.metadata)
from setups_api.database import Base, get_db_session
from setups_api.models.setup import Setup
from setups_api.models.user import User

ALICE_TOKEN = "alice-token-0001"
BOB_TOKEN = "bob-token-0002"


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """A session for service-level tests. Don't combine with `client`."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def users(session_factory):
    """
    Two users with known tokens.

    Returns:
        {"alice": User, "bob": User}
    """
    async with session_factory() as session:
        alice = User(email="alice@example.com", token=ALICE_TOKEN)
        bob = User(email="bob@example.com", token=BOB_TOKEN)
        session.add_all([alice, bob])
        await session.commit()
    return {"alice": alice, "bob": bob}


@pytest.fixture
def auth():
    """Authorization headers by user name: auth("alice")."""
    tokens = {"alice": ALICE_TOKEN, "bob": BOB_TOKEN}

    def _headers(name: str) -> dict:
        return {"Authorization": f"Bearer {tokens[name]}"}

    return _headers


@pytest_asyncio.fixture
async def client(session_factory, users):
    """
    HTTPX AsyncClient talking to the app over ASGI.

    raise_app_exceptions=False lets tests observe the 500 response the
    catch-all handler produces instead of the re-raised exception.
    """
    from setups_api.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def load_setup(session_factory):
    """Read a setup straight from the database in a short-lived session."""

    async def _load(setup_id):
        async with session_factory() as session:
            return await session.get(Setup, uuid.UUID(str(setup_id)))

    return _load


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
        with pytest.raises(DatabaseError): ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session
