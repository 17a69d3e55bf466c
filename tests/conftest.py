"""
Pytest fixtures for user account service tests.

The environment is configured before any application module is imported:
the app's engine points at a temporary SQLite file and a signing secret is set.
"""

import os
import tempfile
from typing import AsyncGenerator

# Use file-based SQLite so all connections share the same DB (in-memory is per-connection)
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
TEST_SECRET = "test-secret-key-for-testing-only"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CORS_ORIGIN_REGEX"] = r"https://.*\.cognitiveclass\.ai"

# Force config reload so app uses test settings
from user_accounts.config import get_settings
get_settings.cache_clear()

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from user_accounts.database import build_session_maker
from user_accounts.kernel.identity import (
    AccountService,
    InMemoryCredentialStore,
    PasswordHasher,
    TokenIssuer,
)
from user_accounts.kernel.models import Base


def pytest_sessionfinish(session, exitstatus):
    """Clean up temp DB files after test run."""
    for suffix in ("", "-wal", "-shm"):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            os.unlink(path)


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine; StaticPool keeps one shared connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session on the in-memory engine."""
    async with build_session_maker(db_engine)() as session:
        yield session


@pytest.fixture
def hasher() -> PasswordHasher:
    """Cheap hasher for tests."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def memory_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def accounts(memory_store, hasher, issuer) -> AccountService:
    """Account service over the in-memory store."""
    return AccountService(memory_store, hasher, issuer)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app with fresh tables."""
    from user_accounts.database import engine
    from user_accounts.main import app

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def api_prefix() -> str:
    return get_settings().api_prefix


@pytest.fixture
def alice() -> dict:
    """Registration payload used across API tests."""
    return {"username": "alice", "email": "alice@x.com", "password": "pw123456"}
