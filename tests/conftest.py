"""
Pytest fixtures for registry tests.

Uses a temp-file SQLite database (through aiosqlite) so every connection
sees the same data; foreign keys are switched on by build_engine.
"""

import os
import tempfile
from typing import AsyncGenerator

_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["MARK_ACTIVE_ON_STARTUP"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_registry.config import get_settings

get_settings.cache_clear()

from rbac_registry.database import build_engine, build_session_maker, init_db
from rbac_registry.kernel.identity.jwt import JWTManager
from rbac_registry.kernel.models import Base
from rbac_registry.kernel.registry import ServiceLocks


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Fresh schema per test."""
    engine = build_engine(TEST_DATABASE_URL)
    await init_db(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return build_session_maker(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def locks() -> ServiceLocks:
    return ServiceLocks()


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test database."""
    from rbac_registry.api.deps import get_db
    from rbac_registry.kernel.registry import collect_live_endpoints
    from rbac_registry.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
            finally:
                await session.close()

    # ASGITransport does not run the lifespan
    app.state.live_endpoints = collect_live_endpoints(app.routes)
    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def jwt_manager() -> JWTManager:
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


@pytest.fixture
def auth_headers(jwt_manager: JWTManager) -> dict:
    token, _ = jwt_manager.create_access_token("ops-admin", roles=["admin"])
    return {"Authorization": f"Bearer {token}"}


def pytest_sessionfinish(session, exitstatus):
    """Remove the temp database files."""
    for suffix in ("", "-wal", "-shm"):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            os.unlink(path)
