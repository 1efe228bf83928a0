from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Importing the app builds the module-level engine; give it something valid before the fixtures take over.
os.environ.setdefault("GGJ_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("GGJ_BASIC_AUTH_USERNAME", "test-user")
os.environ.setdefault("GGJ_BASIC_AUTH_PASSWORD", "test-pass")

import gogetajob.models  # noqa: E402,F401
from gogetajob.core.config import get_settings  # noqa: E402
from gogetajob.core.db import get_session  # noqa: E402
from gogetajob.models.base import Base  # noqa: E402

TEST_AUTH = ("test-user", "test-pass")


@pytest.fixture
def app_env(tmp_path, monkeypatch) -> Iterator[Path]:
    """Point settings at a per-test database and uploads root; returns the uploads root."""
    uploads_dir = tmp_path / "uploads"
    uploads_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("GGJ_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("GGJ_UPLOADS_DIR", str(uploads_dir))
    monkeypatch.setenv("GGJ_BASIC_AUTH_USERNAME", TEST_AUTH[0])
    monkeypatch.setenv("GGJ_BASIC_AUTH_PASSWORD", TEST_AUTH[1])
    monkeypatch.setenv("GGJ_NODE_ENV", "test")
    monkeypatch.delenv("GGJ_MAX_UPLOAD_BYTES", raising=False)
    get_settings.cache_clear()

    yield uploads_dir

    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_engine(app_env) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(get_settings().database_url, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    from gogetajob.main import create_app

    app = create_app()

    async def _get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", auth=TEST_AUTH) as c:
        yield c
