"""
Blog API Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mock session, temp database,
       API client, deterministic clock).

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── clock: Deterministic clock, one second per reading
    ├── test_settings: Settings pointing at a temp database file
    ├── database: Initialized Database on that file (seeded)
    ├── db_session: Real AsyncSession on that Database
    ├── app: create_app(test_settings) with its lifespan running
    └── test_client: HTTPX AsyncClient talking to `app`
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports: importing
# blog_api.main builds the module-level app from the environment
_tmp_root = tempfile.mkdtemp(prefix="blog_api_test_")
os.environ["DATABASE_PATH"] = os.path.join(_tmp_root, "blog.db")
os.environ["STATIC_DIR"] = os.path.join(_tmp_root, "public")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from blog_api.config import Settings  # noqa: E402
from blog_api.database import initialize_database  # noqa: E402


class FakeClock:
    """Returns start, start+step, start+2*step, ... on successive calls."""

    def __init__(
        self,
        start: datetime = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1),
    ):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now = self.now + self.step
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_post(mock_db_session):
            mock_db_session.get.return_value = post
            result = await post_service.get_post(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_post_data():
    """A dictionary matching the Post model columns."""
    created = datetime(2024, 1, 15, 12, 0, 0)
    return {
        "id": 7,
        "title": "Hello",
        "content": "World content here",
        "author": "Anonymous",
        # Naive, as SQLite hands them back
        "created_at": created,
        "updated_at": created,
    }


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings with a database file under a not-yet-existing directory."""
    return Settings(
        database_path=str(tmp_path / "storage" / "blog-db" / "blog.db"),
        static_dir=str(tmp_path / "public"),
        log_level="WARNING",
        _env_file=None,
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """An initialized (and therefore seeded) Database on a temp file."""
    db = await initialize_database(test_settings)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fresh app running its lifespan, so the database is provisioned exactly
    as it would be under uvicorn.
    """
    from blog_api.main import create_app

    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/posts")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
