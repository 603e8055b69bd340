"""
Exercise Tracker — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── database: real Database on a throwaway SQLite file (aiosqlite)
    ├── db_session: session on that database
    ├── test_client: HTTPX AsyncClient wired to the app and `database`
    └── drop_table: breaks the store for failure-path tests
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any application imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="exercise_tracker_test_"), "unused.db"
)
os.environ["STATIC_DIR"] = str(PROJECT_ROOT / "public")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from exercise_tracker.database import Database  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database(tmp_path):
    """A fresh store with both tables created, disposed after the test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The lifespan does not run under ASGITransport, so the fixture attaches
    the test database to app.state itself.
    """
    from exercise_tracker.main import app

    app.state.database = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.state.database = None


@pytest.fixture
def drop_table(database):
    """Drop a table from the test store so statements against it fail."""

    async def _drop(table):
        async with database.engine.begin() as conn:
            await conn.run_sync(table.drop)

    return _drop
