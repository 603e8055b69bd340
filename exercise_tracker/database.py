"""
Exercise Tracker — Store Connection & Session Management
=========================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` object owns one async engine and one session factory.
       It is constructed explicitly in the app lifespan, kept on
       `app.state.database`, and handed to route handlers through the
       `get_db_session` dependency, which commits on success and rolls back
       on error.
When:  Engine is created once at startup; sessions are created per request.

Connection Pooling:
    Server databases (PostgreSQL via asyncpg) get a sized pool with
    pre-ping and hourly recycling. SQLite (aiosqlite, used for local runs and
    tests) keeps SQLAlchemy's default pool for the dialect.
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from exercise_tracker.config import Settings
from exercise_tracker.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers its table on `Base.metadata`, which
    `Database.create_tables()` uses to build the schema on startup.
    """
    pass


class Database:
    """
    Explicitly constructed handle on the exercise store.

    Lifecycle:
        database = Database.from_settings(settings)
        await database.create_tables()    # startup
        async with database.session() as s: ...
        await database.dispose()          # shutdown
    """

    def __init__(self, url: str, engine_options: Optional[Dict[str, Any]] = None):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **(engine_options or {}))
        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, options)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_tables(self) -> None:
        """Create the users/exercises tables if they do not exist yet."""
        # Import models so their tables are registered on Base.metadata
        from exercise_tracker.models import exercise, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Store schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        """Run `SELECT 1`; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Store ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """Return the store attached to the running app, or fail with 503."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise StoreUnavailableError()
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/users")
        async def list_users(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database = get_database(request)
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
