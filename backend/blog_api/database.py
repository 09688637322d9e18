"""
Blog API Backend — Database Session Management
================================================

What:  Async SQLAlchemy engine wrapper, session dependency, and the startup
       initializer that provisions the posts table.
Why:   Centralizes all database connection logic in one place.
How:   `initialize_database()` builds a `Database` (engine + session factory)
       from Settings, creates the schema, seeds the first post, and hands the
       handle to the application lifespan. Route handlers receive sessions
       through the `get_db_session` dependency.
Who:   main.py (lifespan), route handlers (via Depends), tests.

Architecture Decision:
    The engine is NOT a module-level global. The lifespan stores the
    `Database` on `app.state`, and each request pulls its session from there.
    Two apps (e.g. two tests) can run against two different files in the
    same process.

Why aiosqlite:
    SQLAlchemy's asyncio extension needs an async DBAPI; aiosqlite wraps the
    stdlib sqlite3 module and runs each call on a dedicated thread, so a
    statement never blocks the event loop.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blog_api.config import Settings
from blog_api.exceptions import StorageInitializationError

logger = logging.getLogger(__name__)

# What: The row inserted when the posts table is first found empty
SEED_POST = {
    "title": "Welcome to My Blog",
    "content": (
        "This is my first blog post! I'm excited to share my thoughts "
        "and experiences with you."
    ),
    "author": "Blog Owner",
}


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object; `initialize_database` calls
    `Base.metadata.create_all` on it.
    """
    pass


class Database:
    """
    Owns the async engine and session factory for one backing store.

    expire_on_commit=False: attributes stay loaded after commit, so a handler
    can serialize a Post it just committed without another round-trip.
    """

    def __init__(self, url: str, echo: bool = False):
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Transactional session scope.

        Commits on success, rolls back on any error and re-raises, and
        always closes the session (returning the connection to the pool).
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Close every pooled connection. Called on shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The `Database` lives on `app.state`, put there by the lifespan handler.

    Example usage in a route:
        @router.get("/posts")
        async def list_posts(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


# ── Persistence Initializer ───────────────────────────────────────────────
async def initialize_database(settings: Settings) -> Database:
    """
    Provision the backing store and return an open `Database`.

    Steps:
        1. Create the storage directory (recursively) if missing
        2. Open the engine against the database file (SQLite creates the file)
        3. CREATE TABLE IF NOT EXISTS posts
        4. If the table is empty, insert exactly one seed post
        5. Return the handle

    Raises:
        StorageInitializationError: any step failed. The cause is logged;
        there is no retry. Raised inside the lifespan, this aborts startup.
    """
    # Imported here: the model module imports Base from this module
    from blog_api.models.post import Post, utcnow

    db_file = settings.database_file

    try:
        db_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Could not create storage directory %s: %s", db_file.parent, e)
        raise StorageInitializationError(
            message="Could not create the storage directory",
            context={"path": str(db_file.parent), "original_error": type(e).__name__},
        ) from e

    database = Database(settings.database_url, echo=settings.log_level == "DEBUG")

    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Connected to SQLite database at %s", db_file)
        logger.info("Posts table ready")

        async with database.session() as session:
            count = await session.scalar(select(func.count()).select_from(Post))
            if not count:
                now = utcnow()
                session.add(Post(**SEED_POST, created_at=now, updated_at=now))
                logger.info("Added initial blog post")

    except Exception as e:
        logger.error("Error initializing database %s: %s", db_file, e, exc_info=True)
        await database.dispose()
        raise StorageInitializationError(
            context={"path": str(db_file), "original_error": type(e).__name__},
        ) from e

    return database
