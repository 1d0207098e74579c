"""
Local Library: Database Session Management
===========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependencies.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine, provides a request-scoped session dependency
       that commits on success and rolls back on error, and exposes the
       session factory so handlers can open one session per parallel read.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Two session dependencies:
    get_db_session:      one session per request, used by write paths
    get_session_factory: the factory itself, used by fan-out reads
                         (an AsyncSession cannot run concurrent statements,
                         so every parallel read opens its own session)
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from locallibrary.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool sizing is only passed for server databases: SQLite uses a
    single-file or in-memory pool that rejects pool_size/max_overflow.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = build_engine(settings.database_url)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: redirects read `record.url` after commit without
# triggering a refresh query outside the session
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic and the test fixtures use
    to create the schema.
    """
    pass


# ── Session Dependencies ──────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)

    Services commit their own writes before a handler redirects, so the
    commit here only flushes anything a handler left pending.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency returning the session factory for fan-out reads."""
    return async_session_factory


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
