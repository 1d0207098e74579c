"""
Local Library: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Route tests run the real application against a throwaway SQLite
       database (aiosqlite), wired in through FastAPI dependency overrides.
       Service unit tests use a mocked AsyncSession instead.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock standing in for AsyncSession
    ├── session_factory:  async_sessionmaker bound to a fresh SQLite file
    ├── db_session:       one session from that factory, for arranging data
    ├── sample_catalog:   an author, two genres, a book and one copy
    └── test_client:      HTTPX AsyncClient talking to the app in-process
"""

import os
import tempfile
from datetime import date
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any application import: the module-level engine
# and settings singleton are built from these on first import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="locallibrary_test_"), "health.db"
)
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from locallibrary.database import Base, get_db_session, get_session_factory
from locallibrary.models import Author, Book, BookInstance, CopyStatus, Genre


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session (service unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        async def test_get_author(mock_db_session):
            mock_db_session.get.return_value = author
            result = await author_service.get_author(mock_db_session, author.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real Database (route tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """
    Session factory bound to a new SQLite file with the full schema.

    NullPool: every session opens its own connection, which is what the
    parallel readers expect from a server database.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def sample_catalog(db_session):
    """
    Arrange a minimal catalog:
        author  Isaac Asimov (1920-01-02 → 1992-04-06)
        genres  Fantasy, Science Fiction
        book    Foundation (Science Fiction) with one Available copy
    """
    author = Author(
        first_name="Isaac",
        family_name="Asimov",
        date_of_birth=date(1920, 1, 2),
        date_of_death=date(1992, 4, 6),
    )
    fantasy = Genre(name="Fantasy")
    science_fiction = Genre(name="Science Fiction")
    book = Book(
        title="Foundation",
        author=author,
        summary="The Galactic Empire is falling.",
        isbn="9780553293357",
        genres=[science_fiction],
    )
    copy = BookInstance(
        book=book,
        imprint="Gnome Press, 1951",
        status=CopyStatus.AVAILABLE,
        due_back=date(2026, 1, 1),
    )
    db_session.add_all([author, fantasy, science_fiction, book, copy])
    await db_session.commit()

    return SimpleNamespace(
        author=author,
        fantasy=fantasy,
        science_fiction=science_fiction,
        book=book,
        copy=copy,
    )


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    Both session dependencies are pointed at the test database. Redirects
    are not followed so tests can assert on 302/303 and Location.

    Usage:
        async def test_books(test_client):
            response = await test_client.get("/catalog/books")
            assert response.status_code == 200
    """
    from locallibrary.main import app

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
