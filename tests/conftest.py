"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Database Configuration:
    Each test that needs the record store gets its own SQLite file under
    pytest's tmp_path, created through the same engine builder the
    application uses (foreign keys and busy timeout enabled).
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from leaflet.core.database import build_engine, init_database, make_session_factory
from leaflet.schemas.note import Note
from leaflet.stores.note import NoteStore


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a file-backed SQLite engine with the note tables in place.

    A file (rather than :memory:) lets concurrent sessions use separate
    connections, as they do in the application.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    await init_database(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return make_session_factory(db_engine)


@pytest.fixture
def note_store(db_session_factory: async_sessionmaker[AsyncSession]) -> NoteStore:
    """Record store backed by the test database."""
    return NoteStore(db_session_factory)


# =============================================================================
# Domain Fixtures
# =============================================================================


BASE_TIME = datetime(2025, 7, 18, 9, 0, 0)


@pytest.fixture
def base_time() -> datetime:
    """Reference time that make_note ages notes from."""
    return BASE_TIME


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Factory for notes with predictable timestamps.

    Usage:
        def test_something(make_note):
            note = make_note(title="Grocery List", tags=["shopping"])
            older = make_note(age=timedelta(days=2))
    """
    def _make(age: timedelta = timedelta(0), **fields: Any) -> Note:
        stamp = BASE_TIME - age
        fields.setdefault("created_at", stamp)
        fields.setdefault("updated_at", stamp)
        return Note(**fields)

    return _make


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
