"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from leaflet.caching.notes import NotesCache
from leaflet.remote.notes import NotesRemoteSource
from leaflet.repositories.notes import NotesRepository
from leaflet.stores.note import NoteStore


# =============================================================================
# Store Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_store() -> AsyncMock:
    """
    Mock note store for unit tests.

    Every store coroutine is an AsyncMock returning an empty result by
    default.

    Usage:
        async def test_repository(mock_store):
            mock_store.fetch_all.return_value = [note]
    """
    store = AsyncMock(spec=NoteStore)
    store.fetch_all.return_value = []
    store.fetch_by_id.return_value = None
    store.search.return_value = []
    store.delete.return_value = True
    return store


@pytest.fixture
def cache() -> NotesCache:
    """Fresh, empty cache."""
    return NotesCache()


@pytest.fixture
def repository(mock_store: AsyncMock, cache: NotesCache) -> NotesRepository:
    """Repository wired to a mocked store and a real cache."""
    return NotesRepository(store=mock_store, cache=cache, remote=NotesRemoteSource())


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger, repository):
            repository._logger = mock_logger
            ...
            mock_logger.warning.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
