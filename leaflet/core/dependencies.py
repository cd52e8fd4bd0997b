"""
Dependency Wiring.

Builds the notes repository from its collaborators. Every collaborator
is passed in through a constructor; anything not supplied is built from
the configured defaults.

Usage:
    from leaflet.core.dependencies import build_notes_repository

    await init_database()
    repository = build_notes_repository()
    notes = await repository.fetch_notes()
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leaflet.caching.notes import NotesCache
from leaflet.core.logging import get_logger
from leaflet.remote.notes import NotesRemoteSource
from leaflet.repositories.notes import NotesRepository
from leaflet.stores.note import NoteStore

logger = get_logger(__name__)


def build_remote_source() -> NotesRemoteSource:
    """Create the remote source from application.yaml and the .env secrets."""
    from leaflet.core.config import get_app_config, get_settings

    remote_config = get_app_config().application.remote
    if not remote_config.enabled:
        return NotesRemoteSource()
    return NotesRemoteSource(
        base_url=remote_config.base_url,
        api_token=get_settings().remote_api_token,
    )


def build_notes_repository(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    cache: NotesCache | None = None,
    remote: NotesRemoteSource | None = None,
) -> NotesRepository:
    """
    Assemble a NotesRepository.

    Args:
        session_factory: Session factory for the store; defaults to the
            configured database
        cache: Cache to share; defaults to a new empty cache
        remote: Remote source; defaults to one built from configuration

    Returns:
        Repository wired to its store, cache and remote source
    """
    if session_factory is None:
        from leaflet.core.database import get_session_factory

        session_factory = get_session_factory()

    repository = NotesRepository(
        store=NoteStore(session_factory),
        cache=cache if cache is not None else NotesCache(),
        remote=remote if remote is not None else build_remote_source(),
    )
    logger.debug(
        "Notes repository built",
        extra={"remote_configured": repository.remote.is_configured},
    )
    return repository
