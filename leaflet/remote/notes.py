"""
Notes Remote Source.

Boundary for synchronizing notes with a remote server. Nothing is sent
or received in this version: fetch_notes returns no notes and save_note
echoes its input, so the remote side can never contradict local state.
"""

from leaflet.core.logging import get_logger
from leaflet.schemas.note import Note

logger = get_logger(__name__)


class NotesRemoteSource:
    """Inert remote data source."""

    def __init__(self, base_url: str | None = None, api_token: str | None = None) -> None:
        self.base_url = base_url
        self._api_token = api_token

    @property
    def is_configured(self) -> bool:
        return self.base_url is not None

    async def fetch_notes(self) -> list[Note]:
        logger.debug("Remote fetch skipped", extra={"base_url": self.base_url})
        return []

    async def save_note(self, note: Note) -> Note:
        logger.debug("Remote save skipped", extra={"note_id": note.id})
        return note
