"""
Notes Repository.

Single entry point for reading and writing notes. Composes the note
store, the in-memory cache and the remote source, and implements the
read-through cache policy:

    fetch_notes   store first; on StoreError fall back to the cache
                  snapshot taken before the store was queried
    fetch_note    store only, no fallback
    save_note     store, then cache the persisted note
    delete_note   store, then evict from the cache
    search_notes  store only, the cache is neither read nor warmed
"""

from leaflet.caching.notes import NotesCache
from leaflet.core.exceptions import StoreError
from leaflet.remote.notes import NotesRemoteSource
from leaflet.repositories.base import BaseRepository
from leaflet.schemas.note import Note
from leaflet.stores.note import NoteStore


class NotesRepository(BaseRepository):
    """
    Repository for notes.

    Holds no state of its own: durable state lives in the store and
    ephemeral state in the cache. Each call makes a single attempt;
    nothing is retried.
    """

    def __init__(
        self,
        store: NoteStore,
        cache: NotesCache,
        remote: NotesRemoteSource,
    ) -> None:
        super().__init__()
        self.store = store
        self.cache = cache
        # Not consulted yet; kept so sync can be added without rewiring.
        self.remote = remote

    async def fetch_notes(self) -> list[Note]:
        """
        List all notes, most recently updated first.

        Fetched notes are added to the cache; cached notes missing from
        the result are kept. When the store fails, the cache contents
        from before the call are returned instead and the failure is
        only logged.

        Returns:
            Notes from the store, or the cached snapshot if the store failed
        """
        cached_snapshot = self.cache.get_all()

        try:
            notes = await self.store.fetch_all()
        except StoreError as e:
            self._log_warning(
                "Store unavailable, serving cached notes",
                operation=e.operation,
                error=e.message,
                cached=len(cached_snapshot),
            )
            return cached_snapshot

        self.cache.put_all(notes)
        self._log_debug("Fetched notes", count=len(notes))
        return notes

    async def fetch_note(self, note_id: str) -> Note | None:
        """
        Get a single note straight from the store.

        Args:
            note_id: Note ID

        Returns:
            The note, or None if it does not exist

        Raises:
            StoreError: If the store fails
        """
        self._log_debug("Fetching note", note_id=note_id)
        return await self.store.fetch_by_id(note_id)

    async def save_note(self, note: Note) -> Note:
        """
        Persist a note and cache the stored version.

        Args:
            note: Note to save; a non-empty title is the caller's concern

        Returns:
            The persisted note with its new updated_at

        Raises:
            StoreError: If the store fails; the cache is left untouched
        """
        self._log_operation("Saving note", note_id=note.id)
        saved = await self.store.save(note)
        self.cache.put(saved)
        return saved

    async def delete_note(self, note_id: str) -> bool:
        """
        Delete a note from the store, then from the cache.

        Args:
            note_id: Note ID to delete; unknown IDs are not an error

        Returns:
            True if the store removed a record, False if none had that ID

        Raises:
            StoreError: If the store fails; the cache is left untouched
        """
        self._log_operation("Deleting note", note_id=note_id)
        removed = await self.store.delete(note_id)
        self.cache.remove(note_id)
        return removed

    async def search_notes(self, query: str) -> list[Note]:
        """
        Search notes by title, content or tag.

        A blank query means no filter and returns every note.

        Args:
            query: Search text, matched case-insensitively as a substring

        Returns:
            Matching notes, most recently updated first

        Raises:
            StoreError: If the store fails
        """
        self._log_debug("Searching notes", query=query)
        if not query.strip():
            return await self.store.fetch_all()
        return await self.store.search(query)
