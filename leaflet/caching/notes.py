"""
Notes Cache.

In-memory cache holding the most recently seen copy of each note.

The cache is a pure accelerator: it never performs I/O, has no error
conditions and may be cleared at any time without data loss. It is safe
to share between asyncio tasks and worker threads.

Writers serialize on a lock, build a new mapping and publish it with a
single reference assignment. Readers never take the lock; they read
whichever mapping is currently published, which is never mutated after
publication. A reader racing a write therefore sees the state from
before or after that write, never a partially applied one.
"""

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from leaflet.core.logging import get_logger
from leaflet.schemas.note import Note

logger = get_logger(__name__)


class NotesCache:
    """
    Thread-safe note cache keyed by note ID.

    put is last-writer-wins with no versioning. put_all applies a batch
    under one lock acquisition and publishes it at once.
    """

    def __init__(self) -> None:
        self._notes: Mapping[str, Note] = MappingProxyType({})
        self._write_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    def get_all(self) -> list[Note]:
        """Return a point-in-time snapshot of every cached note."""
        return list(self._notes.values())

    def get_by_id(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def put(self, note: Note) -> None:
        """Insert or replace a single note."""
        with self._write_lock:
            updated = dict(self._notes)
            updated[note.id] = note
            self._notes = MappingProxyType(updated)
        logger.debug("Note cached", extra={"note_id": note.id})

    def put_all(self, notes: Iterable[Note]) -> None:
        """Insert or replace a batch of notes, equivalent to put for each."""
        with self._write_lock:
            updated = dict(self._notes)
            count = 0
            for note in notes:
                updated[note.id] = note
                count += 1
            self._notes = MappingProxyType(updated)
        logger.debug("Notes cached", extra={"count": count, "size": len(updated)})

    def remove(self, note_id: str) -> None:
        """Drop a note; removing an uncached ID does nothing."""
        with self._write_lock:
            if note_id not in self._notes:
                return
            updated = dict(self._notes)
            del updated[note_id]
            self._notes = MappingProxyType(updated)
        logger.debug("Note evicted", extra={"note_id": note_id})

    def clear(self) -> None:
        with self._write_lock:
            self._notes = MappingProxyType({})
        logger.debug("Cache cleared")
