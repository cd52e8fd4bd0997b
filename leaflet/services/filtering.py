"""
Note list filtering.

Category and text filtering applied by list views to notes they already
hold, so switching category or typing does not hit the store.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta
from enum import Enum

from leaflet.core.utils import utc_now
from leaflet.schemas.note import Note

RECENT_WINDOW = timedelta(weeks=1)


class NoteCategory(str, Enum):
    """Categories offered by the notes list."""

    ALL = "all"
    RECENT = "recent"
    IMPORTANT = "important"
    ARCHIVED = "archived"


def matches_query(note: Note, query: str) -> bool:
    """True if title, content or any tag contains query, ignoring case."""
    needle = query.casefold()
    return (
        needle in note.title.casefold()
        or needle in note.content.casefold()
        or any(needle in tag.casefold() for tag in note.tags)
    )


def filter_notes(
    notes: Iterable[Note],
    category: NoteCategory = NoteCategory.ALL,
    query: str = "",
    now: datetime | None = None,
) -> list[Note]:
    """
    Filter notes by category and search text.

    Args:
        notes: Notes to filter
        category: RECENT keeps notes created in the last week, IMPORTANT and
            ARCHIVED keep notes with the matching flag
        query: Optional search text; empty means no text filter
        now: Reference time for RECENT, defaults to the current UTC time

    Returns:
        Matching notes, most recently updated first (ties keep input order)
    """
    selected = list(notes)

    if category is NoteCategory.RECENT:
        cutoff = (now or utc_now()) - RECENT_WINDOW
        selected = [note for note in selected if note.created_at >= cutoff]
    elif category is NoteCategory.IMPORTANT:
        selected = [note for note in selected if note.is_important]
    elif category is NoteCategory.ARCHIVED:
        selected = [note for note in selected if note.is_archived]

    if query:
        selected = [note for note in selected if matches_query(note, query)]

    return sorted(selected, key=lambda note: note.updated_at, reverse=True)
