"""
Note Store.

Durable storage for notes. Handles all database operations for the
NoteRecord model and hands out immutable Note domain objects only.
"""

from datetime import timedelta

from sqlalchemy import Select, String, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leaflet.core.utils import utc_now
from leaflet.models.note import NoteRecord, NoteTagRecord
from leaflet.schemas.note import Note
from leaflet.stores.base import BaseStore

_TICK = timedelta(microseconds=1)


def _most_recent_first(stmt: Select) -> Select:
    """Order by updated_at descending with a deterministic tie-break."""
    return stmt.order_by(
        NoteRecord.updated_at.desc(),
        NoteRecord.created_at.desc(),
        NoteRecord.id.asc(),
    )


class NoteStore(BaseStore[NoteRecord]):
    """
    Record store for notes.

    Every method opens its own session, so a single NoteStore can be
    shared by concurrent callers.
    """

    model = NoteRecord

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        super().__init__(session_factory)

    async def fetch_all(self) -> list[Note]:
        """
        Get every note, most recently updated first.

        Returns:
            List of all notes

        Raises:
            StoreError: If the query fails
        """
        async def _query(session: AsyncSession) -> list[Note]:
            result = await session.execute(_most_recent_first(select(NoteRecord)))
            return [record.to_domain() for record in result.scalars().all()]

        return await self._read("fetch_all", _query)

    async def fetch_by_id(self, note_id: str) -> Note | None:
        """
        Get a single note by ID.

        Args:
            note_id: Note ID

        Returns:
            The note, or None if no note has that ID

        Raises:
            StoreError: If the query fails
        """
        async def _query(session: AsyncSession) -> Note | None:
            record = await self._get_record(session, note_id)
            return record.to_domain() if record is not None else None

        return await self._read("fetch_by_id", _query, note_id=note_id)

    async def save(self, note: Note) -> Note:
        """
        Insert or update a note by ID.

        The stored updated_at is set to the current time, bumped when
        needed so that it is strictly later than both the incoming note's
        and the stored record's updated_at and never earlier than
        created_at. An existing record keeps its original created_at.

        Args:
            note: Note to persist

        Returns:
            The persisted note, carrying the store-assigned updated_at

        Raises:
            StoreError: If the write fails
        """
        async def _upsert(session: AsyncSession) -> Note:
            record = await self._get_record(session, note.id)
            floor = note.updated_at

            if record is None:
                record = NoteRecord(id=note.id, created_at=note.created_at)
                session.add(record)
            else:
                floor = max(floor, record.updated_at)

            updated_at = max(utc_now(), record.created_at)
            if updated_at <= floor:
                updated_at = floor + _TICK

            record.apply(note)
            record.updated_at = updated_at
            await session.flush()
            return record.to_domain()

        saved = await self._write("save", _upsert, note_id=note.id)
        self._logger.debug(
            "Note saved",
            extra={"note_id": saved.id, "updated_at": saved.updated_at.isoformat()},
        )
        return saved

    async def delete(self, note_id: str) -> bool:
        """
        Delete every record with the given ID, along with its tags.

        Deleting an ID that does not exist is not an error.

        Args:
            note_id: Note ID to delete

        Returns:
            True if a record was removed

        Raises:
            StoreError: If the write fails
        """
        async def _delete(session: AsyncSession) -> bool:
            result = await session.execute(
                select(NoteRecord).where(NoteRecord.id == note_id)
            )
            records = result.scalars().all()
            for record in records:
                await session.delete(record)
            return bool(records)

        removed = await self._write("delete", _delete, note_id=note_id)
        self._logger.debug("Note deleted", extra={"note_id": note_id, "removed": removed})
        return removed

    async def search(self, query: str) -> list[Note]:
        """
        Search notes by title, content or tag (case-insensitive substring).

        Case is folded with str.casefold on both sides, so matching is
        case-insensitive for non-ASCII letters too.

        Wildcard characters in the query are matched literally. An empty
        query matches nothing.

        Args:
            query: Text to look for

        Returns:
            Matching notes, most recently updated first

        Raises:
            StoreError: If the query fails
        """
        if not query:
            return []

        needle = query.casefold()

        def _matches(column):
            return func.casefold(column, type_=String).contains(needle, autoescape=True)

        async def _query(session: AsyncSession) -> list[Note]:
            stmt = select(NoteRecord).where(
                or_(
                    _matches(NoteRecord.title),
                    _matches(NoteRecord.content),
                    NoteRecord.tag_rows.any(_matches(NoteTagRecord.name)),
                )
            )
            result = await session.execute(_most_recent_first(stmt))
            return [record.to_domain() for record in result.scalars().all()]

        return await self._read("search", _query, query=query)
