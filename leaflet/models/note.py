"""
Note Models.

Tables backing the record store: one row per note in ``notes`` and one
row per tag in ``note_tags``, kept in the note's tag order by ``position``.
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leaflet.models.base import Base, TimestampMixin, UUIDMixin
from leaflet.schemas.note import Note


class NoteTagRecord(Base):
    """A single tag attached to a note."""

    __tablename__ = "note_tags"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<NoteTagRecord(note_id={self.note_id}, name={self.name!r})>"


class NoteRecord(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    Persisted form of the Note domain model. Tags live in their own table
    so that search can match individual tags rather than a serialized list.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    is_important: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    is_archived: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    tag_rows: Mapped[list[NoteTagRecord]] = relationship(
        order_by=NoteTagRecord.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, title={self.title!r})>"

    @property
    def tags(self) -> list[str]:
        return [row.name for row in self.tag_rows]

    def apply(self, note: Note) -> None:
        """Copy the editable fields of a domain note onto this record."""
        self.title = note.title
        self.content = note.content
        self.is_important = note.is_important
        self.is_archived = note.is_archived
        self.tag_rows = [
            NoteTagRecord(position=position, name=name)
            for position, name in enumerate(note.tags)
        ]

    def to_domain(self) -> Note:
        """Convert this record to an immutable domain note."""
        return Note(
            id=self.id,
            title=self.title,
            content=self.content,
            tags=self.tags,
            is_important=self.is_important,
            is_archived=self.is_archived,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
