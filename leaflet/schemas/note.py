"""
Note Schemas.

The Note domain model shared by the store, the cache, the repository and
every caller. Notes are immutable: edits produce a new Note via
``model_copy`` so that a Note handed out by the cache can never change
underneath a reader.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from leaflet.core.utils import utc_now

PREVIEW_LENGTH = 100
MAX_TAG_LENGTH = 20


class Note(BaseModel):
    """A single note."""

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Client-generated identifier, never reused",
    )
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note body")
    tags: tuple[str, ...] = Field(default=(), description="Tags in display order")
    is_important: bool = Field(default=False, description="Marked as important")
    is_archived: bool = Field(default=False, description="Moved to the archive")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last save timestamp")

    model_config = ConfigDict(frozen=True)

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _to_naive_utc(cls, value: datetime) -> datetime:
        """Timestamps are stored as naive UTC; aware values are converted."""
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Note":
        if self.created_at > self.updated_at:
            raise ValueError("created_at must not be later than updated_at")
        return self

    @classmethod
    def create(cls, **fields: Any) -> "Note":
        """Create a new, not yet saved note with both timestamps set to now."""
        now = utc_now()
        fields.setdefault("created_at", now)
        fields.setdefault("updated_at", now)
        return cls(**fields)

    @property
    def is_empty(self) -> bool:
        return not self.title.strip() and not self.content.strip()

    @property
    def preview(self) -> str:
        """Trimmed content, cut to PREVIEW_LENGTH characters with an ellipsis."""
        trimmed = self.content.strip()
        if len(trimmed) <= PREVIEW_LENGTH:
            return trimmed
        return trimmed[:PREVIEW_LENGTH] + "..."

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    def is_valid_tag(self, tag: str) -> bool:
        """A tag is valid when non-blank, short enough and not already present."""
        trimmed = tag.strip()
        return bool(trimmed) and len(trimmed) <= MAX_TAG_LENGTH and trimmed not in self.tags

    def with_tag(self, tag: str) -> "Note":
        """
        Return a copy with ``tag`` appended.

        Blank tags and tags already present are ignored and the same
        note is returned.
        """
        trimmed = tag.strip()
        if not trimmed or trimmed in self.tags:
            return self
        return self.model_copy(update={"tags": (*self.tags, trimmed)})

    def without_tag(self, tag: str) -> "Note":
        return self.model_copy(update={"tags": tuple(t for t in self.tags if t != tag)})

    def touched(self, **changes: Any) -> "Note":
        """
        Return an edited copy.

        Only the editable fields may change; ``id`` and both timestamps are
        kept, the store assigns a fresh ``updated_at`` when the copy is saved.

        Raises:
            ValueError: If a non-editable or unknown field is passed
        """
        editable = {"title", "content", "tags", "is_important", "is_archived"}
        unknown = set(changes) - editable
        if unknown:
            raise ValueError(f"Fields cannot be edited: {sorted(unknown)}")
        if "tags" in changes:
            changes["tags"] = tuple(changes["tags"])
        return self.model_copy(update=changes)
