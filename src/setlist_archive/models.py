"""Pydantic data models for setlist-archive.

Every row crossing the datastore boundary is decoded into one of these schemas.
"""

import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ItemType(str, Enum):
    """Kind of a setlist entry."""

    SONG = "song"
    OTHER = "other"


class SongRef(BaseModel):
    """Minimal song row returned by the exact title lookup."""

    id: int = Field(description="Song identifier")
    title: str = Field(description="Song title, the unique matching key")


class Song(BaseModel):
    """A song in the catalogue."""

    id: int = Field(description="Song identifier")
    title: str = Field(description="Song title, the unique matching key")
    release_date: datetime.date | None = Field(default=None, description="Release date")
    lyricist: str | None = Field(default=None, description="Lyricist credit")
    composer: str | None = Field(default=None, description="Composer credit")
    arranger: str | None = Field(default=None, description="Arranger credit")
    choreographer: str | None = Field(default=None, description="Choreographer credit")
    notes: str | None = Field(default=None, description="Free-text notes")


class NewEvent(BaseModel):
    """Write payload for a single event."""

    name: str = Field(description="Event name")
    location: str = Field(description="Venue")
    date: datetime.date = Field(description="Calendar date of the event (no time component)")
    notes: str | None = Field(default=None, description="Optional notes")


class Event(NewEvent):
    """A persisted event."""

    id: int = Field(description="Event identifier")


class NewSetlistEntry(BaseModel):
    """Write payload for one setlist row.

    ``song_id`` is present iff ``item_type`` is SONG. For OTHER entries ``notes``
    holds the display label (absent for MC segments).
    """

    event_id: int = Field(description="Owning event identifier")
    order: int = Field(ge=1, description="1-based position within the event")
    item_type: ItemType = Field(description="song or other")
    song_id: int | None = Field(default=None, description="Referenced song, for song entries")
    notes: str | None = Field(default=None, description="Free-text note or label")

    @property
    def label(self) -> str | None:
        """Display label of an OTHER entry."""
        if self.item_type is ItemType.OTHER:
            return self.notes
        return None


class SetlistEntry(BaseModel):
    """A persisted setlist row joined to its song, as read for display."""

    order: int = Field(ge=1, description="1-based position within the event")
    item_type: ItemType = Field(description="song or other")
    notes: str | None = Field(default=None, description="Free-text note or label")
    song: Song | None = Field(default=None, description="Referenced song, if any")

    @property
    def is_song(self) -> bool:
        return self.item_type is ItemType.SONG and self.song is not None


class EventWithSetlist(Event):
    """An event with its ordered setlist entries."""

    setlist: list[SetlistEntry] = Field(
        default_factory=list, description="Entries sorted by order ascending"
    )

    @property
    def has_setlist(self) -> bool:
        return bool(self.setlist)


class EventSummary(BaseModel):
    """Event columns embedded in a reverse song lookup."""

    id: int
    name: str
    date: datetime.date
    location: str | None = None


class SongAppearance(BaseModel):
    """A setlist entry referencing a song, joined to its owning event."""

    order: int | None = Field(default=None, description="Position of the song in the setlist")
    event: EventSummary = Field(description="The event the song was performed at")


class ParsedSetlist(BaseModel):
    """Structured draft produced by the freeform text parser."""

    event_name: str = Field(description="Event name")
    location: str = Field(description="Venue, or the unknown-location sentinel")
    date: datetime.date = Field(description="Calendar date of the event")
    setlist_lines: list[str] = Field(
        default_factory=list, description="Setlist lines in performance order"
    )

    def to_text(self) -> str:
        """Render the draft back into the pasted setlist format."""
        lines = [
            f"{self.date.year}.{self.date.month}.{self.date.day}",
            self.event_name,
            f"@ {self.location}",
            "",
            "#setlist",
        ]
        lines.extend(f"{i}. {line}" for i, line in enumerate(self.setlist_lines, 1))
        return "\n".join(lines)


class ImportStatus(str, Enum):
    """Outcome of an import or registration attempt."""

    SUCCESS = "success"
    SUCCESS_WITH_UNMATCHED = "success_with_unmatched"
    DATE_PARSE_FAILED = "date_parse_failed"
    EVENT_CREATE_FAILED = "event_create_failed"
    SONG_LOOKUP_FAILED = "song_lookup_failed"
    SETLIST_CREATE_FAILED = "setlist_create_failed"


class ImportResult(BaseModel):
    """Final output of the import pipeline."""

    status: ImportStatus = Field(description="Outcome of the attempt")
    message: str = Field(description="Human-readable status message")

    parsed: ParsedSetlist | None = Field(default=None, description="Parsed draft, for text imports")
    event: Event | None = Field(default=None, description="The created event, if it was persisted")
    entries: list[NewSetlistEntry] = Field(
        default_factory=list, description="Setlist rows written (or attempted)"
    )
    unmatched: list[str] = Field(
        default_factory=list, description="Setlist lines with no catalogue match"
    )

    @property
    def ok(self) -> bool:
        return self.status in (ImportStatus.SUCCESS, ImportStatus.SUCCESS_WITH_UNMATCHED)

    @property
    def event_persisted(self) -> bool:
        return self.event is not None
