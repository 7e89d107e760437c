"""Supabase datastore implementation.

Tables:
- events(id, event_name, location, date, notes)
- songs(id, title, release_date, lyricist, composer, arranger, choreographer, notes)
- setlists(id, event_id, song_id, item_type, order, notes)

Rows are decoded through the pydantic models; malformed rows are logged and
skipped rather than trusted.
"""

from collections.abc import Sequence
from typing import Any

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client, create_client

from ..errors import (
    EventCreateError,
    SetlistCreateError,
    SongLookupError,
    StoreReadError,
)
from ..logging import get_logger
from ..models import (
    Event,
    EventSummary,
    EventWithSetlist,
    ItemType,
    NewEvent,
    NewSetlistEntry,
    SetlistEntry,
    Song,
    SongAppearance,
    SongRef,
)
from . import BaseStore

logger = get_logger(__name__)

# Exceptions raised by supabase-py for API and transport failures
DATASTORE_ERRORS = (APIError, httpx.HTTPError)

SONG_COLUMNS = "id, title, release_date, lyricist, composer, arranger, choreographer, notes"
EVENT_WITH_SETLIST_COLUMNS = (
    "id, event_name, location, date, notes, "
    f"setlists(order, item_type, notes, songs({SONG_COLUMNS}))"
)
APPEARANCE_COLUMNS = "order, event_id(id, event_name, date, location)"

# Older rows were written with "mc" (or no type at all) for non-song entries
LEGACY_ITEM_TYPES = {"mc": ItemType.OTHER}


def _reject(kind: str, row: Any, error: Exception) -> None:
    logger.warning("row_rejected", kind=kind, row=row, error=str(error))


def decode_song(row: dict[str, Any]) -> Song | None:
    """Decode a songs row, or None if it is malformed."""
    try:
        return Song.model_validate(row)
    except ValidationError as e:
        _reject("song", row, e)
        return None


def decode_item_type(value: Any, has_song: bool) -> ItemType:
    """Normalize a stored item type to the canonical SONG / OTHER."""
    if value is None:
        return ItemType.SONG if has_song else ItemType.OTHER
    if isinstance(value, str):
        value = LEGACY_ITEM_TYPES.get(value.lower(), value.lower())
    return ItemType(value)


def decode_setlist_entry(row: dict[str, Any]) -> SetlistEntry | None:
    """Decode a nested setlists row (joined to songs), or None if it is malformed."""
    if not isinstance(row, dict):
        _reject("setlist_entry", row, ValueError("not an object"))
        return None
    try:
        song_row = row.get("songs")
        song = Song.model_validate(song_row) if song_row else None
        return SetlistEntry(
            order=row["order"],
            item_type=decode_item_type(row.get("item_type"), song is not None),
            notes=row.get("notes"),
            song=song,
        )
    except (KeyError, ValueError, TypeError) as e:
        _reject("setlist_entry", row, e)
        return None


def decode_event(row: dict[str, Any]) -> Event | None:
    """Decode an events row, or None if it is malformed."""
    try:
        return Event(
            id=row["id"],
            name=row["event_name"],
            location=row.get("location") or "",
            date=row["date"],
            notes=row.get("notes"),
        )
    except (KeyError, ValueError, TypeError) as e:
        _reject("event", row, e)
        return None


def decode_event_with_setlist(row: dict[str, Any]) -> EventWithSetlist | None:
    """Decode an events row with nested setlists, or None if it is malformed."""
    event = decode_event(row)
    if event is None:
        return None

    entries = [decode_setlist_entry(r) for r in row.get("setlists") or []]
    setlist = sorted((e for e in entries if e is not None), key=lambda e: e.order)
    return EventWithSetlist(**event.model_dump(), setlist=setlist)


def decode_appearance(row: dict[str, Any]) -> SongAppearance | None:
    """Decode a setlists row joined to its event, or None if it is malformed."""
    event_row = row.get("event_id")
    if not isinstance(event_row, dict):
        _reject("appearance", row, ValueError("missing joined event"))
        return None
    try:
        return SongAppearance(
            order=row.get("order"),
            event=EventSummary(
                id=event_row["id"],
                name=event_row["event_name"],
                date=event_row["date"],
                location=event_row.get("location"),
            ),
        )
    except (KeyError, ValueError, TypeError) as e:
        _reject("appearance", row, e)
        return None


def encode_event(event: NewEvent) -> dict[str, Any]:
    """Build the events insert payload.

    The date is written from its calendar fields so it never shifts across
    timezones.
    """
    payload: dict[str, Any] = {
        "event_name": event.name,
        "location": event.location,
        "date": event.date.isoformat(),
    }
    if event.notes:
        payload["notes"] = event.notes
    return payload


def encode_setlist_entry(entry: NewSetlistEntry) -> dict[str, Any]:
    """Build one setlists insert row."""
    return {
        "event_id": entry.event_id,
        "song_id": entry.song_id,
        "item_type": entry.item_type.value,
        "order": entry.order,
        "notes": entry.notes,
    }


class SupabaseStore(BaseStore):
    """Supabase (PostgREST) backed datastore."""

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        client: Client | None = None,
    ):
        """Initialize the store.

        Args:
            url: Supabase project URL
            key: Supabase API key
            client: Pre-built client, used instead of url/key when given
        """
        if client is None:
            if not url or not key:
                raise ValueError("Supabase url and key are required")
            client = create_client(url, key)
        self._client = client

    def find_songs_by_titles(self, titles: Sequence[str]) -> list[SongRef]:
        if not titles:
            return []

        try:
            response = self._client.table("songs").select("id, title").in_("title", list(titles)).execute()
        except DATASTORE_ERRORS as e:
            logger.error("song_lookup_failed", error=str(e), titles=len(titles))
            raise SongLookupError(f"Song lookup failed: {e}") from e

        songs = []
        for row in response.data or []:
            try:
                songs.append(SongRef.model_validate(row))
            except ValidationError as e:
                _reject("song_ref", row, e)

        logger.debug("songs_looked_up", requested=len(titles), found=len(songs))
        return songs

    def get_song(self, song_id: int) -> Song | None:
        try:
            response = self._client.table("songs").select(SONG_COLUMNS).eq("id", song_id).execute()
        except DATASTORE_ERRORS as e:
            logger.error("song_fetch_failed", error=str(e), song_id=song_id)
            raise StoreReadError(f"Failed to fetch song {song_id}: {e}") from e

        rows = response.data or []
        if not rows:
            return None
        return decode_song(rows[0])

    def create_event(self, event: NewEvent) -> Event:
        try:
            response = self._client.table("events").insert(encode_event(event)).execute()
        except DATASTORE_ERRORS as e:
            logger.error("event_create_failed", error=str(e), event_name=event.name)
            raise EventCreateError(f"Event creation failed: {e}") from e

        rows = response.data or []
        created = decode_event(rows[0]) if rows else None
        if created is None:
            logger.error("event_create_failed", error="no row returned", event_name=event.name)
            raise EventCreateError("Event creation returned no row")

        logger.info("event_row_created", event_id=created.id)
        return created

    def create_setlist_entries(self, entries: Sequence[NewSetlistEntry]) -> int:
        if not entries:
            return 0

        rows = [encode_setlist_entry(e) for e in entries]
        try:
            self._client.table("setlists").insert(rows).execute()
        except DATASTORE_ERRORS as e:
            event_id = entries[0].event_id
            logger.error("setlist_create_failed", error=str(e), event_id=event_id, rows=len(rows))
            raise SetlistCreateError(f"Setlist creation failed: {e}", event_id=event_id) from e

        return len(rows)

    def list_events(self) -> list[EventWithSetlist]:
        try:
            response = (
                self._client.table("events")
                .select(EVENT_WITH_SETLIST_COLUMNS)
                .order("date", desc=True)
                .execute()
            )
        except DATASTORE_ERRORS as e:
            logger.error("events_fetch_failed", error=str(e))
            raise StoreReadError(f"Failed to fetch events: {e}") from e

        events = [decode_event_with_setlist(row) for row in response.data or []]
        decoded = [e for e in events if e is not None]
        # Keep the datastore ordering contract even if the response was unordered
        decoded.sort(key=lambda e: e.date, reverse=True)
        return decoded

    def list_songs(self) -> list[Song]:
        try:
            response = (
                self._client.table("songs")
                .select(SONG_COLUMNS)
                .order("release_date")
                .order("id")
                .execute()
            )
        except DATASTORE_ERRORS as e:
            logger.error("songs_fetch_failed", error=str(e))
            raise StoreReadError(f"Failed to fetch songs: {e}") from e

        songs = [decode_song(row) for row in response.data or []]
        return [s for s in songs if s is not None]

    def find_song_appearances(self, song_id: int) -> list[SongAppearance]:
        try:
            response = (
                self._client.table("setlists")
                .select(APPEARANCE_COLUMNS)
                .eq("song_id", song_id)
                .execute()
            )
        except DATASTORE_ERRORS as e:
            logger.error("appearances_fetch_failed", error=str(e), song_id=song_id)
            raise StoreReadError(f"Failed to fetch appearances of song {song_id}: {e}") from e

        appearances = [decode_appearance(row) for row in response.data or []]
        decoded = [a for a in appearances if a is not None]
        decoded.sort(key=lambda a: (a.event.date, a.event.id))
        return decoded
