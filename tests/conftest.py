"""
Pytest configuration and shared fixtures
"""

from collections.abc import Sequence
from datetime import date

import pytest

from setlist_archive.config import Settings
from setlist_archive.errors import EventCreateError, SetlistCreateError, SongLookupError
from setlist_archive.models import (
    Event,
    EventWithSetlist,
    NewEvent,
    NewSetlistEntry,
    Song,
    SongAppearance,
    SongRef,
)
from setlist_archive.store import BaseStore


class FakeStore(BaseStore):
    """In-memory store that records every call and can be told to fail."""

    def __init__(self, songs: list[Song] | None = None):
        self.songs = list(songs or [])
        self.events: list[EventWithSetlist] = []
        self.appearances: dict[int, list[SongAppearance]] = {}

        self.created_events: list[NewEvent] = []
        self.title_lookups: list[list[str]] = []
        self.setlist_batches: list[list[NewSetlistEntry]] = []

        self.fail_event_create = False
        self.fail_song_lookup = False
        self.fail_setlist_create = False
        self._next_event_id = 100

    def find_songs_by_titles(self, titles: Sequence[str]) -> list[SongRef]:
        self.title_lookups.append(list(titles))
        if self.fail_song_lookup:
            raise SongLookupError("catalogue unavailable")
        return [SongRef(id=s.id, title=s.title) for s in self.songs if s.title in titles]

    def get_song(self, song_id: int) -> Song | None:
        return next((s for s in self.songs if s.id == song_id), None)

    def create_event(self, event: NewEvent) -> Event:
        self.created_events.append(event)
        if self.fail_event_create:
            raise EventCreateError("insert rejected")
        created = Event(id=self._next_event_id, **event.model_dump())
        self._next_event_id += 1
        return created

    def create_setlist_entries(self, entries: Sequence[NewSetlistEntry]) -> int:
        self.setlist_batches.append(list(entries))
        if self.fail_setlist_create:
            raise SetlistCreateError("insert rejected", event_id=entries[0].event_id)
        return len(entries)

    def list_events(self) -> list[EventWithSetlist]:
        return sorted(self.events, key=lambda e: e.date, reverse=True)

    def list_songs(self) -> list[Song]:
        return sorted(self.songs, key=lambda s: (s.release_date or date.max, s.id))

    def find_song_appearances(self, song_id: int) -> list[SongAppearance]:
        return self.appearances.get(song_id, [])


@pytest.fixture
def catalogue():
    """A small song catalogue"""
    return [
        Song(id=1, title="Yakusoku", release_date=date(2023, 4, 1), lyricist="A", composer="B"),
        Song(id=2, title="僕らの未来へ", release_date=date(2024, 1, 10)),
        Song(id=3, title="閃光Believer", release_date=date(2024, 8, 20), arranger="C"),
    ]


@pytest.fixture
def store(catalogue):
    return FakeStore(songs=catalogue)


@pytest.fixture
def settings():
    return Settings(supabase_url="https://example.supabase.co", supabase_key="test-key")


@pytest.fixture
def sample_text():
    """Pasted setlist in the format fans post it"""
    return """2025.6.8(日)
HYPE IDOL！× AGE FES!
@ 品川グランドホール

#しえるセットリスト
Yakusoku
We Can
"""
