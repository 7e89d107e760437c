"""Datastore interface and base classes.

The import pipeline and the views only talk to the datastore through the
SetlistStore protocol, so the backing service can be swapped (or faked in tests).
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ..models import (
    Event,
    EventWithSetlist,
    NewEvent,
    NewSetlistEntry,
    Song,
    SongAppearance,
    SongRef,
)


@runtime_checkable
class SetlistStore(Protocol):
    """Protocol for the events / songs / setlists datastore."""

    def find_songs_by_titles(self, titles: Sequence[str]) -> list[SongRef]:
        """Get songs whose title exactly equals one of the given titles.

        Raises:
            SongLookupError: If the catalogue read fails
        """
        ...

    def get_song(self, song_id: int) -> Song | None:
        """Get a song with all its attributes, or None if it doesn't exist."""
        ...

    def create_event(self, event: NewEvent) -> Event:
        """Create an event and return the persisted row.

        Raises:
            EventCreateError: If the write fails or returns no row
        """
        ...

    def create_setlist_entries(self, entries: Sequence[NewSetlistEntry]) -> int:
        """Create all setlist rows in one batch. Returns the number of rows written.

        Raises:
            SetlistCreateError: If the batch write fails
        """
        ...

    def list_events(self) -> list[EventWithSetlist]:
        """Get all events, newest first, each with its setlist sorted by order."""
        ...

    def list_songs(self) -> list[Song]:
        """Get all songs sorted by release date, then id."""
        ...

    def find_song_appearances(self, song_id: int) -> list[SongAppearance]:
        """Get every setlist entry referencing a song, joined to its event."""
        ...


class BaseStore(ABC):
    """Abstract base class for datastores."""

    @abstractmethod
    def find_songs_by_titles(self, titles: Sequence[str]) -> list[SongRef]:
        pass

    @abstractmethod
    def get_song(self, song_id: int) -> Song | None:
        pass

    @abstractmethod
    def create_event(self, event: NewEvent) -> Event:
        pass

    @abstractmethod
    def create_setlist_entries(self, entries: Sequence[NewSetlistEntry]) -> int:
        pass

    @abstractmethod
    def list_events(self) -> list[EventWithSetlist]:
        pass

    @abstractmethod
    def list_songs(self) -> list[Song]:
        pass

    @abstractmethod
    def find_song_appearances(self, song_id: int) -> list[SongAppearance]:
        pass
