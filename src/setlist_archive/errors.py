"""Exception taxonomy for setlist-archive.

Parser and store failures raise these; the import pipeline catches them at its
boundary and reports a status instead of propagating.
"""


class SetlistArchiveError(Exception):
    """Base exception for setlist-archive."""


class DateParseError(SetlistArchiveError):
    """Raised when pasted text has no valid ``YYYY.M.D`` date line."""

    def __init__(self, message: str, line: str | None = None):
        self.line = line
        super().__init__(message)


class StoreError(SetlistArchiveError):
    """Base exception for datastore collaborator failures."""


class EventCreateError(StoreError):
    """Raised when the event write fails or returns no row."""


class SongLookupError(StoreError):
    """Raised when the song catalogue lookup fails."""


class SetlistCreateError(StoreError):
    """Raised when the bulk setlist write fails."""

    def __init__(self, message: str, event_id: int | None = None):
        self.event_id = event_id
        super().__init__(message)


class StoreReadError(StoreError):
    """Raised when a display read fails."""
