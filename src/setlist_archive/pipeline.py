"""Import pipeline for setlist-archive.

Coordinates the flow for one pasted setlist:
1. Parse the text into a draft event and setlist lines
2. Create the event
3. Look up the setlist titles in the song catalogue
4. Match lines to songs
5. Create the setlist rows in one batch

Every step completes before the next starts. The event is never rolled back:
if a later step fails the result reports the event as persisted with its
setlist missing.
"""

from datetime import date

from .config import Settings, get_settings
from .errors import DateParseError, EventCreateError, SetlistCreateError, SongLookupError
from .logging import get_logger
from .matcher import build_catalogue, lookup_titles, match_setlist
from .models import Event, ImportResult, ImportStatus, NewEvent, ParsedSetlist
from .parser import parse_setlist_text, split_setlist_lines
from .store import SetlistStore

logger = get_logger(__name__)

MESSAGES = {
    ImportStatus.SUCCESS: "Registered successfully.",
    ImportStatus.SUCCESS_WITH_UNMATCHED: "Registered, but some songs were not found in the catalogue.",
    ImportStatus.DATE_PARSE_FAILED: "Could not parse the event date.",
    ImportStatus.EVENT_CREATE_FAILED: "Failed to register the event.",
    ImportStatus.SONG_LOOKUP_FAILED: "Failed to fetch song information (the event was registered).",
    ImportStatus.SETLIST_CREATE_FAILED: "Failed to register the setlist (the event was registered).",
}
EVENT_ONLY_MESSAGE = "Event registered (no setlist)."


class SetlistImporter:
    """Import pipeline: turns pasted text or form input into event and setlist rows."""

    def __init__(self, store: SetlistStore, settings: Settings | None = None):
        """Initialize the importer.

        Args:
            store: Datastore the event and setlist rows are written to
            settings: Optional settings override
        """
        self.store = store
        self.settings = settings or get_settings()

    def parse(self, raw_text: str) -> ParsedSetlist:
        """Parse pasted text using the configured sentinels.

        Raises:
            DateParseError: If the text has no valid date line
        """
        return parse_setlist_text(
            raw_text,
            unknown_location=self.settings.unknown_location,
            untitled_event=self.settings.untitled_event,
        )

    def import_text(self, raw_text: str, notes: str | None = None) -> ImportResult:
        """Run the full pipeline on pasted setlist text.

        Args:
            raw_text: Pasted text (date line, name, @venue, # marker, titles)
            notes: Optional event notes

        Returns:
            ImportResult describing the outcome; failures are reported, not raised
        """
        logger.info("import_start", text_length=len(raw_text))

        try:
            parsed = self.parse(raw_text)
        except DateParseError as e:
            logger.warning("date_parse_failed", error=str(e), line=e.line)
            return ImportResult(
                status=ImportStatus.DATE_PARSE_FAILED,
                message=MESSAGES[ImportStatus.DATE_PARSE_FAILED],
            )

        logger.info(
            "text_parsed",
            event_name=parsed.event_name,
            location=parsed.location,
            date=parsed.date.isoformat(),
            lines=len(parsed.setlist_lines),
        )

        new_event = NewEvent(
            name=parsed.event_name,
            location=parsed.location,
            date=parsed.date,
            notes=notes,
        )
        result = self._create(new_event, parsed.setlist_lines)
        result.parsed = parsed
        return result

    def register(
        self,
        name: str,
        location: str,
        event_date: date,
        notes: str | None = None,
        setlist_text: str = "",
    ) -> ImportResult:
        """Register an event from form fields plus a one-title-per-line setlist.

        Args:
            name: Event name
            location: Venue
            event_date: Calendar date of the event
            notes: Optional event notes
            setlist_text: Setlist, one title per line (ordinals allowed)

        Returns:
            ImportResult describing the outcome
        """
        logger.info("register_start", event_name=name, date=event_date.isoformat())

        new_event = NewEvent(name=name, location=location, date=event_date, notes=notes or None)
        return self._create(new_event, split_setlist_lines(setlist_text))

    def _create(self, new_event: NewEvent, lines: list[str]) -> ImportResult:
        """Create the event, then its setlist rows, in that order."""
        try:
            event = self.store.create_event(new_event)
        except EventCreateError as e:
            logger.error("event_create_failed", error=str(e))
            return ImportResult(
                status=ImportStatus.EVENT_CREATE_FAILED,
                message=MESSAGES[ImportStatus.EVENT_CREATE_FAILED],
            )

        logger.info("event_created", event_id=event.id)

        if not lines:
            logger.info("import_complete", event_id=event.id, entries=0, unmatched=0)
            return ImportResult(status=ImportStatus.SUCCESS, message=EVENT_ONLY_MESSAGE, event=event)

        return self._create_setlist(event, lines)

    def _create_setlist(self, event: Event, lines: list[str]) -> ImportResult:
        titles = lookup_titles(lines)
        try:
            songs = self.store.find_songs_by_titles(titles) if titles else []
        except SongLookupError as e:
            logger.error("song_lookup_failed", error=str(e), event_id=event.id)
            return ImportResult(
                status=ImportStatus.SONG_LOOKUP_FAILED,
                message=MESSAGES[ImportStatus.SONG_LOOKUP_FAILED],
                event=event,
            )

        catalogue = build_catalogue(songs, titles)
        logger.info("songs_fetched", requested=len(titles), matched=len(catalogue))

        match = match_setlist(lines, catalogue, event.id)

        try:
            written = self.store.create_setlist_entries(match.entries)
        except SetlistCreateError as e:
            logger.error("setlist_create_failed", error=str(e), event_id=event.id)
            return ImportResult(
                status=ImportStatus.SETLIST_CREATE_FAILED,
                message=MESSAGES[ImportStatus.SETLIST_CREATE_FAILED],
                event=event,
                entries=match.entries,
                unmatched=match.unmatched,
            )

        logger.info("setlist_created", event_id=event.id, rows=written)

        status = ImportStatus.SUCCESS_WITH_UNMATCHED if match.unmatched else ImportStatus.SUCCESS
        if match.unmatched:
            logger.warning("unmatched_titles", event_id=event.id, titles=match.unmatched)

        logger.info(
            "import_complete",
            event_id=event.id,
            entries=len(match.entries),
            unmatched=len(match.unmatched),
        )
        return ImportResult(
            status=status,
            message=MESSAGES[status],
            event=event,
            entries=match.entries,
            unmatched=match.unmatched,
        )
