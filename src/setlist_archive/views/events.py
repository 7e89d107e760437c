"""Event list view: every event, newest first, with its setlist."""

from dataclasses import dataclass

from ..models import EventWithSetlist, ItemType, SetlistEntry
from .formatting import format_date

MC_LABEL = "MC"
MISSING_SONG_LABEL = "(unknown song)"
EMPTY_MESSAGE = "No events have been registered yet."


@dataclass
class EventListOptions:
    """View state for the event list.

    ``expanded`` holds the ids of events whose setlist is shown; None shows all.
    """

    expanded: set[int] | None = None
    show_notes: bool = True

    def is_expanded(self, event_id: int) -> bool:
        return self.expanded is None or event_id in self.expanded


def render_setlist(entries: list[SetlistEntry]) -> list[str]:
    """Render setlist entries; only songs are numbered."""
    lines = []
    number = 0
    for entry in entries:
        if entry.is_song:
            number += 1
            line = f"{number:>3}. {entry.song.title}"
            if entry.notes:
                line += f"  ({entry.notes})"
        elif entry.notes:
            line = f"     {entry.notes}"
        elif entry.item_type is ItemType.OTHER:
            line = f"     {MC_LABEL}"
        else:
            # Song entry whose song row no longer exists
            line = f"     {MISSING_SONG_LABEL}"
        lines.append(line)
    return lines


def render_event(event: EventWithSetlist, options: EventListOptions | None = None) -> str:
    options = options or EventListOptions()

    lines = [
        event.name,
        f"  日付: {format_date(event.date)}",
        f"  会場: {event.location}",
    ]
    if options.show_notes and event.notes:
        lines.append(f"  備考: {event.notes}")

    if event.has_setlist and options.is_expanded(event.id):
        lines.append("")
        lines.extend(render_setlist(event.setlist))

    return "\n".join(lines)


def render_event_list(events: list[EventWithSetlist], options: EventListOptions | None = None) -> str:
    """Render the full event list, in the order given."""
    if not events:
        return EMPTY_MESSAGE
    return "\n\n".join(render_event(e, options) for e in events)
