"""Read-only text views over events and songs."""

from .calendar import CalendarOptions, render_calendar
from .events import EventListOptions, render_event_list
from .songs import render_song_detail, render_song_table

__all__ = [
    "CalendarOptions",
    "EventListOptions",
    "render_calendar",
    "render_event_list",
    "render_song_detail",
    "render_song_table",
]
