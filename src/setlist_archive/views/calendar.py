"""Calendar view over the event list.

One renderer with two layouts:
- grid: a month grid with a marker on days that have events, followed by the
  month's events
- agenda: the month's events grouped by day
"""

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from ..models import EventWithSetlist
from .formatting import format_date

CalendarLayout = Literal["grid", "agenda"]

WEEK_HEADER = ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]
EVENT_MARK = "*"
NO_EVENTS_MESSAGE = "No events this month."


@dataclass
class CalendarOptions:
    """View state for the calendar."""

    year: int
    month: int
    layout: CalendarLayout = "grid"
    today: date = field(default_factory=date.today)

    @classmethod
    def for_month(cls, value: str | None = None, **kwargs) -> "CalendarOptions":
        """Build options from a ``YYYY-MM`` string, defaulting to the current month."""
        today = kwargs.get("today") or date.today()
        if not value:
            return cls(year=today.year, month=today.month, **kwargs)
        year_str, _, month_str = value.partition("-")
        year, month = int(year_str), int(month_str)
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {value}")
        return cls(year=year, month=month, **kwargs)


def group_by_date(events: list[EventWithSetlist]) -> dict[date, list[EventWithSetlist]]:
    """Group events by calendar date."""
    by_date: dict[date, list[EventWithSetlist]] = defaultdict(list)
    for event in events:
        by_date[event.date].append(event)
    return dict(by_date)


def is_viewable(event: EventWithSetlist, today: date) -> bool:
    """An event's setlist can be opened once it has happened and has entries."""
    return event.has_setlist and event.date < today


def _event_line(event: EventWithSetlist, today: date) -> str:
    line = f"{event.name} @{event.location}"
    if is_viewable(event, today):
        line += f" [setlist: {len(event.setlist)}]"
    return line


def _render_events(by_date: dict[date, list[EventWithSetlist]], today: date) -> list[str]:
    lines = []
    for day in sorted(by_date):
        lines.append(format_date(day))
        lines.extend(f"  {_event_line(e, today)}" for e in by_date[day])
    return lines


def _render_grid(options: CalendarOptions, by_date: dict[date, list[EventWithSetlist]]) -> list[str]:
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    lines = [f"{options.year}年{options.month}月".center(28), " ".join(f"{h:>3}" for h in WEEK_HEADER)]

    for week in cal.monthdatescalendar(options.year, options.month):
        cells = []
        for day in week:
            if day.month != options.month:
                cells.append("   ")
                continue
            mark = EVENT_MARK if day in by_date else " "
            cells.append(f"{day.day:>2}{mark}")
        lines.append(" ".join(cells))
    return lines


def render_calendar(events: list[EventWithSetlist], options: CalendarOptions) -> str:
    """Render the events of one month using the configured layout."""
    month_events = [e for e in events if (e.date.year, e.date.month) == (options.year, options.month)]
    by_date = group_by_date(month_events)

    lines: list[str] = []
    if options.layout == "grid":
        lines.extend(_render_grid(options, by_date))
        lines.append("")
    else:
        lines.append(f"{options.year}年{options.month}月")

    if by_date:
        lines.extend(_render_events(by_date, options.today))
    else:
        lines.append(NO_EVENTS_MESSAGE)

    return "\n".join(lines)
