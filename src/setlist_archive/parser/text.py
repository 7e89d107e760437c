"""Freeform setlist text parser.

Turns pasted setlist text into a structured draft::

    2025.6.8(日)
    HYPE IDOL！× AGE FES!
    @ 品川グランドホール

    #しえるセットリスト
    Yakusoku
    We Can

The first ``YYYY.M.D`` line is the date, the lines up to the ``@`` line form the
event name, and every line after the first ``#`` line is a setlist entry.
"""

import re
from datetime import date

from ..errors import DateParseError
from ..models import ParsedSetlist

UNKNOWN_LOCATION = "場所不明"
UNTITLED_EVENT = "無題イベント"

DATE_LINE_RE = re.compile(r"^(\d{4})\.(\d{1,2})\.(\d{1,2})")
ORDINAL_PREFIX_RE = re.compile(r"^\d+\.?\s*")

LOCATION_PREFIX = "@"
SETLIST_MARKER = "#"


def _clean_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _find_index(lines: list[str], prefix: str) -> int | None:
    for i, line in enumerate(lines):
        if line.startswith(prefix):
            return i
    return None


def strip_ordinal(line: str) -> str:
    """Remove a leading ``1.`` / ``1 `` style ordinal from a setlist line."""
    return ORDINAL_PREFIX_RE.sub("", line.strip(), count=1).strip()


def split_setlist_lines(text: str) -> list[str]:
    """Split a block of setlist text into ordered titles.

    Ordinal prefixes are stripped and lines left empty are dropped.
    """
    lines = (strip_ordinal(line) for line in text.splitlines())
    return [line for line in lines if line]


def parse_date_line(line: str) -> date:
    """Parse the ``YYYY.M.D`` prefix of a line into a calendar date.

    Raises:
        DateParseError: If the prefix is missing or is not a real date
    """
    match = DATE_LINE_RE.match(line)
    if not match:
        raise DateParseError(f"Not a date line: {line!r}", line=line)

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise DateParseError(f"Invalid date {year}.{month}.{day}: {e}", line=line) from e


def _event_name(
    lines: list[str],
    date_idx: int,
    location_idx: int | None,
    marker_idx: int | None,
    default: str,
) -> str:
    if location_idx is not None and location_idx > date_idx:
        end = location_idx
        if marker_idx is not None and date_idx < marker_idx < location_idx:
            end = marker_idx
        between = lines[date_idx + 1 : end]
        if between:
            return " ".join(between)

    # Fall back to the line right after the date, unless it is a marker line
    next_idx = date_idx + 1
    if next_idx < len(lines) and not lines[next_idx].startswith((LOCATION_PREFIX, SETLIST_MARKER)):
        return lines[next_idx]
    return default


def parse_setlist_text(
    text: str,
    *,
    unknown_location: str = UNKNOWN_LOCATION,
    untitled_event: str = UNTITLED_EVENT,
) -> ParsedSetlist:
    """Parse pasted setlist text into a draft event and ordered setlist lines.

    Args:
        text: Raw multi-line text
        unknown_location: Location used when there is no ``@`` line
        untitled_event: Event name used when no name line can be found

    Returns:
        ParsedSetlist with the event fields and setlist lines

    Raises:
        DateParseError: If no line starts with a valid ``YYYY.M.D`` date
    """
    lines = _clean_lines(text)

    date_idx = next((i for i, line in enumerate(lines) if DATE_LINE_RE.match(line)), None)
    if date_idx is None:
        raise DateParseError("No line starting with a YYYY.M.D date was found")
    event_date = parse_date_line(lines[date_idx])

    location_idx = _find_index(lines, LOCATION_PREFIX)
    location = ""
    if location_idx is not None:
        location = lines[location_idx][len(LOCATION_PREFIX) :].strip()

    marker_idx = _find_index(lines, SETLIST_MARKER)
    setlist_lines: list[str] = []
    if marker_idx is not None:
        candidates = (strip_ordinal(line) for line in lines[marker_idx + 1 :])
        setlist_lines = [line for line in candidates if line]

    return ParsedSetlist(
        event_name=_event_name(lines, date_idx, location_idx, marker_idx, untitled_event),
        location=location or unknown_location,
        date=event_date,
        setlist_lines=setlist_lines,
    )
