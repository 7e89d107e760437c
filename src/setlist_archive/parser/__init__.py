"""Parsers for pasted setlist text."""

from .text import (
    UNKNOWN_LOCATION,
    UNTITLED_EVENT,
    parse_date_line,
    parse_setlist_text,
    split_setlist_lines,
    strip_ordinal,
)

__all__ = [
    "UNKNOWN_LOCATION",
    "UNTITLED_EVENT",
    "parse_date_line",
    "parse_setlist_text",
    "split_setlist_lines",
    "strip_ordinal",
]
