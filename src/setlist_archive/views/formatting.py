"""Shared formatting helpers for the text views."""

from datetime import date

WEEKDAYS_JA = "月火水木金土日"


def format_date(d: date, weekday: bool = True) -> str:
    """Format a calendar date the way the site displays it, e.g. ``2025年6月8日(日)``."""
    text = f"{d.year}年{d.month}月{d.day}日"
    if weekday:
        text += f"({WEEKDAYS_JA[d.weekday()]})"
    return text


def or_dash(value: str | None) -> str:
    return value or "-"
