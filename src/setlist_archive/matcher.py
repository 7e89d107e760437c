"""Song matcher: resolves setlist lines against the song catalogue.

Matching is by exact, case-sensitive title. Only the spoken-segment marker
("MC") is compared case-insensitively. Lines without a catalogue match become
OTHER entries labelled with the line and are reported as unmatched.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .models import ItemType, NewSetlistEntry, SongRef

MC_MARKER = "MC"


@dataclass
class MatchResult:
    """Result of matching setlist lines against the catalogue."""

    entries: list[NewSetlistEntry] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)


def is_mc(line: str) -> bool:
    """Check if a line is the spoken-segment marker."""
    return line.strip().casefold() == MC_MARKER.casefold()


def lookup_titles(lines: Iterable[str]) -> list[str]:
    """Distinct song titles to look up, in first-appearance order."""
    titles: list[str] = []
    seen: set[str] = set()
    for line in lines:
        if is_mc(line) or line in seen:
            continue
        seen.add(line)
        titles.append(line)
    return titles


def build_catalogue(songs: Iterable[SongRef], titles: Iterable[str]) -> dict[str, SongRef]:
    """Build a title lookup restricted to exactly the requested titles."""
    wanted = set(titles)
    return {song.title: song for song in songs if song.title in wanted}


def match_setlist(
    lines: list[str],
    catalogue: Mapping[str, SongRef],
    event_id: int,
) -> MatchResult:
    """Resolve ordered setlist lines into setlist entries.

    Args:
        lines: Setlist lines in performance order
        catalogue: Exact title -> song lookup
        event_id: Event the entries belong to

    Returns:
        MatchResult with one entry per line (order 1..N) and the unmatched lines
    """
    result = MatchResult()

    for order, line in enumerate(lines, 1):
        if is_mc(line):
            entry = NewSetlistEntry(event_id=event_id, order=order, item_type=ItemType.OTHER)
        elif line in catalogue:
            entry = NewSetlistEntry(
                event_id=event_id,
                order=order,
                item_type=ItemType.SONG,
                song_id=catalogue[line].id,
            )
        else:
            entry = NewSetlistEntry(
                event_id=event_id,
                order=order,
                item_type=ItemType.OTHER,
                notes=line,
            )
            result.unmatched.append(line)
        result.entries.append(entry)

    return result
