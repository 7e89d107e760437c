"""Song catalogue views: the song table and a song's performance history."""

from ..models import Song, SongAppearance
from .formatting import format_date, or_dash

COLUMNS = ("ID", "曲名", "作詞", "作曲", "編曲", "振付")


def render_song_table(songs: list[Song]) -> str:
    """Render the catalogue, one song per row, in the order given."""
    rows = [" | ".join(COLUMNS)]
    for song in songs:
        rows.append(
            " | ".join(
                [
                    str(song.id),
                    song.title,
                    or_dash(song.lyricist),
                    or_dash(song.composer),
                    or_dash(song.arranger),
                    or_dash(song.choreographer),
                ]
            )
        )
    return "\n".join(rows)


def render_song_detail(song: Song, appearances: list[SongAppearance]) -> str:
    """Render a song's attributes followed by every event it was performed at."""
    release = format_date(song.release_date, weekday=False) if song.release_date else "-"
    lines = [
        song.title,
        f"  発売日: {release}",
        f"  作詞: {or_dash(song.lyricist)}",
        f"  作曲: {or_dash(song.composer)}",
        f"  編曲: {or_dash(song.arranger)}",
        f"  振付: {or_dash(song.choreographer)}",
    ]
    if song.notes:
        lines.append(f"  備考: {song.notes}")

    lines.append(f"  披露回数: {len(appearances)}")
    if appearances:
        lines.append("")
        for appearance in appearances:
            event = appearance.event
            lines.append(
                f"  {format_date(event.date, weekday=False)}  {event.name} @{or_dash(event.location)}"
            )
    return "\n".join(lines)
