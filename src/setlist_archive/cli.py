"""setlist-archive CLI using Typer.

Commands:
- parse: Preview how pasted setlist text is parsed (no datastore access)
- import: Register an event and its setlist from pasted text
- register: Register an event from explicit fields plus a setlist
- events / calendar / songs / song: Read-only views
"""

from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from .config import Settings, get_settings
from .errors import DateParseError, StoreReadError
from .logging import configure_logging, get_logger
from .models import ImportResult, ParsedSetlist
from .parser import parse_setlist_text
from .pipeline import SetlistImporter
from .store import SetlistStore
from .store.supabase_store import SupabaseStore
from .views import (
    CalendarOptions,
    EventListOptions,
    render_calendar,
    render_event_list,
    render_song_detail,
    render_song_table,
)

app = typer.Typer(
    name="setlist-archive",
    help="Record live events, songs and setlists, and browse them.",
    add_completion=False,
)

# Partial outcome: the event exists but its setlist could not be written
EXIT_PARTIAL = 3


def get_store(settings: Settings) -> SetlistStore:
    """Build the datastore from settings."""
    if not settings.supabase_url or not settings.supabase_key:
        typer.echo("Error: SUPABASE_URL and SUPABASE_KEY must be set", err=True)
        raise typer.Exit(1)
    return SupabaseStore(settings.supabase_url, settings.supabase_key)


def read_text(source: str) -> str:
    """Read pasted text from a file, or from stdin when source is ``-``."""
    if source == "-":
        return typer.get_text_stream("stdin").read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise typer.BadParameter(f"Cannot read {source}: {e}")


def parse_date(value: str) -> date:
    """Parse a date string in YYYY-MM-DD format."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format: {value}. Use YYYY-MM-DD.")


def echo_draft(parsed: ParsedSetlist) -> None:
    typer.echo(f"Event: {parsed.event_name}")
    typer.echo(f"Date: {parsed.date.isoformat()}")
    typer.echo(f"Location: {parsed.location}")
    typer.echo(f"Setlist ({len(parsed.setlist_lines)}):")
    for i, line in enumerate(parsed.setlist_lines, 1):
        typer.echo(f"  {i}. {line}")


def echo_result(result: ImportResult) -> None:
    """Print an import result and exit with a status-dependent code."""
    typer.echo(result.message, err=not result.event_persisted)

    if result.event:
        event = result.event
        typer.echo(f"Event #{event.id}: {event.name} ({event.date.isoformat()}) @ {event.location}")
        typer.echo(f"Setlist entries: {len(result.entries)}")

    if result.unmatched:
        typer.echo()
        typer.echo("Songs not found in the catalogue:")
        for title in result.unmatched:
            typer.echo(f"  - {title}")

    if result.ok:
        return
    raise typer.Exit(EXIT_PARTIAL if result.event_persisted else 1)


@app.callback()
def main_callback(
    log_level: Annotated[str, typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")] = "WARNING",
    log_format: Annotated[str, typer.Option("--log-format", help="Log format (console, json)")] = "console",
) -> None:
    """Record live events, songs and setlists, and browse them."""
    configure_logging(level=log_level, format="json" if log_format == "json" else "console")


@app.command()
def parse(
    source: Annotated[str, typer.Argument(help="File with the pasted setlist, or - for stdin")] = "-",
) -> None:
    """Show how pasted setlist text would be parsed, without saving anything."""
    settings = get_settings()
    try:
        text = read_text(source)
    except typer.BadParameter as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    try:
        parsed = parse_setlist_text(
            text,
            unknown_location=settings.unknown_location,
            untitled_event=settings.untitled_event,
        )
    except DateParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    echo_draft(parsed)


@app.command("import")
def import_setlist(
    source: Annotated[str, typer.Argument(help="File with the pasted setlist, or - for stdin")] = "-",
    notes: Annotated[Optional[str], typer.Option("--notes", help="Event notes")] = None,
) -> None:
    """Register an event and its setlist from pasted text.

    Example:
        setlist-archive import setlist.txt

    where setlist.txt looks like:

        2025.6.8(日)
        HYPE IDOL！× AGE FES!
        @ 品川グランドホール

        #しえるセットリスト
        Yakusoku
        We Can
    """
    settings = get_settings()
    try:
        text = read_text(source)
    except typer.BadParameter as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    importer = SetlistImporter(store=get_store(settings), settings=settings)
    echo_result(importer.import_text(text, notes=notes))


@app.command()
def register(
    name: Annotated[str, typer.Option("--name", "-n", help="Event name")],
    location: Annotated[str, typer.Option("--location", "-l", help="Venue")],
    event_date: Annotated[str, typer.Option("--date", "-d", help="Event date (YYYY-MM-DD)")],
    notes: Annotated[Optional[str], typer.Option("--notes", help="Event notes")] = None,
    setlist: Annotated[Optional[str], typer.Option("--setlist", "-s", help="File with one title per line, or -")] = None,
) -> None:
    """Register an event from explicit fields and an optional setlist."""
    settings = get_settings()
    try:
        parsed_date = parse_date(event_date)
        setlist_text = read_text(setlist) if setlist else ""
    except typer.BadParameter as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    importer = SetlistImporter(store=get_store(settings), settings=settings)
    echo_result(
        importer.register(
            name=name,
            location=location,
            event_date=parsed_date,
            notes=notes,
            setlist_text=setlist_text,
        )
    )


@app.command()
def events(
    collapse: Annotated[bool, typer.Option("--collapse", help="Hide setlists")] = False,
) -> None:
    """List all events, newest first, with their setlists."""
    store = get_store(get_settings())
    try:
        all_events = store.list_events()
    except StoreReadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    options = EventListOptions(expanded=set() if collapse else None)
    typer.echo(render_event_list(all_events, options))


@app.command()
def calendar(
    month: Annotated[Optional[str], typer.Option("--month", "-m", help="Month to show (YYYY-MM)")] = None,
    layout: Annotated[str, typer.Option("--layout", help="grid or agenda")] = "grid",
) -> None:
    """Show the events of one month as a calendar."""
    if layout not in ("grid", "agenda"):
        typer.echo(f"Error: Unknown layout: {layout}. Use grid or agenda.", err=True)
        raise typer.Exit(1)
    try:
        options = CalendarOptions.for_month(month, layout=layout)
    except ValueError:
        typer.echo(f"Error: Invalid month: {month}. Use YYYY-MM.", err=True)
        raise typer.Exit(1)

    store = get_store(get_settings())
    try:
        all_events = store.list_events()
    except StoreReadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(render_calendar(all_events, options))


@app.command()
def songs() -> None:
    """List the song catalogue by release date."""
    store = get_store(get_settings())
    try:
        catalogue = store.list_songs()
    except StoreReadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(render_song_table(catalogue))


@app.command()
def song(
    song_id: Annotated[int, typer.Argument(help="Song ID (see the songs command)")],
) -> None:
    """Show a song's details and every event it was performed at."""
    logger = get_logger(__name__)
    store = get_store(get_settings())
    try:
        found = store.get_song(song_id)
        appearances = store.find_song_appearances(song_id) if found else []
    except StoreReadError as e:
        logger.error("song_view_failed", song_id=song_id, error=str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if found is None:
        typer.echo(f"No song with ID {song_id}", err=True)
        raise typer.Exit(1)

    typer.echo(render_song_detail(found, appearances))


def main() -> None:
    """CLI entry point."""
    app()
