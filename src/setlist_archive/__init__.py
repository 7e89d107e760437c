"""setlist-archive - Record live events, songs and setlists for a fan site.

Pasted setlist text is parsed into an event plus ordered setlist entries,
matched against the song catalogue by exact title, and stored in Supabase.
"""

from .cli import main

__all__ = ["main"]
