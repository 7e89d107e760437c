"""Tests for the Supabase store: row decoding, payloads and error translation."""

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError

from setlist_archive.errors import (
    EventCreateError,
    SetlistCreateError,
    SongLookupError,
    StoreReadError,
)
from setlist_archive.models import ItemType, NewEvent, NewSetlistEntry
from setlist_archive.store.supabase_store import (
    SupabaseStore,
    decode_event_with_setlist,
    decode_item_type,
    encode_event,
)


def make_client(data=None, error: Exception | None = None):
    """A supabase client whose query builder chain returns ``data``."""
    query = MagicMock()
    for method in ("select", "insert", "in_", "eq", "order"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = SimpleNamespace(data=data)

    client = MagicMock()
    client.table.return_value = query
    return client, query


def api_error():
    return APIError({"message": "boom", "code": "500", "hint": None, "details": None})


EVENT_ROW = {
    "id": 10,
    "event_name": "HYPE IDOL！× AGE FES!",
    "location": "品川グランドホール",
    "date": "2025-06-08",
    "notes": None,
    "setlists": [
        {"order": 2, "item_type": "mc", "notes": None, "songs": None},
        {"order": 1, "item_type": "song", "notes": None, "songs": {"id": 1, "title": "Yakusoku"}},
        {"order": 3, "item_type": "other", "notes": "We Can", "songs": None},
    ],
}


class TestDecoding:

    def test_event_with_setlist_sorted_by_order(self):
        event = decode_event_with_setlist(EVENT_ROW)
        assert event.name == "HYPE IDOL！× AGE FES!"
        assert event.date == date(2025, 6, 8)
        assert [e.order for e in event.setlist] == [1, 2, 3]
        assert event.setlist[0].song.title == "Yakusoku"

    def test_legacy_mc_becomes_other(self):
        event = decode_event_with_setlist(EVENT_ROW)
        assert event.setlist[1].item_type is ItemType.OTHER

    def test_missing_item_type_inferred(self):
        assert decode_item_type(None, has_song=True) is ItemType.SONG
        assert decode_item_type(None, has_song=False) is ItemType.OTHER

    def test_malformed_entry_dropped(self):
        row = dict(EVENT_ROW, setlists=[{"item_type": "song"}, {"order": 1, "item_type": "bogus"}])
        assert decode_event_with_setlist(row).setlist == []

    def test_non_object_entry_dropped(self):
        row = dict(EVENT_ROW, setlists=["oops", None, EVENT_ROW["setlists"][1]])
        assert [e.order for e in decode_event_with_setlist(row).setlist] == [1]

    def test_list_events_skips_non_object_entries(self):
        client, _ = make_client([dict(EVENT_ROW, setlists=[42])])
        events = SupabaseStore(client=client).list_events()
        assert events[0].setlist == []

    def test_malformed_event_rejected(self):
        assert decode_event_with_setlist({"id": 1, "event_name": "x", "date": "not a date"}) is None

    def test_encode_event_uses_calendar_date(self):
        payload = encode_event(NewEvent(name="Fes", location="Hall", date=date(2025, 6, 8)))
        assert payload == {"event_name": "Fes", "location": "Hall", "date": "2025-06-08"}


class TestFindSongsByTitles:

    def test_exact_in_lookup(self):
        client, query = make_client([{"id": 1, "title": "Yakusoku"}])
        songs = SupabaseStore(client=client).find_songs_by_titles(["Yakusoku", "We Can"])

        client.table.assert_called_with("songs")
        query.in_.assert_called_with("title", ["Yakusoku", "We Can"])
        assert [(s.id, s.title) for s in songs] == [(1, "Yakusoku")]

    def test_empty_titles_skip_request(self):
        client, _ = make_client([])
        assert SupabaseStore(client=client).find_songs_by_titles([]) == []
        client.table.assert_not_called()

    def test_failure(self):
        client, _ = make_client(error=api_error())
        with pytest.raises(SongLookupError):
            SupabaseStore(client=client).find_songs_by_titles(["Yakusoku"])


class TestCreateEvent:

    def test_returns_created_row(self):
        client, query = make_client(
            [{"id": 42, "event_name": "Fes", "location": "Hall", "date": "2025-06-08", "notes": "memo"}]
        )
        event = SupabaseStore(client=client).create_event(
            NewEvent(name="Fes", location="Hall", date=date(2025, 6, 8), notes="memo")
        )
        assert event.id == 42
        query.insert.assert_called_with(
            {"event_name": "Fes", "location": "Hall", "date": "2025-06-08", "notes": "memo"}
        )

    def test_no_row_returned(self):
        client, _ = make_client([])
        with pytest.raises(EventCreateError):
            SupabaseStore(client=client).create_event(
                NewEvent(name="Fes", location="Hall", date=date(2025, 6, 8))
            )

    def test_transport_failure(self):
        client, _ = make_client(error=httpx.ConnectError("unreachable"))
        with pytest.raises(EventCreateError):
            SupabaseStore(client=client).create_event(
                NewEvent(name="Fes", location="Hall", date=date(2025, 6, 8))
            )


class TestCreateSetlistEntries:

    ENTRIES = [
        NewSetlistEntry(event_id=42, order=1, item_type=ItemType.SONG, song_id=1),
        NewSetlistEntry(event_id=42, order=2, item_type=ItemType.OTHER, notes="We Can"),
    ]

    def test_single_batch_insert(self):
        client, query = make_client([])
        written = SupabaseStore(client=client).create_setlist_entries(self.ENTRIES)

        assert written == 2
        query.insert.assert_called_once_with(
            [
                {"event_id": 42, "song_id": 1, "item_type": "song", "order": 1, "notes": None},
                {"event_id": 42, "song_id": None, "item_type": "other", "order": 2, "notes": "We Can"},
            ]
        )

    def test_failure_carries_event_id(self):
        client, _ = make_client(error=api_error())
        with pytest.raises(SetlistCreateError) as exc:
            SupabaseStore(client=client).create_setlist_entries(self.ENTRIES)
        assert exc.value.event_id == 42


class TestReads:

    def test_list_events_newest_first(self):
        older = dict(EVENT_ROW, id=1, date="2024-01-01", setlists=[])
        client, query = make_client([older, EVENT_ROW])
        events = SupabaseStore(client=client).list_events()

        query.order.assert_called_with("date", desc=True)
        assert [e.id for e in events] == [10, 1]

    def test_list_songs_skips_bad_rows(self):
        client, _ = make_client([{"id": 1, "title": "Yakusoku", "release_date": "2023-04-01"}, {"title": "x"}])
        songs = SupabaseStore(client=client).list_songs()
        assert [s.id for s in songs] == [1]

    def test_get_song_missing(self):
        client, _ = make_client([])
        assert SupabaseStore(client=client).get_song(99) is None

    def test_appearances_sorted_by_date(self):
        client, query = make_client(
            [
                {"order": 3, "event_id": {"id": 2, "event_name": "B", "date": "2025-02-01", "location": "X"}},
                {"order": 1, "event_id": {"id": 1, "event_name": "A", "date": "2024-05-01", "location": None}},
                {"order": 1, "event_id": None},
            ]
        )
        appearances = SupabaseStore(client=client).find_song_appearances(1)

        query.eq.assert_called_with("song_id", 1)
        assert [a.event.name for a in appearances] == ["A", "B"]

    def test_read_failure(self):
        client, _ = make_client(error=api_error())
        with pytest.raises(StoreReadError):
            SupabaseStore(client=client).list_events()


def test_requires_credentials():
    with pytest.raises(ValueError):
        SupabaseStore()
