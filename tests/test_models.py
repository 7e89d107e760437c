"""Tests for the pydantic models."""

from datetime import date

from setlist_archive.models import Event, EventSummary, NewEvent, ParsedSetlist


class TestDateFields:

    def test_event_date_is_a_calendar_date(self):
        assert NewEvent.model_fields["date"].annotation is date
        assert Event.model_fields["date"].annotation is date
        assert EventSummary.model_fields["date"].annotation is date

    def test_event_date_validated_from_iso_string(self):
        event = NewEvent.model_validate({"name": "Fes", "location": "Hall", "date": "2025-06-08"})
        assert event.date == date(2025, 6, 8)

    def test_parsed_setlist_date(self):
        parsed = ParsedSetlist(event_name="Fes", location="Hall", date="2025-06-08")
        assert parsed.date == date(2025, 6, 8)
        assert parsed.to_text().startswith("2025.6.8\nFes\n@ Hall")
