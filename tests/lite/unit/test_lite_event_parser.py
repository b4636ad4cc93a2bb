"""Unit tests for ics_lite.lite_event_parser."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from ics_lite.lite_datetime_utils import ZERO_INSTANT
from ics_lite.lite_event_parser import LiteEventBlockParser
from ics_lite.lite_exceptions import (
    LiteTimestampParseError,
    LiteUnmappedTimezoneError,
)
from ics_lite.lite_models import LiteCalendar

pytestmark = pytest.mark.unit

MADRID = ZoneInfo("Europe/Madrid")

FULL_EVENT = """BEGIN:VEVENT
DTSTART;TZID=Europe/Madrid:20140616T060000
DTEND;TZID=Europe/Madrid:20140616T070000
RRULE:FREQ=WEEKLY;BYDAY=MO
EXDATE;TZID=Europe/Madrid:20140623T060000
UID:abc@example.com
CLASS:PRIVATE
CREATED:20140515T075711Z
LAST-MODIFIED:20141125T074253Z
SEQUENCE:3
STATUS:CONFIRMED
SUMMARY:Planning
DESCRIPTION:Line one\\nLine two
LOCATION:Office
ORGANIZER;CN=Ops:mailto:ops@example.com
ATTENDEE;CN=Jane:mailto:jane@example.com
END:VEVENT
"""


class TestLiteEventBlockParser:
    """Tests for VEVENT block parsing."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.parser = LiteEventBlockParser()

    def test_parse_event_block_when_full_event_then_all_fields(self, make_calendar) -> None:
        """Every supported property lands on the event."""
        event = self.parser.parse_event_block(FULL_EVENT, make_calendar())

        assert event.id == "abc@example.com"
        assert event.event_class == "PRIVATE"
        assert event.sequence == 3
        assert event.status == "CONFIRMED"
        assert event.summary == "Planning"
        assert event.description == "Line one\\nLine two"
        assert event.location == "Office"
        assert event.start == datetime(2014, 6, 16, 6, 0, tzinfo=MADRID)
        assert event.end == datetime(2014, 6, 16, 7, 0, tzinfo=MADRID)
        assert event.start_timezone.key == "Europe/Madrid"
        assert event.created == datetime(2014, 5, 15, 7, 57, 11, tzinfo=UTC)
        assert event.modified == datetime(2014, 11, 25, 7, 42, 53, tzinfo=UTC)
        assert event.rrule == "FREQ=WEEKLY;BYDAY=MO"
        assert event.exdates == [datetime(2014, 6, 23, 6, 0, tzinfo=MADRID)]
        assert event.organizer.email == "ops@example.com"
        assert [a.name for a in event.attendees] == ["Jane"]
        assert event.recurrence_id is None
        assert event.is_expanded_instance is False
        assert event.whole_day_event is False

    def test_parse_event_block_when_no_dtend_then_end_of_start_day(self, make_calendar) -> None:
        """A missing DTEND becomes 23:59:59 of the start day."""
        block = "BEGIN:VEVENT\nDTSTART:20240115T100000Z\nUID:x\nEND:VEVENT\n"

        event = self.parser.parse_event_block(block, make_calendar())

        assert event.end == datetime(2024, 1, 15, 23, 59, 59, tzinfo=UTC)

    def test_parse_event_block_when_no_dtstart_then_zero_instant(self, make_calendar) -> None:
        """A missing DTSTART keeps the event with the zero instant as start."""
        block = "BEGIN:VEVENT\nUID:x\nSUMMARY:Cancelled\nEND:VEVENT\n"

        event = self.parser.parse_event_block(block, make_calendar())

        assert event.start == ZERO_INSTANT
        assert event.start == datetime(1, 1, 1, tzinfo=UTC)
        assert event.end == datetime(1, 1, 1, 23, 59, 59, tzinfo=UTC)
        assert event.summary == "Cancelled"

    def test_parse_event_block_when_malformed_dtend_then_raises(self, make_calendar) -> None:
        """Malformed DTEND aborts the parse."""
        block = "BEGIN:VEVENT\nDTSTART:20240115T100000Z\nDTEND:soon\nEND:VEVENT\n"

        with pytest.raises(LiteTimestampParseError):
            self.parser.parse_event_block(block, make_calendar())

    def test_parse_event_block_when_date_values_then_whole_day(self, make_calendar) -> None:
        """Midnight-to-midnight events are whole-day."""
        block = (
            "BEGIN:VEVENT\nDTSTART;VALUE=DATE:20160122\n"
            "DTEND;VALUE=DATE:20160123\nUID:x\nEND:VEVENT\n"
        )

        event = self.parser.parse_event_block(block, make_calendar())

        assert event.whole_day_event is True
        assert event.duration == timedelta(days=1)

    def test_parse_event_block_when_no_zone_then_calendar_default(self, make_calendar) -> None:
        """Floating events inherit the calendar's zone label."""
        block = "BEGIN:VEVENT\nDTSTART:20240115T100000\nUID:x\nEND:VEVENT\n"

        event = self.parser.parse_event_block(block, make_calendar(timezone=MADRID))

        assert event.start_timezone is MADRID
        assert event.end_timezone is MADRID
        assert event.start == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)

    def test_parse_event_block_when_no_zone_and_no_default_then_none(self, make_calendar) -> None:
        """Without a calendar zone the event stays floating."""
        block = "BEGIN:VEVENT\nDTSTART:20240115T100000Z\nUID:x\nEND:VEVENT\n"

        event = self.parser.parse_event_block(block, make_calendar())

        assert event.start_timezone is None

    def test_parse_event_block_when_convert_to_utc_then_utc_instants(self, make_calendar) -> None:
        """UTC normalization converts every instant but keeps zone labels."""
        event = self.parser.parse_event_block(FULL_EVENT, make_calendar(convert_dates_to_utc=True))

        assert event.start.tzinfo is UTC
        assert event.start == datetime(2014, 6, 16, 4, 0, tzinfo=UTC)
        assert event.exdates[0].tzinfo is UTC
        assert event.start_timezone.key == "Europe/Madrid"

    def test_parse_event_block_when_recurrence_id_then_override(self, make_calendar) -> None:
        """RECURRENCE-ID marks the event as an override."""
        block = (
            "BEGIN:VEVENT\nDTSTART:20160705T110000Z\n"
            "RECURRENCE-ID;TZID=Europe/Madrid:20160704T090000\nUID:x\nEND:VEVENT\n"
        )

        event = self.parser.parse_event_block(block, make_calendar())

        assert event.is_override is True
        assert event.recurrence_id == datetime(2016, 7, 4, 9, 0, tzinfo=MADRID)

    def test_parse_event_block_when_unmapped_zone_then_reported(
        self, make_calendar, diagnostics
    ) -> None:
        """Start and end diagnostics are reported separately."""
        block = (
            "BEGIN:VEVENT\nDTSTART;TZID=Mars Standard Time:20240303T090000\n"
            "DTEND;TZID=Mars Standard Time:20240303T100000\nUID:x\nEND:VEVENT\n"
        )

        event = self.parser.parse_event_block(block, make_calendar())

        assert event.start_timezone.key == "UTC"
        assert len(diagnostics.errors) == 2
        assert diagnostics.messages[0] == (
            "Unmapped timezone location 'Mars Standard Time' for iCal 'test.ics'. "
            "Falling back to UTC"
        )

    def test_parse_event_block_when_callback_escalates_then_raises(self) -> None:
        """A callback returning True aborts the parse."""
        calendar = LiteCalendar(url="x.ics", trace_error_func=lambda error: True)
        block = "BEGIN:VEVENT\nDTSTART;TZID=Mars Standard Time:20240303T090000\nEND:VEVENT\n"

        with pytest.raises(LiteUnmappedTimezoneError):
            self.parser.parse_event_block(block, calendar)
