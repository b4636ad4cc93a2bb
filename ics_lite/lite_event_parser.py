"""Event block parsing for ICS calendar processing.

This module turns the raw text of one VEVENT block into a LiteCalendarEvent.
Recurrence expansion is handled separately by lite_rrule_expander.
"""

import logging
from datetime import UTC, datetime
from typing import Optional

from .lite_attendee_parser import LiteAttendeeParser
from .lite_datetime_utils import ZERO_INSTANT, LiteDateTimeParser, parse_utc_timestamp
from .lite_exceptions import LiteTimezoneError
from .lite_field_extractor import LiteFieldExtractor
from .lite_models import LiteCalendar, LiteCalendarEvent

logger = logging.getLogger(__name__)


def _is_midnight(dt: datetime) -> bool:
    return dt.hour == 0 and dt.minute == 0 and dt.second == 0


def _end_of_day(dt: datetime) -> datetime:
    """23:59:59 of ``dt``'s calendar day, keeping its tzinfo."""
    return dt.replace(hour=23, minute=59, second=59, microsecond=0)


class LiteEventBlockParser:
    """Parser for raw VEVENT blocks into LiteCalendarEvent objects."""

    def __init__(
        self,
        datetime_parser: Optional[LiteDateTimeParser] = None,
        attendee_parser: Optional[LiteAttendeeParser] = None,
    ):
        """Initialize event block parser.

        Args:
            datetime_parser: Parser for date-bearing properties
            attendee_parser: Parser for ATTENDEE/ORGANIZER properties
        """
        self.datetime_parser = datetime_parser or LiteDateTimeParser()
        self.attendee_parser = attendee_parser or LiteAttendeeParser()

    @staticmethod
    def _report(calendar: LiteCalendar, error: Optional[LiteTimezoneError]) -> None:
        if error is not None:
            calendar.report(error)

    def parse_event_block(self, block: str, calendar: LiteCalendar) -> LiteCalendarEvent:
        """Parse a single VEVENT block.

        Args:
            block: Raw block text from BEGIN:VEVENT to END:VEVENT
            calendar: Calendar being assembled; supplies the default zone,
                the UTC normalization flag and the diagnostic callback

        Returns:
            Fully populated base event (never an expanded occurrence)

        Raises:
            LiteTimestampParseError: If DTSTART, DTEND or RECURRENCE-ID
                is malformed
            LiteTimezoneError: If the diagnostic callback escalates
        """
        extractor = LiteFieldExtractor(block)
        parser = self.datetime_parser

        start, start_tz, start_error = parser.parse_event_date("DTSTART", extractor)
        if start is None:
            logger.debug("Event block has no DTSTART, using the zero instant")
            start = ZERO_INSTANT
        self._report(calendar, start_error)

        end, end_tz, end_error = parser.parse_event_date("DTEND", extractor)
        self._report(calendar, end_error)

        if start_tz is None:
            start_tz = calendar.timezone
        if end_tz is None:
            end_tz = calendar.timezone

        if end is None:
            end = _end_of_day(start)

        exdates, exdate_errors = parser.parse_exdates(extractor)
        for error in exdate_errors:
            self._report(calendar, error)

        recurrence_id, _, recurrence_error = parser.parse_event_date("RECURRENCE-ID", extractor)
        self._report(calendar, recurrence_error)

        if calendar.convert_dates_to_utc:
            start = start.astimezone(UTC)
            end = end.astimezone(UTC)
            exdates = [d.astimezone(UTC) for d in exdates]
            if recurrence_id is not None:
                recurrence_id = recurrence_id.astimezone(UTC)

        event = LiteCalendarEvent(
            id=extractor.extract("UID"),
            event_class=extractor.extract("CLASS"),
            sequence=extractor.extract_int("SEQUENCE"),
            status=extractor.extract("STATUS"),
            summary=extractor.extract("SUMMARY"),
            description=extractor.extract("DESCRIPTION"),
            location=extractor.extract("LOCATION"),
            start=start,
            end=end,
            start_timezone=start_tz,
            end_timezone=end_tz,
            whole_day_event=_is_midnight(start) and _is_midnight(end),
            created=parse_utc_timestamp(extractor.extract("CREATED")),
            modified=parse_utc_timestamp(extractor.extract("LAST-MODIFIED")),
            rrule=extractor.extract("RRULE"),
            exdates=exdates,
            recurrence_id=recurrence_id,
            attendees=self.attendee_parser.parse_attendees(extractor),
            organizer=self.attendee_parser.parse_organizer(extractor),
        )

        logger.debug(
            "Parsed event %r starting %s (rrule=%r, %d attendees)",
            event.id,
            event.start.isoformat(),
            event.rrule,
            len(event.attendees),
        )
        return event
