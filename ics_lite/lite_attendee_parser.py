"""Attendee parsing utilities for ICS calendar processing.

ATTENDEE and ORGANIZER properties are frequently folded across several
physical lines. The field extractor has already unfolded them, so each
participant arrives here as one logical content line.
"""

import logging

from .lite_field_extractor import LiteContentLine, LiteFieldExtractor
from .lite_models import LiteAttendee

logger = logging.getLogger(__name__)

_MAILTO = "mailto:"


def _email_from_value(value: str) -> str:
    """Return the address following ``mailto:``, or "" if there is none."""
    index = value.lower().find(_MAILTO)
    if index == -1:
        return ""
    return value[index + len(_MAILTO):].strip()


class LiteAttendeeParser:
    """Parser for iCalendar ATTENDEE and ORGANIZER properties."""

    def parse_attendee(self, line: LiteContentLine) -> LiteAttendee:
        """Parse one ATTENDEE content line.

        Args:
            line: Unfolded ATTENDEE line

        Returns:
            LiteAttendee; fields that are absent stay empty
        """
        return LiteAttendee(
            email=_email_from_value(line.value),
            name=line.param("CN"),
            role=line.param("ROLE"),
            status=line.param("PARTSTAT"),
            type=line.param("CUTYPE"),
        )

    def parse_attendees(self, extractor: LiteFieldExtractor) -> list[LiteAttendee]:
        """Parse all attendees of an event block.

        Entries with neither an email nor a name are dropped.

        Args:
            extractor: Field extractor over the event block

        Returns:
            List of parsed LiteAttendee objects, in document order
        """
        attendees = []
        for line in extractor.find_all("ATTENDEE"):
            attendee = self.parse_attendee(line)
            if attendee.email or attendee.name:
                attendees.append(attendee)
            else:
                logger.debug("Discarding empty attendee line %r", line.value)
        return attendees

    def parse_organizer(self, extractor: LiteFieldExtractor) -> LiteAttendee:
        """Parse the ORGANIZER of an event block (email and name only)."""
        line = extractor.find("ORGANIZER")
        if line is None:
            return LiteAttendee()
        return LiteAttendee(email=_email_from_value(line.value), name=line.param("CN"))
