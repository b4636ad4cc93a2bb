"""DateTime parsing utilities for ICS calendar processing.

Timestamps use the ``YYYYMMDDTHHMMSS[Z]`` layout and whole-day values the
``YYYYMMDD`` layout. A value without a TZID is treated as UTC-equivalent wall
time. A value with a TZID is localized in the resolved zone, and the
resolution outcome travels back to the caller as a diagnostic.
"""

import logging
import re
from datetime import UTC, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from .lite_exceptions import LiteTimestampParseError, LiteTimezoneError
from .lite_field_extractor import LiteContentLine, LiteFieldExtractor
from .timezone_utils import TimezoneResolution, TimezoneResolver, resolve_timezone

logger = logging.getLogger(__name__)

ICS_FORMAT = "%Y%m%dT%H%M%SZ"
ICS_DATE_FORMAT = "%Y%m%d"

# strptime alone tolerates short fields ("2015930T..."), so check layout first
_TIMESTAMP_RE = re.compile(r"^\d{8}T\d{6}Z?$")
_DATE_RE = re.compile(r"^\d{8}$")

# Start of an event that has no DTSTART
ZERO_INSTANT = datetime(1, 1, 1, tzinfo=UTC)

EventDate = tuple[Optional[datetime], Optional[ZoneInfo], Optional[LiteTimezoneError]]


def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware.

    Args:
        dt: Datetime to make timezone-aware

    Returns:
        Timezone-aware datetime (UTC if originally naive)
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def parse_ics_timestamp(value: str, tag: str = "") -> datetime:
    """Parse ``YYYYMMDDTHHMMSS[Z]`` into a naive wall-clock datetime.

    Raises:
        LiteTimestampParseError: If the value does not match the layout
    """
    value = value.strip()
    if not _TIMESTAMP_RE.match(value):
        raise LiteTimestampParseError(value, tag)
    if not value.endswith("Z"):
        value += "Z"
    try:
        return datetime.strptime(value, ICS_FORMAT)
    except ValueError as e:
        raise LiteTimestampParseError(value, tag) from e


def parse_ics_date(value: str, tag: str = "") -> datetime:
    """Parse ``YYYYMMDD`` into a naive datetime at midnight.

    Raises:
        LiteTimestampParseError: If the value does not match the layout
    """
    value = value.strip()
    if not _DATE_RE.match(value):
        raise LiteTimestampParseError(value, tag)
    try:
        return datetime.strptime(value, ICS_DATE_FORMAT)
    except ValueError as e:
        raise LiteTimestampParseError(value, tag) from e


def parse_utc_timestamp(value: str) -> Optional[datetime]:
    """Parse a timestamp or bare date as UTC, returning None on any failure.

    Used for CREATED, LAST-MODIFIED and RRULE UNTIL where a malformed value
    silently means "unset".
    """
    value = value.strip()
    if not value:
        return None
    try:
        if _DATE_RE.match(value):
            return ensure_timezone_aware(parse_ics_date(value))
        return ensure_timezone_aware(parse_ics_timestamp(value))
    except LiteTimestampParseError:
        logger.debug("Ignoring malformed timestamp %r", value)
        return None


def _is_whole_day(line: LiteContentLine) -> bool:
    return line.param("VALUE").upper() == "DATE"


class LiteDateTimeParser:
    """Turn DTSTART/DTEND/RECURRENCE-ID/EXDATE lines into aware datetimes."""

    def __init__(self, resolver: Optional[TimezoneResolver] = None) -> None:
        self._resolver = resolver

    def _resolve(self, tzid: str) -> TimezoneResolution:
        if self._resolver is not None:
            return self._resolver.resolve(tzid)
        return resolve_timezone(tzid)

    def parse_line(
        self, line: LiteContentLine, tag: str = ""
    ) -> tuple[datetime, Optional[ZoneInfo], Optional[LiteTimezoneError]]:
        """Parse one date-bearing content line.

        Whole-day detection comes first since a bare date has no time part.

        Args:
            line: Content line carrying the value and its parameters
            tag: Property name used in error messages

        Returns:
            Tuple of (aware datetime, zone or None for floating, diagnostic or None)

        Raises:
            LiteTimestampParseError: If the value is malformed
        """
        if _is_whole_day(line):
            return ensure_timezone_aware(parse_ics_date(line.value, tag)), None, None

        wall_time = parse_ics_timestamp(line.value, tag)
        tzid = line.param("TZID").strip()
        if not tzid:
            return ensure_timezone_aware(wall_time), None, None

        resolution = self._resolve(tzid)
        return wall_time.replace(tzinfo=resolution.zone), resolution.zone, resolution.as_error()

    def parse_event_date(self, tag: str, extractor: LiteFieldExtractor) -> EventDate:
        """Parse the first ``tag`` line of a block.

        Args:
            tag: "DTSTART", "DTEND" or "RECURRENCE-ID"
            extractor: Field extractor over the event block

        Returns:
            (None, None, None) when the tag is absent, otherwise the
            result of ``parse_line``
        """
        line = extractor.find(tag)
        if line is None:
            return None, None, None
        return self.parse_line(line, tag)

    def parse_exdates(
        self, extractor: LiteFieldExtractor
    ) -> tuple[list[datetime], list[LiteTimezoneError]]:
        """Collect every exclusion instant from the block's EXDATE lines.

        Values may be comma-separated. A malformed individual value is
        skipped; it cannot match an occurrence anyway.

        Returns:
            Tuple of (exclusion instants, timezone diagnostics)
        """
        dates: list[datetime] = []
        errors: list[LiteTimezoneError] = []

        for line in extractor.find_all("EXDATE"):
            whole_day = _is_whole_day(line)
            zone: Optional[ZoneInfo] = None
            tzid = line.param("TZID").strip()
            if tzid and not whole_day:
                resolution = self._resolve(tzid)
                zone = resolution.zone
                error = resolution.as_error()
                if error is not None:
                    errors.append(error)

            for raw in line.value.split(","):
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    if whole_day:
                        wall_time = parse_ics_date(raw, "EXDATE")
                    else:
                        wall_time = parse_ics_timestamp(raw, "EXDATE")
                except LiteTimestampParseError:
                    logger.debug("Skipping malformed EXDATE value %r", raw)
                    continue
                dates.append(wall_time.replace(tzinfo=zone or UTC))

        return dates, errors
