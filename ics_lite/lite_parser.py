"""iCalendar document parser with Outlook timezone compatibility."""

import logging
import re
from typing import Optional

from .lite_event_merger import LiteEventMerger
from .lite_event_parser import LiteEventBlockParser
from .lite_exceptions import LiteICSParseError
from .lite_field_extractor import LiteFieldExtractor
from .lite_models import LiteCalendar, LiteCalendarEvent, TraceErrorFunc
from .lite_rrule_expander import LiteRRuleExpander
from .timezone_utils import resolve_timezone

logger = logging.getLogger(__name__)

DEFAULT_MAX_REPEATS = 1000

_EVENT_BLOCK_RE = re.compile(r"BEGIN:VEVENT.*?END:VEVENT(?:\r?\n|$)", re.DOTALL)


def explode_ics(content: str) -> tuple[list[str], str]:
    """Split a document into event blocks and the remaining header text.

    Args:
        content: Raw ICS document

    Returns:
        Tuple of (event blocks in document order, document with blocks removed)
    """
    blocks = _EVENT_BLOCK_RE.findall(content)
    header = _EVENT_BLOCK_RE.sub("", content)
    return blocks, header


class LiteICSParser:
    """Assemble a LiteCalendar from raw ICS text."""

    def __init__(
        self,
        event_parser: Optional[LiteEventBlockParser] = None,
        merger: Optional[LiteEventMerger] = None,
    ) -> None:
        """Initialize ICS parser.

        Args:
            event_parser: Parser for individual VEVENT blocks
            merger: Final ordering/deduplication step
        """
        self.event_parser = event_parser or LiteEventBlockParser()
        self.merger = merger or LiteEventMerger()

    def _parse_header(self, header: str, calendar: LiteCalendar) -> None:
        """Fill calendar-level metadata from the header region."""
        extractor = LiteFieldExtractor(header)
        calendar.name = extractor.extract("X-WR-CALNAME")
        calendar.description = extractor.extract("X-WR-CALDESC")

        version = extractor.extract("VERSION")
        try:
            calendar.version = float(version) if version else 0.0
        except ValueError:
            logger.debug("Ignoring malformed VERSION %r", version)
            calendar.version = 0.0

        timezone_name = extractor.extract("X-WR-TIMEZONE")
        if timezone_name:
            resolution = resolve_timezone(timezone_name)
            calendar.timezone = resolution.zone
            error = resolution.as_error()
            if error is not None:
                calendar.report(error)

    def parse_ics_content(
        self,
        ics_content: str,
        source_url: str = "",
        max_repeats: int = DEFAULT_MAX_REPEATS,
        convert_dates_to_utc: bool = False,
        trace_error_func: Optional[TraceErrorFunc] = None,
    ) -> LiteCalendar:
        """Parse ICS content into a calendar.

        Args:
            ics_content: Raw ICS document
            source_url: Path or URL the document came from, used in diagnostics
            max_repeats: Repeat cap per recurring event; 0 disables expansion
            convert_dates_to_utc: Normalize every instant to UTC
            trace_error_func: Receives timezone diagnostics; returning True
                turns the diagnostic into a fatal error

        Returns:
            LiteCalendar with events sorted by start

        Raises:
            LiteICSParseError: If the content is empty or a timestamp is malformed
            LiteTimezoneError: If ``trace_error_func`` escalates a diagnostic
        """
        if not ics_content or not ics_content.strip():
            raise LiteICSParseError("Empty ICS content")

        blocks, header = explode_ics(ics_content)
        calendar = LiteCalendar(
            url=source_url,
            convert_dates_to_utc=convert_dates_to_utc,
            trace_error_func=trace_error_func,
        )
        self._parse_header(header, calendar)

        expander = LiteRRuleExpander(max_repeats)
        events: list[LiteCalendarEvent] = []
        excluded: list[LiteCalendarEvent] = []
        recurring_count = 0

        for block in blocks:
            event = self.event_parser.parse_event_block(block, calendar)
            events.append(event)

            expansion = expander.expand(event)
            if expansion.occurrences or expansion.excluded:
                recurring_count += 1
            events.extend(expansion.occurrences)
            excluded.extend(expansion.excluded)

        calendar.events = self.merger.merge(events, excluded)

        logger.debug(
            "Parsed %d events from %s (%d blocks, %d expanded series, %d excluded occurrences)",
            len(calendar.events),
            source_url or "<string>",
            len(blocks),
            recurring_count,
            len(excluded),
        )
        return calendar


# Singleton instance for global use; holds no per-call state
_parser = LiteICSParser()


def parse_ical_content(
    content: str,
    url: str = "",
    max_repeats: int = DEFAULT_MAX_REPEATS,
    convert_dates_to_utc: bool = False,
    trace_error_func: Optional[TraceErrorFunc] = None,
) -> LiteCalendar:
    """Parse ICS text into a calendar (convenience function).

    See ``LiteICSParser.parse_ics_content``.
    """
    return _parser.parse_ics_content(
        content,
        source_url=url,
        max_repeats=max_repeats,
        convert_dates_to_utc=convert_dates_to_utc,
        trace_error_func=trace_error_func,
    )
