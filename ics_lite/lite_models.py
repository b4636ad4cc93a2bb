"""Data models for ICS calendar processing."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .lite_exceptions import LiteTimezoneError

logger = logging.getLogger(__name__)

TraceErrorFunc = Callable[[LiteTimezoneError], bool]


def default_trace_error(error: LiteTimezoneError) -> bool:
    """Log a timezone diagnostic and keep parsing."""
    logger.warning("%s", error.describe())
    return False


def _zone_key(zone: Optional[ZoneInfo]) -> Optional[str]:
    return zone.key if zone is not None else None


class LiteAttendee(BaseModel):
    """Calendar event attendee or organizer."""

    email: str = Field(default="", description="Address following mailto:")
    name: str = Field(default="", description="Common name (CN)")
    role: str = Field(default="", description="ROLE parameter")
    status: str = Field(default="", description="PARTSTAT parameter")
    type: str = Field(default="", description="CUTYPE parameter")


class LiteCalendarEvent(BaseModel):
    """One scheduled occurrence parsed from a VEVENT block.

    A recurring series is represented by its base event plus one cloned
    event per materialized occurrence (``is_expanded_instance=True``).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Core properties
    id: str = Field(default="", description="UID")
    event_class: str = Field(default="", description="CLASS (visibility)")
    sequence: int = Field(default=0, description="Revision counter / occurrence ordinal")
    status: str = ""
    summary: str = ""
    description: str = ""
    location: str = ""

    # Time information
    start: datetime = Field(..., description="Start instant (timezone-aware)")
    end: datetime = Field(..., description="End instant (timezone-aware)")
    start_timezone: Optional[ZoneInfo] = Field(default=None, description="None means floating")
    end_timezone: Optional[ZoneInfo] = Field(default=None, description="None means floating")
    whole_day_event: bool = False

    # Metadata
    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    # Recurrence
    rrule: str = Field(default="", description="Raw RRULE value, empty if non-recurring")
    exdates: list[datetime] = Field(default_factory=list)
    recurrence_id: Optional[datetime] = Field(
        default=None, description="Set only on an explicit override of one occurrence"
    )

    # Participants
    attendees: list[LiteAttendee] = Field(default_factory=list)
    organizer: LiteAttendee = Field(default_factory=LiteAttendee)

    # RRULE expansion tracking
    is_expanded_instance: bool = Field(
        default=False, description="True if generated from RRULE expansion"
    )

    @property
    def duration(self) -> Any:
        """Return ``end - start``."""
        return self.end - self.start

    @property
    def is_override(self) -> bool:
        """True when this event replaces one occurrence of a series."""
        return self.recurrence_id is not None

    def equals(self, other: "LiteCalendarEvent") -> bool:
        """Semantic equality used for deduplication.

        Every attribute participates except ``whole_day_event`` (derived from
        start/end) and ``is_expanded_instance`` (bookkeeping). Instants are
        compared as absolute points in time and zones by IANA key.
        """
        if self is other:
            return True
        return (
            self.id == other.id
            and self.event_class == other.event_class
            and self.sequence == other.sequence
            and self.status == other.status
            and self.summary == other.summary
            and self.description == other.description
            and self.location == other.location
            and self.start == other.start
            and self.end == other.end
            and _zone_key(self.start_timezone) == _zone_key(other.start_timezone)
            and _zone_key(self.end_timezone) == _zone_key(other.end_timezone)
            and self.created == other.created
            and self.modified == other.modified
            and self.rrule == other.rrule
            and self.exdates == other.exdates
            and self.recurrence_id == other.recurrence_id
            and self.attendees == other.attendees
            and self.organizer == other.organizer
        )

    def clone(self, **overrides: Any) -> "LiteCalendarEvent":
        """Deep copy of this event with selected fields overwritten."""
        return self.model_copy(update=overrides, deep=True)

    @field_serializer("start_timezone", "end_timezone")
    def serialize_zone(self, zone: Optional[ZoneInfo]) -> Optional[str]:
        """Serialize zones to their IANA key."""
        return _zone_key(zone)

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()

    @field_serializer("created", "modified", "recurrence_id", when_used="unless-none")
    def serialize_optional_datetime(self, dt: datetime) -> str:
        """Serialize optional datetime fields to ISO format."""
        return dt.isoformat()

    @field_serializer("exdates")
    def serialize_exdates(self, dates: list[datetime]) -> list[str]:
        """Serialize exclusion instants to ISO format."""
        return [d.isoformat() for d in dates]


class LiteCalendar(BaseModel):
    """Parsed calendar: header metadata plus start-ordered events."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(default="", description="X-WR-CALNAME")
    description: str = Field(default="", description="X-WR-CALDESC")
    version: float = Field(default=0.0, description="VERSION")
    timezone: Optional[ZoneInfo] = Field(
        default=None, description="X-WR-TIMEZONE, used when an event specifies none"
    )
    url: str = Field(default="", description="Source path or URL")
    events: list[LiteCalendarEvent] = Field(default_factory=list)
    convert_dates_to_utc: bool = False
    trace_error_func: Optional[TraceErrorFunc] = Field(default=None, exclude=True)

    @field_serializer("timezone")
    def serialize_zone(self, zone: Optional[ZoneInfo]) -> Optional[str]:
        """Serialize the default zone to its IANA key."""
        return _zone_key(zone)

    def report(self, error: LiteTimezoneError) -> None:
        """Forward a timezone diagnostic to the trace callback.

        Args:
            error: Diagnostic produced while resolving a TZID

        Raises:
            LiteTimezoneError: If the callback asks for escalation (returns True)
        """
        error.source_url = self.url
        trace = self.trace_error_func or default_trace_error
        if trace(error):
            raise error


class LiteRecurrenceRule(BaseModel):
    """RRULE fields decoded on demand from the rule string."""

    freq: str = ""
    interval: int = 1
    count: int = 0
    until: Optional[datetime] = None
    by_month: set[int] = Field(default_factory=set)
    by_day: set[str] = Field(default_factory=set)
