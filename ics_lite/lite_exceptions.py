"""Custom exception hierarchy for ICS calendar parsing.

Two families live here:

- Fatal errors (``LiteICSParseError``, ``LiteTimestampParseError``,
  ``LiteICSSourceError``) abort a parse and are propagated to the caller.
  No partial calendar is returned when one of these is raised.
- Timezone diagnostics (``LiteTimezoneError`` subclasses) never abort a
  parse on their own. They are handed to the calendar's trace callback,
  which may choose to escalate them by returning True.
"""


class LiteICSError(Exception):
    """Base exception for all ics_lite errors."""


class LiteICSParseError(LiteICSError):
    """The document cannot be turned into a calendar.

    Raised when:
    - The content is empty or whitespace only
    - An event block has no DTSTART line
    """


class LiteTimestampParseError(LiteICSParseError, ValueError):
    """A date/time token does not match the expected literal layout.

    Downstream ordering and recurrence math cannot proceed on an
    unparseable instant, so this always aborts the parse.
    """

    def __init__(self, value: str, tag: str = "") -> None:
        self.value = value
        self.tag = tag
        where = f" in {tag}" if tag else ""
        super().__init__(f"Unable to parse timestamp {value!r}{where}")


class LiteICSSourceError(LiteICSError):
    """The calendar document could not be loaded from its path or URL."""


class LiteTimezoneError(LiteICSError):
    """Base class for non-fatal timezone resolution diagnostics.

    ``source_url`` is filled in by the calendar before the diagnostic is
    handed to the trace callback.
    """

    location: str = ""
    source_url: str = ""

    def describe(self) -> str:
        """Human-readable message naming the calendar source."""
        return f"{self} for iCal '{self.source_url}'"


class LiteUnmappedTimezoneError(LiteTimezoneError):
    """A zone name matched nothing, even after suffix stripping.

    The parser substitutes UTC for the offending zone.
    """

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(location)

    def describe(self) -> str:
        return (
            f"Unmapped timezone location '{self.location}' for iCal "
            f"'{self.source_url}'. Falling back to UTC"
        )


class LiteTimezoneCompatibilityError(LiteTimezoneError):
    """A zone name only resolved after stripping a trailing digit suffix."""

    def __init__(self, original_location: str, compatibility_location: str) -> None:
        self.location = original_location
        self.original_location = original_location
        self.compatibility_location = compatibility_location
        super().__init__(f"{original_location} mapped to {compatibility_location}")

    def describe(self) -> str:
        return f"Compatibility mode used, '{self}' for iCal '{self.source_url}'"
