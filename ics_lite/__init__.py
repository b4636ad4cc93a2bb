"""ics_lite - parse ICS calendars into a structured event model.

The engine splits a document into VEVENT blocks, resolves Windows and other
non-IANA timezone names, expands recurring events within a repeat cap and
reconciles RECURRENCE-ID overrides and EXDATE exclusions.
"""

__version__ = "0.1.0"

from typing import Optional

from .lite_exceptions import (
    LiteICSError,
    LiteICSParseError,
    LiteICSSourceError,
    LiteTimestampParseError,
    LiteTimezoneCompatibilityError,
    LiteTimezoneError,
    LiteUnmappedTimezoneError,
)
from .lite_fetcher import load_ics, parse_calendar
from .lite_models import LiteAttendee, LiteCalendar, LiteCalendarEvent
from .lite_parser import LiteICSParser, parse_ical_content
from .timezone_utils import ResolutionOutcome, TimezoneResolution, resolve_timezone

__all__ = [
    "LiteAttendee",
    "LiteCalendar",
    "LiteCalendarEvent",
    "LiteICSError",
    "LiteICSParseError",
    "LiteICSParser",
    "LiteICSSourceError",
    "LiteTimestampParseError",
    "LiteTimezoneCompatibilityError",
    "LiteTimezoneError",
    "LiteUnmappedTimezoneError",
    "ResolutionOutcome",
    "TimezoneResolution",
    "load_ics",
    "parse_calendar",
    "parse_ical_content",
    "resolve_timezone",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Installs a colorized stderr handler when the root logger has none, then
    sets the root level. ICS_LITE_DEBUG (truthy values: "1", "true", "yes",
    "on") forces DEBUG verbosity regardless of ``level_name``.
    """
    import logging
    import sys

    from colorlog import ColoredFormatter

    from .lite_logging import env_debug_enabled

    if env_debug_enabled():
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none are present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, with only the level colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
