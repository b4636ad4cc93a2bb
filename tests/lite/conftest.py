from collections.abc import Generator
from typing import Any

import pytest

from ics_lite.lite_exceptions import LiteTimezoneError
from ics_lite.lite_models import LiteCalendar


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Keep logging overrides from the environment out of the tests."""
    monkeypatch.delenv("ICS_LITE_DEBUG", raising=False)
    monkeypatch.delenv("ICS_LITE_LOG_LEVEL", raising=False)
    yield


class DiagnosticsRecorder:
    """Trace callback that records every timezone diagnostic it receives."""

    def __init__(self, escalate: bool = False) -> None:
        self.escalate = escalate
        self.errors: list[LiteTimezoneError] = []

    def __call__(self, error: LiteTimezoneError) -> bool:
        self.errors.append(error)
        return self.escalate

    @property
    def messages(self) -> list[str]:
        return [error.describe() for error in self.errors]


@pytest.fixture
def diagnostics() -> DiagnosticsRecorder:
    """Non-escalating diagnostic recorder."""
    return DiagnosticsRecorder()


@pytest.fixture
def make_calendar(diagnostics: DiagnosticsRecorder) -> Any:
    """Factory for an empty calendar wired to the ``diagnostics`` recorder."""

    def _make(**overrides: Any) -> LiteCalendar:
        values: dict[str, Any] = {"url": "test.ics", "trace_error_func": diagnostics}
        values.update(overrides)
        return LiteCalendar(**values)

    return _make


# ==================== ICS Test Data Fixtures ====================


@pytest.fixture
def sample_ics_simple() -> str:
    """
    Return a simple ICS calendar string with a single event.

    Returns:
        ICS string with one event:
        - Event: "Team Meeting" on 2024-01-15 10:00-11:00 UTC
        - Includes DTSTART, DTEND, SUMMARY, LOCATION, DESCRIPTION
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//ics-lite Test//EN
X-WR-CALNAME:Simple
CALSCALE:GREGORIAN
BEGIN:VEVENT
UID:test-event-001@ics-lite.test
DTSTART:20240115T100000Z
DTEND:20240115T110000Z
SUMMARY:Team Meeting
LOCATION:Conference Room A
DESCRIPTION:Weekly team sync meeting
DTSTAMP:20240115T090000Z
END:VEVENT
END:VCALENDAR"""


@pytest.fixture
def sample_ics_recurring() -> str:
    """
    Return an ICS string with a recurring event.

    Returns:
        ICS string with recurring event:
        - Event: "Daily Standup" recurring daily at 09:00-09:15 UTC
        - RRULE:FREQ=DAILY;COUNT=3 (3 occurrences after the base event)
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//ics-lite Test//EN
BEGIN:VEVENT
UID:test-event-002@ics-lite.test
DTSTART:20240115T090000Z
DTEND:20240115T091500Z
SUMMARY:Daily Standup
RRULE:FREQ=DAILY;COUNT=3
DTSTAMP:20240115T080000Z
END:VEVENT
END:VCALENDAR"""


@pytest.fixture
def sample_ics_windows_timezones() -> str:
    """
    Return an ICS string using Outlook-style timezone names.

    Returns:
        ICS string with three events:
        - TZID=Pacific Standard Time (table hit, no diagnostic)
        - TZID=Pacific Standard Time 1 (compatibility mapping)
        - TZID=Mars Standard Time (unmapped, UTC fallback)
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Microsoft Corporation//Outlook 16.0 MIMEDIR//EN
BEGIN:VEVENT
UID:pst@ics-lite.test
DTSTART;TZID=Pacific Standard Time:20240301T090000
DTEND;TZID=Pacific Standard Time:20240301T100000
SUMMARY:Exact
END:VEVENT
BEGIN:VEVENT
UID:pst-compat@ics-lite.test
DTSTART;TZID=Pacific Standard Time 1:20240302T090000
DTEND;TZID=Pacific Standard Time 1:20240302T100000
SUMMARY:Compatibility
END:VEVENT
BEGIN:VEVENT
UID:mars@ics-lite.test
DTSTART;TZID=Mars Standard Time:20240303T090000
DTEND;TZID=Mars Standard Time:20240303T100000
SUMMARY:Unmapped
END:VEVENT
END:VCALENDAR"""
