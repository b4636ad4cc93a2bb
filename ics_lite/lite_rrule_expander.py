"""RRULE expansion logic for the ics_lite parser.

Expansion walks one period at a time from the base event's start. Every
period produces a candidate instant; filters decide which days of that
period are emitted, and each emission is a clone of the base event. The
loop is bounded by the repeat cap even when a rule has neither COUNT nor
UNTIL.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from .lite_datetime_utils import parse_utc_timestamp
from .lite_models import LiteCalendarEvent, LiteRecurrenceRule

logger = logging.getLogger(__name__)

SUPPORTED_FREQUENCIES = frozenset({"DAILY", "WEEKLY", "MONTHLY", "YEARLY"})

# Indexed by datetime.weekday()
WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

# Consecutive periods without an emission before giving up
MAX_IDLE_PERIODS = 1000

BY_DAY_SCAN_DAYS = 7


def _positive_int(value: str, default: int) -> int:
    try:
        number = int(value)
    except ValueError:
        return default
    return number if number > 0 else default


def parse_rrule_string(rrule_string: str, max_repeats: int) -> LiteRecurrenceRule:
    """Decode an RRULE value into its fields.

    Malformed or missing parts fall back silently: INTERVAL to 1, COUNT to
    ``max_repeats``, UNTIL to unbounded. Unknown keys are ignored.

    Args:
        rrule_string: RRULE value (e.g. "FREQ=WEEKLY;COUNT=4;BYDAY=MO,WE")
        max_repeats: Repeat cap, used as the default COUNT

    Returns:
        LiteRecurrenceRule
    """
    rule = LiteRecurrenceRule(count=max_repeats)

    for part in rrule_string.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip().upper()
        value = value.strip()

        if key == "FREQ":
            rule.freq = value.upper()
        elif key == "INTERVAL":
            rule.interval = _positive_int(value, 1)
        elif key == "COUNT":
            rule.count = _positive_int(value, max_repeats)
        elif key == "UNTIL":
            rule.until = parse_utc_timestamp(value)
        elif key == "BYMONTH":
            rule.by_month = {int(m) for m in value.split(",") if m.strip().isdigit()}
        elif key == "BYDAY":
            # "1MO" / "-1FR" reduce to the weekday code
            rule.by_day = {
                day.strip().upper()[-2:]
                for day in value.split(",")
                if day.strip().upper()[-2:] in WEEKDAY_CODES
            }

    return rule


@dataclass
class LiteRRuleExpansionResult:
    """Occurrences produced for one base event.

    Attributes:
        occurrences: Live occurrences to add to the calendar
        excluded: Occurrences matching an EXDATE, to subtract after merging
    """

    occurrences: list[LiteCalendarEvent] = field(default_factory=list)
    excluded: list[LiteCalendarEvent] = field(default_factory=list)


@dataclass
class _ExpansionState:
    """Accumulator for one expansion run."""

    base: LiteCalendarEvent
    rule: LiteRecurrenceRule
    cap: int
    remaining: int
    duration: timedelta
    period: int = 0
    emitted: int = 0
    idle_periods: int = 0
    done: bool = False
    result: LiteRRuleExpansionResult = field(default_factory=LiteRRuleExpansionResult)


class LiteRRuleExpander:
    """Materialize the occurrences of a recurring event."""

    def __init__(self, max_repeats: int):
        """Initialize expander.

        Args:
            max_repeats: Repeat cap; 0 or less disables expansion
        """
        self.max_repeats = max_repeats

    def expand(self, event: LiteCalendarEvent) -> LiteRRuleExpansionResult:
        """Expand ``event.rrule`` into occurrences.

        The base event itself is never part of the result.

        Args:
            event: Base event carrying a RRULE value

        Returns:
            LiteRRuleExpansionResult (empty when expansion does not apply)
        """
        if self.max_repeats <= 0 or not event.rrule:
            return LiteRRuleExpansionResult()

        rule = parse_rrule_string(event.rrule, self.max_repeats)
        if rule.freq not in SUPPORTED_FREQUENCIES:
            logger.debug(
                "Unsupported FREQ %r in RRULE for event %r, not expanding", rule.freq, event.id
            )
            return LiteRRuleExpansionResult()

        state = _ExpansionState(
            base=event,
            rule=rule,
            cap=self.max_repeats,
            remaining=rule.count,
            duration=event.end - event.start,
        )
        while not state.done:
            self._step(state)

        logger.debug(
            "Expanded event %r: %d occurrences, %d excluded over %d periods",
            event.id,
            len(state.result.occurrences),
            len(state.result.excluded),
            state.period,
        )
        return state.result

    def _candidate(self, state: _ExpansionState, period: int) -> Optional[datetime]:
        """Start of period ``period``, computed from the base start."""
        rule = state.rule
        if rule.freq == "DAILY":
            delta = relativedelta(days=rule.interval * period)
        elif rule.freq == "WEEKLY":
            # INTERVAL is not applied to weekly rules
            delta = relativedelta(days=7 * period)
        elif rule.freq == "MONTHLY":
            delta = relativedelta(months=rule.interval * period)
        else:
            delta = relativedelta(years=rule.interval * period)

        try:
            return state.base.start + delta
        except (ValueError, OverflowError):
            logger.debug("Recurrence of event %r ran past the supported date range", state.base.id)
            return None

    def _emit(self, state: _ExpansionState, instant: datetime) -> None:
        """Record one occurrence and update the counters."""
        state.emitted += 1
        state.remaining -= 1
        state.idle_periods = 0

        occurrence = state.base.clone(
            start=instant,
            end=instant + state.duration,
            sequence=state.emitted,
            is_expanded_instance=True,
        )

        if any(exdate == instant for exdate in state.base.exdates):
            state.result.excluded.append(occurrence)
        elif state.rule.until is None or instant <= state.rule.until:
            state.result.occurrences.append(occurrence)

        if state.remaining <= 0 or state.emitted > state.cap:
            state.done = True

    def _step(self, state: _ExpansionState) -> None:
        """Process one period and decide whether to continue."""
        candidate = self._candidate(state, state.period)
        if candidate is None:
            state.done = True
            return

        emitted_before = state.emitted
        rule = state.rule
        base_start = state.base.start

        if not rule.by_month or candidate.month in rule.by_month:
            if rule.by_day:
                for offset in range(BY_DAY_SCAN_DAYS):
                    day = candidate + timedelta(days=offset)
                    if WEEKDAY_CODES[day.weekday()] in rule.by_day and day != base_start:
                        self._emit(state, day)
                        if state.done:
                            break
            elif candidate != base_start:
                self._emit(state, candidate)

        if state.done:
            return

        if state.emitted == emitted_before:
            state.idle_periods += 1
            if state.idle_periods >= MAX_IDLE_PERIODS:
                logger.debug(
                    "No occurrences of event %r in %d periods, stopping",
                    state.base.id,
                    MAX_IDLE_PERIODS,
                )
                state.done = True
                return

        state.period += 1
        next_cursor = self._candidate(state, state.period)
        if next_cursor is None or (rule.until is not None and next_cursor >= rule.until):
            state.done = True
