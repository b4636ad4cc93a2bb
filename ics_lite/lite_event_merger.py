"""Event ordering, override reconciliation and deduplication.

This module turns the raw list of base events and expanded occurrences into
the final calendar order. RECURRENCE-ID overrides replace the occurrence
they point at, semantic duplicates collapse to their first appearance, and
occurrences removed by EXDATE are subtracted last.
"""

import logging
from datetime import datetime

from .lite_models import LiteCalendarEvent

logger = logging.getLogger(__name__)

OccurrenceKey = tuple[str, datetime]


class LiteEventMerger:
    """Handles sorting, RECURRENCE-ID override logic and deduplication."""

    def merge(
        self,
        events: list[LiteCalendarEvent],
        excluded: list[LiteCalendarEvent],
    ) -> list[LiteCalendarEvent]:
        """Produce the final, start-ordered event list.

        Args:
            events: Base events and live occurrences, in emission order
            excluded: Occurrences that matched an EXDATE

        Returns:
            Events sorted by start (stable for ties) with overridden
            occurrences, duplicates and excluded occurrences removed
        """
        ordered = sorted(events, key=lambda event: event.start)
        reconciled = self.apply_overrides(ordered)
        unique = self.deduplicate_events(reconciled)
        return self.subtract(unique, excluded)

    def _collect_recurrence_overrides(self, events: list[LiteCalendarEvent]) -> set[OccurrenceKey]:
        """(UID, RECURRENCE-ID) of every explicit override."""
        return {
            (event.id, event.recurrence_id)
            for event in events
            if event.recurrence_id is not None
        }

    def apply_overrides(self, events: list[LiteCalendarEvent]) -> list[LiteCalendarEvent]:
        """Drop series occurrences that an explicit override replaces.

        Any event without a RECURRENCE-ID whose UID and start match an
        override's UID and RECURRENCE-ID is dropped, the base event included.
        """
        overrides = self._collect_recurrence_overrides(events)
        if not overrides:
            return list(events)

        kept = [
            event
            for event in events
            if event.recurrence_id is not None or (event.id, event.start) not in overrides
        ]

        suppressed = len(events) - len(kept)
        if suppressed:
            logger.debug("RECURRENCE-ID processing: suppressed %d overridden occurrences", suppressed)
        return kept

    def deduplicate_events(self, events: list[LiteCalendarEvent]) -> list[LiteCalendarEvent]:
        """Keep only the first of any group of semantically equal events.

        Args:
            events: Events in final order

        Returns:
            Events with later duplicates removed, order preserved
        """
        # equals() implies the same UID and start, so compare within buckets
        seen: dict[OccurrenceKey, list[LiteCalendarEvent]] = {}
        unique = []
        for event in events:
            bucket = seen.setdefault((event.id, event.start), [])
            if any(event.equals(other) for other in bucket):
                continue
            bucket.append(event)
            unique.append(event)

        if len(unique) != len(events):
            logger.debug("Removed %d duplicate events", len(events) - len(unique))
        return unique

    def subtract(
        self, events: list[LiteCalendarEvent], excluded: list[LiteCalendarEvent]
    ) -> list[LiteCalendarEvent]:
        """Remove every event equal to an excluded occurrence."""
        if not excluded:
            return events
        return [event for event in events if not any(event.equals(ex) for ex in excluded)]
