"""Event processor for classifying, normalizing and ordering events."""
import logging
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional

from processor.models import Event, NormalizedEvent, RenderBuckets, Status

logger = logging.getLogger(__name__)

DEFAULT_DURATION_HOURS = 8


def classify_status(now: datetime, start: datetime, end: datetime) -> Status:
    """
    Classify an event against the half-open window [start, end).

    Args:
        now: Current instant
        start: Event start
        end: Event end

    Returns:
        UPCOMING before start, LIVE inside the window, PAST otherwise
    """
    if now < start:
        return Status.UPCOMING
    if now < end:
        return Status.LIVE
    return Status.PAST


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp into an aware datetime in local time.

    Strings without a UTC designator are taken as local wall-clock time.
    Strings carrying an offset are converted to local time.

    Args:
        value: Raw timestamp value from the events document

    Returns:
        Aware local datetime or None if the value is not a valid timestamp
    """
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None

    return parsed.astimezone()


class EventProcessor:
    """Processor for normalizing and partitioning events per render pass."""

    def __init__(self, default_duration_hours: float = DEFAULT_DURATION_HOURS):
        """
        Initialize the event processor.

        Args:
            default_duration_hours: Duration used when an event has no valid end
        """
        self.default_duration = timedelta(hours=default_duration_hours)

    def normalize_event(self, event: Event, now: datetime) -> Optional[NormalizedEvent]:
        """
        Resolve start, end and status of a single event.

        Args:
            event: Raw Event object
            now: Instant captured for the current render pass

        Returns:
            NormalizedEvent or None if the event must be excluded
        """
        start = parse_timestamp(event.start)
        if start is None:
            logger.debug(f"Excluding event '{event.name}' with invalid start: {event.start!r}")
            return None

        end = parse_timestamp(event.end) if event.end is not None else None
        if end is None:
            end = (start + self.default_duration).astimezone()

        return NormalizedEvent(
            source=event,
            start=start,
            end=end,
            status=classify_status(now, start, end)
        )

    def normalize_events(self, events: Iterable[Event], now: datetime) -> List[NormalizedEvent]:
        """Normalize events, dropping those without a valid start."""
        normalized = []
        for event in events:
            normalized_event = self.normalize_event(event, now)
            if normalized_event:
                normalized.append(normalized_event)
        return normalized

    def partition_events(self, events: Iterable[NormalizedEvent]) -> RenderBuckets:
        """
        Split events into status buckets and order each bucket.

        Upcoming and live events are ordered by start ascending, past events
        by end descending. Sorting is stable so equal keys keep input order.

        Args:
            events: Normalized events for the current tick

        Returns:
            RenderBuckets with sorted upcoming, live and past lists
        """
        buckets = RenderBuckets()
        for event in events:
            if event.status is Status.UPCOMING:
                buckets.upcoming.append(event)
            elif event.status is Status.LIVE:
                buckets.live.append(event)
            else:
                buckets.past.append(event)

        buckets.upcoming.sort(key=lambda e: e.start)
        buckets.live.sort(key=lambda e: e.start)
        buckets.past.sort(key=lambda e: e.end, reverse=True)
        return buckets

    def build_buckets(self, events: Iterable[Event], now: datetime) -> RenderBuckets:
        """Normalize and partition raw events in one pass."""
        return self.partition_events(self.normalize_events(events, now))
