"""In-memory store for the last loaded events."""
import logging
from datetime import datetime
from typing import Optional, Tuple

from processor.models import Event, LoadResult

logger = logging.getLogger(__name__)


class EventsCache:
    """Single source of truth for the currently known events."""

    def __init__(self):
        self._events: Tuple[Event, ...] = ()
        self.source: Optional[str] = None
        self.used_fallback = False
        self.loaded_at: Optional[datetime] = None

    @property
    def events(self) -> Tuple[Event, ...]:
        """Events of the last load, read-only."""
        return self._events

    def replace(self, result: LoadResult) -> None:
        """
        Replace the cached events wholesale with a load result.

        Args:
            result: Result of a successful or fallback load
        """
        self._events = tuple(result.events)
        self.source = result.source
        self.used_fallback = result.used_fallback
        self.loaded_at = datetime.now().astimezone()
        logger.info(
            f"Cached {len(self._events)} events from {result.source}",
            extra={'used_fallback': result.used_fallback}
        )
