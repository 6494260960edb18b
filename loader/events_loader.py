"""Loader for the events JSON document with a built-in fallback dataset."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from processor.models import Event, LoadResult

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"

FALLBACK_EVENTS = (
    {
        "name": "Health Camp",
        "start": "2025-11-15T09:00:00",
        "end": "2025-11-15T17:00:00",
        "location": "Seme Sub-County Hospital",
        "description": "A health outreach program with Red Cross, Aga Khan, and other partners."
    },
    {
        "name": "Agricultural Expo",
        "start": "2025-12-02T10:00:00",
        "end": "2025-12-02T16:00:00",
        "location": "Seme Resource Centre Grounds",
        "description": "An expo showcasing modern agricultural practices and innovations."
    },
)


class InvalidEventsDocument(ValueError):
    """Raised when the events document does not have the expected shape."""


def fallback_events() -> List[Event]:
    """Return a fresh copy of the built-in fallback events."""
    return [Event(**entry) for entry in FALLBACK_EVENTS]


class EventsLoader:
    """Loader for the events document from a URL or a local file."""

    NO_CACHE_HEADERS = {
        'Cache-Control': 'no-cache',
        'Pragma': 'no-cache'
    }

    def __init__(self, source: str = "data/events.json", timeout: int = 10):
        """
        Initialize the events loader.

        Args:
            source: http(s) URL or filesystem path of the events document
            timeout: HTTP request timeout in seconds (default: 10)
        """
        self.source = source
        self.timeout = timeout

    def load_events(self) -> LoadResult:
        """
        Load events, substituting the fallback dataset on any failure.

        Returns:
            LoadResult with the loaded or fallback events
        """
        logger.info(f"Loading events from {self.source}")

        try:
            document = self._fetch_document()
            events = self._parse_events(document)
        except (requests.RequestException, OSError, ValueError) as e:
            logger.error(
                f"Failed to load events from {self.source}: {e}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            logger.warning("Using built-in fallback events")
            return LoadResult(
                events=fallback_events(),
                source=FALLBACK_SOURCE,
                used_fallback=True,
                error_message=str(e)
            )

        logger.info(f"Successfully loaded {len(events)} events")
        return LoadResult(events=events, source=self.source)

    def _fetch_document(self) -> Any:
        """
        Fetch and deserialize the events document.

        Returns:
            Deserialized JSON document

        Raises:
            requests.RequestException: If the HTTP request fails
            OSError: If the local file cannot be read
            ValueError: If the content is not valid JSON
        """
        if self.source.startswith(('http://', 'https://')):
            response = requests.get(
                self.source,
                headers=self.NO_CACHE_HEADERS,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()

        with open(Path(self.source), 'r', encoding='utf-8') as f:
            return json.load(f)

    def _parse_events(self, document: Any) -> List[Event]:
        """
        Validate the document shape and build Event objects.

        Args:
            document: Deserialized JSON document

        Returns:
            List of Event objects

        Raises:
            InvalidEventsDocument: If the document has no 'events' list
        """
        if not isinstance(document, dict) or not isinstance(document.get('events'), list):
            raise InvalidEventsDocument("Invalid events document format")

        events = []
        for index, entry in enumerate(document['events']):
            event = self._parse_event_entry(entry)
            if event:
                events.append(event)
            else:
                logger.warning(f"Skipping events entry {index}: not an object")
        return events

    def _parse_event_entry(self, entry: Any) -> Optional[Event]:
        if not isinstance(entry, dict):
            return None
        return Event(
            name=_optional_text(entry, 'name') or '',
            start=entry.get('start'),
            end=entry.get('end'),
            location=_optional_text(entry, 'location'),
            description=_optional_text(entry, 'description')
        )


def _optional_text(entry: Dict[str, Any], key: str) -> Optional[str]:
    value = entry.get(key)
    if value is None:
        return None
    return str(value)
