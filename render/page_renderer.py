"""Page renderer repopulating the upcoming and past mount points."""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from processor.event_processor import EventProcessor
from processor.models import Event, NormalizedEvent, RenderBuckets
from render.card_builder import CardBuilder

logger = logging.getLogger(__name__)


class PageRenderer:
    """Renderer for the upcoming and past event regions of a page."""

    UPCOMING_MOUNT_ID = "upcoming-events"
    PAST_MOUNT_ID = "past-events"
    EMPTY_UPCOMING_MESSAGE = "No upcoming events at the moment."
    EMPTY_PAST_MESSAGE = "No past events yet."

    def __init__(
        self,
        processor: Optional[EventProcessor] = None,
        card_builder: Optional[CardBuilder] = None
    ):
        """
        Initialize the renderer.

        Args:
            processor: Processor used to normalize and partition events
            card_builder: Builder used to turn events into cards
        """
        self.processor = processor or EventProcessor()
        self.card_builder = card_builder or CardBuilder()

    def render(
        self,
        document: BeautifulSoup,
        events: Iterable[Event],
        now: datetime
    ) -> Optional[RenderBuckets]:
        """
        Rebuild both regions of the document from scratch.

        Regions missing from the document are skipped. When neither region
        exists no work is done.

        Args:
            document: Host document holding the mount points
            events: Current known events
            now: Instant captured once for this render pass

        Returns:
            RenderBuckets used for the pass, or None if nothing was rendered
        """
        upcoming_mount = document.find(id=self.UPCOMING_MOUNT_ID)
        past_mount = document.find(id=self.PAST_MOUNT_ID)

        if upcoming_mount is None and past_mount is None:
            return None

        buckets = self.processor.build_buckets(events, now)

        if upcoming_mount is not None:
            upcoming_mount.clear()
            upcoming_mount.append(self.build_upcoming_region(document, buckets, now))

        if past_mount is not None:
            past_mount.clear()
            past_mount.append(self.build_past_region(document, buckets, now))

        logger.debug(
            f"Rendered {len(buckets.live)} live, {len(buckets.upcoming)} upcoming "
            f"and {len(buckets.past)} past events"
        )
        return buckets

    def build_upcoming_region(
        self,
        soup: BeautifulSoup,
        buckets: RenderBuckets,
        now: datetime
    ) -> Tag:
        """Live events first, then upcoming ones, or the empty-state message."""
        return self._build_region(
            soup,
            buckets.live + buckets.upcoming,
            now,
            self.EMPTY_UPCOMING_MESSAGE
        )

    def build_past_region(
        self,
        soup: BeautifulSoup,
        buckets: RenderBuckets,
        now: datetime
    ) -> Tag:
        return self._build_region(soup, buckets.past, now, self.EMPTY_PAST_MESSAGE)

    def _build_region(
        self,
        soup: BeautifulSoup,
        events: List[NormalizedEvent],
        now: datetime,
        empty_message: str
    ) -> Tag:
        if not events:
            message = soup.new_tag("p", attrs={"class": "empty-msg"})
            message.string = empty_message
            return message

        grid = soup.new_tag("div", attrs={"class": "events-grid"})
        for event in events:
            grid.append(self.card_builder.build_tag(soup, event, now))
        return grid
