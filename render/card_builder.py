"""Card builder turning normalized events into display nodes."""
from datetime import datetime, timedelta

from bs4 import BeautifulSoup, Tag

from processor.models import Card, NormalizedEvent, Status

BADGE_LABELS = {
    Status.UPCOMING: "Upcoming",
    Status.LIVE: "Live Now",
    Status.PAST: "Past",
}

LIVE_STATUS_LINE = "Event is live!"
PAST_STATUS_LINE = "This event has passed."
ZERO_COUNTDOWN = "0d 0h 0m 0s"


def format_countdown(remaining: timedelta) -> str:
    """
    Format remaining time as '{days}d {hours}h {minutes}m {seconds}s'.

    Args:
        remaining: Time left until the event starts

    Returns:
        Floor-truncated countdown, or '0d 0h 0m 0s' if nothing remains
    """
    total_ms = remaining // timedelta(milliseconds=1)
    if total_ms <= 0:
        return ZERO_COUNTDOWN

    total_seconds = total_ms // 1000
    days, rest = divmod(total_seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{days}d {hours}h {minutes}m {seconds}s"


def format_datetime(value: datetime) -> str:
    """Format an instant like 'Sat, Nov 15, 2025, 9:00 AM'."""
    hour = value.hour % 12 or 12
    return f"{value:%a, %b %d, %Y}, {hour}:{value:%M %p}"


def format_time_range(start: datetime, end: datetime) -> str:
    return f"{format_datetime(start)} – {format_datetime(end)}"


class CardBuilder:
    """Builder for event cards."""

    def build_card(self, event: NormalizedEvent, now: datetime) -> Card:
        """
        Build the card content for one event.

        Args:
            event: Normalized event for the current tick
            now: Instant captured for the current tick

        Returns:
            Card with title, badge, time range, location, description and status line
        """
        source = event.source
        return Card(
            title=source.name,
            status=event.status,
            badge=BADGE_LABELS[event.status],
            when=format_time_range(event.start, event.end),
            location=source.location or None,
            description=source.description or "",
            status_line=self._status_line(event, now)
        )

    def _status_line(self, event: NormalizedEvent, now: datetime) -> str:
        if event.status is Status.UPCOMING:
            return f"Starts in: {format_countdown(event.start - now)}"
        if event.status is Status.LIVE:
            return LIVE_STATUS_LINE
        return PAST_STATUS_LINE

    def to_tag(self, soup: BeautifulSoup, card: Card) -> Tag:
        """
        Convert a card into an <article> tag owned by the given document.

        The tag is not attached to the document.

        Args:
            soup: Document used as tag factory
            card: Card content

        Returns:
            Detached article tag
        """
        article = soup.new_tag(
            "article",
            attrs={"class": f"event-card status-{card.status.value.lower()}"}
        )

        title_row = soup.new_tag("div", attrs={"class": "event-title-row"})
        title_row.append(_text_tag(soup, "h3", "event-title", card.title))
        title_row.append(_text_tag(soup, "span", "event-badge", card.badge))
        article.append(title_row)

        article.append(_text_tag(soup, "p", "event-when", card.when))
        if card.location:
            article.append(_text_tag(soup, "p", "event-where", card.location))
        article.append(_text_tag(soup, "p", "event-desc", card.description))
        article.append(_text_tag(soup, "p", "event-status", card.status_line))
        return article

    def build_tag(self, soup: BeautifulSoup, event: NormalizedEvent, now: datetime) -> Tag:
        return self.to_tag(soup, self.build_card(event, now))


def _text_tag(soup: BeautifulSoup, name: str, css_class: str, text: str) -> Tag:
    tag = soup.new_tag(name, attrs={"class": css_class})
    tag.string = text
    return tag
