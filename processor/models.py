"""Data models for event classification and rendering."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional


class Status(str, Enum):
    """Temporal status of an event relative to the current instant."""
    UPCOMING = "UPCOMING"
    LIVE = "LIVE"
    PAST = "PAST"


@dataclass
class Event:
    """Raw event as read from the events document."""
    name: str
    start: Any
    end: Optional[Any] = None
    location: Optional[str] = None
    description: Optional[str] = None


@dataclass
class NormalizedEvent:
    """Event with resolved instants and status for a single render pass."""
    source: Event
    start: datetime
    end: datetime
    status: Status


@dataclass
class RenderBuckets:
    """Status-partitioned, sorted events for one tick."""
    upcoming: List[NormalizedEvent] = field(default_factory=list)
    live: List[NormalizedEvent] = field(default_factory=list)
    past: List[NormalizedEvent] = field(default_factory=list)


@dataclass
class Card:
    """Renderable content of a single event card."""
    title: str
    status: Status
    badge: str
    when: str
    location: Optional[str]
    description: str
    status_line: str


@dataclass
class LoadResult:
    """Result of loading the events document."""
    events: List[Event]
    source: str
    used_fallback: bool = False
    error_message: Optional[str] = None
