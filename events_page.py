"""Live events page: loads events once and re-renders them every second."""
import asyncio
import contextlib
import json
import logging
import os
import signal
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Optional

from bs4 import BeautifulSoup

from loader.events_loader import EventsLoader
from processor.event_processor import DEFAULT_DURATION_HOURS, EventProcessor
from render.page_renderer import PageRenderer
from scheduler.refresh_scheduler import RefreshScheduler
from storage.events_cache import EventsCache

logger = logging.getLogger(__name__)

DEFAULT_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Events</title></head>
<body>
<section><h2>Upcoming Events</h2><div id="upcoming-events"></div></section>
<section><h2>Past Events</h2><div id="past-events"></div></section>
</body>
</html>
"""


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    EXTRA_FIELDS = (
        'error_type', 'used_fallback', 'events_source', 'refresh_interval', 'loaded_at'
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


@dataclass
class PageConfig:
    """Runtime settings of the events page."""
    events_source: str = 'data/events.json'
    page_template: Optional[str] = None
    output_path: str = 'index.html'
    refresh_interval_seconds: float = 1.0
    timeout_seconds: int = 10
    default_duration_hours: float = DEFAULT_DURATION_HOURS
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'PageConfig':
        """
        Read configuration from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            PageConfig with defaults for unset variables
        """
        env = os.environ if environ is None else environ
        return cls(
            events_source=env.get('EVENTS_SOURCE', 'data/events.json'),
            page_template=env.get('PAGE_TEMPLATE') or None,
            output_path=env.get('OUTPUT_PATH', 'index.html'),
            refresh_interval_seconds=float(env.get('REFRESH_INTERVAL_SECONDS', '1')),
            timeout_seconds=int(env.get('TIMEOUT_SECONDS', '10')),
            default_duration_hours=float(
                env.get('DEFAULT_DURATION_HOURS', str(DEFAULT_DURATION_HOURS))
            ),
            log_level=env.get('LOG_LEVEL', 'INFO')
        )


def load_document(template_path: Optional[str] = None) -> BeautifulSoup:
    """Parse the page template, or the built-in one if no path is given."""
    if template_path is None:
        return BeautifulSoup(DEFAULT_PAGE_TEMPLATE, 'html.parser')
    with open(template_path, 'r', encoding='utf-8') as f:
        return BeautifulSoup(f.read(), 'html.parser')


def local_now() -> datetime:
    return datetime.now().astimezone()


def write_document(document: BeautifulSoup, output_path: Path) -> None:
    """Replace the output file atomically so readers never see a partial page."""
    with tempfile.NamedTemporaryFile(
        'w',
        encoding='utf-8',
        dir=output_path.parent,
        prefix=f".{output_path.name}.",
        delete=False
    ) as f:
        f.write(str(document))
    try:
        os.replace(f.name, output_path)
    except OSError:
        os.unlink(f.name)
        raise


class EventsPage:
    """Owns the events cache, the renderer and the refresh scheduler of one page."""

    def __init__(
        self,
        document: BeautifulSoup,
        loader: EventsLoader,
        renderer: Optional[PageRenderer] = None,
        cache: Optional[EventsCache] = None,
        clock: Callable[[], datetime] = local_now,
        refresh_interval: float = 1.0,
        on_render: Optional[Callable[[BeautifulSoup], None]] = None
    ):
        """
        Initialize the page.

        Args:
            document: Host document holding the mount points
            loader: Loader for the events document
            renderer: Renderer for the mount points
            cache: Store for the loaded events
            clock: Source of the current instant, read once per render
            refresh_interval: Seconds between renders
            on_render: Callback receiving the document after every render
        """
        self.document = document
        self.loader = loader
        self.renderer = renderer or PageRenderer()
        self.cache = cache or EventsCache()
        self.clock = clock
        self.on_render = on_render
        self.scheduler = RefreshScheduler(self.render_tick, interval=refresh_interval)

    async def start(self) -> None:
        """Load events, render once and arm the refresh scheduler."""
        result = await asyncio.to_thread(self.loader.load_events)
        self.cache.replace(result)
        try:
            self.render_tick()
        except Exception:
            logger.exception("Initial render failed")
        self.scheduler.arm()
        logger.info(
            "Events page started",
            extra={
                'events_source': result.source,
                'used_fallback': result.used_fallback,
                'refresh_interval': self.scheduler.interval,
                'loaded_at': self.cache.loaded_at
            }
        )

    def render_tick(self) -> None:
        """Render the cached events against a single captured instant."""
        now = self.clock()
        self.renderer.render(self.document, self.cache.events, now)
        if self.on_render:
            self.on_render(self.document)

    def stop(self) -> None:
        self.scheduler.cancel()


async def run_page(config: PageConfig, max_ticks: Optional[int] = None) -> EventsPage:
    """
    Run the events page until a shutdown signal or max_ticks refreshes.

    Args:
        config: Page configuration
        max_ticks: Stop after this many scheduled refreshes (default: run forever)

    Returns:
        The stopped EventsPage
    """
    document = load_document(config.page_template)
    output_path = Path(config.output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    stop_event = asyncio.Event()

    def publish(rendered: BeautifulSoup) -> None:
        try:
            write_document(rendered, output_path)
        finally:
            if max_ticks is not None and page.scheduler.tick_count >= max_ticks:
                stop_event.set()

    page = EventsPage(
        document,
        EventsLoader(config.events_source, timeout=config.timeout_seconds),
        renderer=PageRenderer(EventProcessor(config.default_duration_hours)),
        refresh_interval=config.refresh_interval_seconds,
        on_render=publish
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, stop_event.set)

    await page.start()
    await stop_event.wait()

    logger.info("Stopping events page")
    page.stop()
    return page


def main() -> None:
    """Entry point: configure logging and run the page."""
    config = PageConfig.from_env()
    setup_logging(config.log_level)
    logger.info(
        "Events page starting",
        extra={
            'events_source': config.events_source,
            'refresh_interval': config.refresh_interval_seconds
        }
    )

    try:
        asyncio.run(run_page(config))
    except Exception as e:
        logger.error(
            f"Events page failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )


if __name__ == '__main__':
    main()
