"""Repeating refresh timer driving the render loop."""
import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Single repeating task invoking a tick callback at a fixed interval."""

    def __init__(self, tick: Callable[[], None], interval: float = 1.0):
        """
        Initialize the scheduler.

        Args:
            tick: Callback run on every tick
            interval: Seconds between ticks (default: 1)
        """
        self.tick = tick
        self.interval = interval
        self.tick_count = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> asyncio.Task:
        """
        Start the repeating task, cancelling any task already running.

        Must be called from a running event loop.

        Returns:
            The newly created task
        """
        self.cancel()
        self._task = asyncio.create_task(self._run())
        logger.debug(f"Refresh scheduler armed with interval {self.interval}s")
        return self._task

    def cancel(self) -> None:
        """Cancel the active task, if any."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.debug("Refresh scheduler cancelled")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick_count += 1
            try:
                self.tick()
            except Exception:
                logger.exception(f"Refresh tick {self.tick_count} failed")
