from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class SchedulerHandle:
    """
    Calls `tick()` every `interval_seconds` on the running event loop.

    Only one timer is active at a time: start() stops the previous one.
    stop() prevents future ticks; a tick already running finishes normally.
    """

    def __init__(self, interval_seconds: float, tick: Callable[[], Awaitable[object]]):
        self.interval_seconds = interval_seconds
        self._tick = tick
        self._task: Optional[asyncio.Task] = None
        self._stop: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stop.is_set()

    def start(self) -> None:
        self.stop()
        stop = asyncio.Event()
        self._stop = stop
        self._task = asyncio.get_running_loop().create_task(self._loop(stop))
        logger.info("Auto-generation started (every %.0fs)", self.interval_seconds)

    def stop(self) -> None:
        if self._stop is not None and not self._stop.is_set():
            self._stop.set()
            logger.info("Auto-generation stopped")
        self._task = None

    async def _loop(self, stop: asyncio.Event) -> None:
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.interval_seconds)
                break
            except asyncio.TimeoutError:
                pass
            await self.run_once()

    async def run_once(self) -> None:
        try:
            await self._tick()
        except Exception:
            logger.exception("Auto-generation tick failed")
