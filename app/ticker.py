import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Ticker:
    """
    Runs a callback with a fixed delay between the end of one tick and the
    start of the next, so ticks of one ticker never overlap.

    A failing tick is logged and the next tick runs as scheduled.
    """

    def __init__(
        self,
        name: str,
        interval_s: float | None,
        callback: Callable[[], Awaitable[None]],
    ) -> None:
        self.name = name
        self.interval_s = interval_s
        self._callback = callback
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        interval_s = self.interval_s
        if interval_s is None or interval_s <= 0:
            logger.info("Ticker '%s' disabled (interval=%s)", self.name, self.interval_s)
            return
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(interval_s), name=f"ticker:{self.name}")
        logger.info("Ticker '%s' started, interval %.3fs", self.name, interval_s)

    async def stop(self) -> None:
        """Stop the loop, letting an in-flight tick finish first."""
        if self._task is None:
            return
        self._stopping.set()
        await self._task
        self._task = None
        logger.info("Ticker '%s' stopped", self.name)

    async def _run(self, interval_s: float) -> None:
        while not self._stopping.is_set():
            try:
                await self._callback()
            except Exception:
                logger.exception("Tick of '%s' failed", self.name)

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval_s)
            except asyncio.TimeoutError:
                pass
