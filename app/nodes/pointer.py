import asyncio
import logging
from collections.abc import Callable

from app.bus import EventBus
from app.errors import PointerUnavailable
from app.hw.pointer import read_pointer
from app.messages import PointerLocation
from app.slot import Slot
from app.ticker import Ticker

logger = logging.getLogger(__name__)


class PointerNode:
    """Publishes the pointer location whenever it moved since the last publish."""

    def __init__(
        self,
        bus: EventBus,
        reader: Callable[[], PointerLocation] = read_pointer,
        interval_s: float | None = None,
    ) -> None:
        self._bus = bus
        self._reader = reader
        self._last: Slot[PointerLocation] = Slot()
        self._reader_failed = False
        self.ticker = Ticker("pointer", interval_s, self.tick)

    async def start(self) -> None:
        self.ticker.start()

    async def stop(self) -> None:
        await self.ticker.stop()

    def current_location(self) -> PointerLocation | None:
        return self._last.get()

    async def tick(self) -> None:
        try:
            location = await asyncio.to_thread(self._reader)
        except PointerUnavailable as exc:
            # Не засоряем лог на каждом тике
            if not self._reader_failed:
                logger.warning("Pointer position unavailable: %s", exc)
                self._reader_failed = True
            return
        self._reader_failed = False

        if location == self._last.get():
            return
        self._last.set(location)
        logger.debug("Pointer moved to (%d, %d)", location.x, location.y)
        await self._bus.publish_pointer(location)
