import asyncio
import logging
from typing import Protocol

import numpy as np

from app.bus import EventBus
from app.config import DEFAULT_QUALITY, DEFAULT_SCREEN
from app.errors import CaptureUnavailable, ImageNotYetAvailable
from app.images import CastImage, LiveImage, PauseImage, jpeg_bytes
from app.messages import ImageUpdate
from app.settings import SettingsService
from app.slot import Slot
from app.ticker import Ticker

logger = logging.getLogger(__name__)


class Grabber(Protocol):
    def grab(self, screen_no: int = DEFAULT_SCREEN) -> np.ndarray:
        ...


class ScreenCastNode:
    """
    Keeps the current screen image up to date.

    While casting is enabled every tick installs a fresh live frame. While it
    is disabled the last live frame is frozen once with a caption over it.
    If nothing was captured yet when casting is disabled, one frame is grabbed
    immediately and paused.
    """

    def __init__(
        self,
        grabber: Grabber,
        settings: SettingsService,
        bus: EventBus,
        screen_no: int = DEFAULT_SCREEN,
        quality: float = DEFAULT_QUALITY,
        pause_text: str = "Paused...",
        interval_s: float | None = None,
    ) -> None:
        self._grabber = grabber
        self._settings = settings
        self._bus = bus
        self.screen_no = screen_no
        self.quality = quality
        self.pause_text = pause_text
        self._current: Slot[CastImage] = Slot()
        self.ticker = Ticker("screencast", interval_s, self._scheduled_tick)

    async def start(self) -> None:
        self.ticker.start()

    async def stop(self) -> None:
        await self.ticker.stop()

    async def _scheduled_tick(self) -> None:
        installed = await asyncio.to_thread(self.tick)
        if installed is not None:
            await self._bus.publish_image(ImageUpdate(installed.kind, installed.captured_at))

    def tick(self) -> CastImage | None:
        """
        Обновить текущее изображение.

        Returns:
            Установленное изображение или None, если слот не менялся
        """
        try:
            if self._settings.is_cast_enabled():
                return self._use_live_image()
            return self._use_pause_image()
        except CaptureUnavailable as exc:
            # следующий тик и есть повторная попытка
            logger.error("Screen capture failed: %s", exc)
            return None

    def _grab_live_image(self) -> LiveImage:
        return LiveImage(self._grabber.grab(self.screen_no), self.quality)

    def _use_live_image(self) -> LiveImage:
        image = self._grab_live_image()
        previous = self._current.set(image)
        if previous is None:
            logger.info("First screen frame captured (%dx%d)", image.bitmap.shape[1], image.bitmap.shape[0])
        elif isinstance(previous, PauseImage):
            logger.info("Screen casting resumed")
        return image

    def _use_pause_image(self) -> PauseImage | None:
        current = self._current.get()
        if isinstance(current, PauseImage):
            return None
        if current is None:
            logger.info("Casting disabled before the first frame, grabbing one to pause on")
            current = self._grab_live_image()

        image = PauseImage.of(self.pause_text, current)
        self._current.set(image)
        logger.info("Screen casting paused")
        return image

    def current_image(self) -> CastImage | None:
        return self._current.get()

    def latest_image_bytes(self) -> bytes:
        """
        JPEG последнего установленного изображения (живого или паузы).

        Raises:
            ImageNotYetAvailable: если ещё не было ни одного снимка
            EncodingFailure: если кадр не удалось закодировать
        """
        image = self._current.get()
        if image is None:
            raise ImageNotYetAvailable("No screen image has been captured yet")
        return jpeg_bytes(image)
