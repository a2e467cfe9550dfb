"""
Screen capture via mss.
Grabs a single monitor as an OpenCV BGR frame.
"""

import logging

import mss
import mss.exception
import numpy as np

from app.config import DEFAULT_SCREEN
from app.errors import CaptureUnavailable

logger = logging.getLogger(__name__)


def _select_monitor(monitors: list[dict[str, int]], screen_no: int) -> dict[str, int]:
    """
    Выбрать монитор по номеру экрана.

    monitors[0] у mss - объединённая область всех мониторов,
    физические мониторы начинаются с индекса 1.
    """
    if screen_no == DEFAULT_SCREEN:
        index = 1 if len(monitors) > 1 else 0
    else:
        index = screen_no + 1

    if index >= len(monitors):
        raise CaptureUnavailable(
            f"Screen {screen_no} is not available ({len(monitors) - 1} monitor(s) found)"
        )
    return monitors[index]


class ScreenGrabber:
    def grab(self, screen_no: int = DEFAULT_SCREEN) -> np.ndarray:
        """
        Сделать снимок экрана.

        Args:
            screen_no: Номер экрана, -1 = экран по умолчанию

        Returns:
            Кадр в формате BGR (numpy array)

        Raises:
            CaptureUnavailable: если дисплей недоступен
        """
        # mss handles are not shareable between threads, open one per grab
        try:
            with mss.mss() as sct:
                monitor = _select_monitor(sct.monitors, screen_no)
                shot = sct.grab(monitor)
        except mss.exception.ScreenShotError as exc:
            raise CaptureUnavailable(f"Failed to grab screen {screen_no}: {exc}") from exc

        logger.debug("Grabbed screen %d: %dx%d", screen_no, shot.width, shot.height)
        bgra = np.frombuffer(shot.bgra, dtype=np.uint8).reshape((shot.height, shot.width, 4))
        return np.ascontiguousarray(bgra[..., :3])
