import logging
import threading

logger = logging.getLogger(__name__)


class SettingsService:
    """Хранит флаг «трансляция включена», меняется через API."""

    def __init__(self, cast_enabled: bool = True) -> None:
        self._cast_enabled = cast_enabled
        self._lock = threading.Lock()

    def is_cast_enabled(self) -> bool:
        return self._cast_enabled

    def set_cast_enabled(self, enabled: bool) -> None:
        with self._lock:
            if self._cast_enabled == enabled:
                return
            self._cast_enabled = enabled
        logger.info("Screen casting %s", "enabled" if enabled else "disabled")
