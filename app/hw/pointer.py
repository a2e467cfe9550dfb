"""
Mouse pointer position via pynput.
The controller is created lazily: pynput needs a running display server.
"""

import threading
from typing import Any

from app.errors import PointerUnavailable
from app.messages import PointerLocation

_controller: Any = None
_controller_lock = threading.Lock()


def _get_controller() -> Any:
    """Ленивая инициализация контроллера мыши"""
    global _controller
    with _controller_lock:
        if _controller is None:
            try:
                from pynput import mouse
            except Exception as exc:  # no display server / unsupported platform
                raise PointerUnavailable(f"pynput is not usable here: {exc}") from exc
            _controller = mouse.Controller()
        return _controller


def read_pointer() -> PointerLocation:
    """
    Прочитать текущую позицию указателя.

    Raises:
        PointerUnavailable: если позицию прочитать нельзя
    """
    controller = _get_controller()
    try:
        x, y = controller.position
    except Exception as exc:
        raise PointerUnavailable(f"Failed to read pointer position: {exc}") from exc
    return PointerLocation(x=int(x), y=int(y))
