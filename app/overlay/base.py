"""Базовые интерфейсы для наложения графики на кадр."""

from abc import ABC, abstractmethod

import numpy as np


class Layer(ABC):
    """
    Базовый класс для слоя оверлея.

    Слои с меньшим приоритетом рисуются раньше (снизу),
    с большим - позже (сверху).
    """

    PRIORITY_NORMAL = 50
    PRIORITY_HUD = 200

    def __init__(self, enabled: bool = True, priority: int = PRIORITY_NORMAL) -> None:
        self.enabled = enabled
        self.priority = priority

    @abstractmethod
    def draw(self, frame: np.ndarray) -> None:
        """
        Отрисовать слой на кадре.

        Args:
            frame: Кадр в формате BGR (numpy array), модифицируется на месте
        """
        ...
