"""OpenCV рендерер оверлея."""

import numpy as np

from app.overlay.base import Layer


class CvOverlayRenderer:
    """
    Рендерер оверлея на основе OpenCV.

    Рисует слои на копии кадра: исходный кадр может одновременно
    использоваться как живое изображение.
    """

    def __init__(self, layers: list[Layer]) -> None:
        # Сортируем слои по приоритету (меньше = рисуется раньше)
        self.layers = sorted(layers, key=lambda layer: layer.priority)

    def render(self, frame: np.ndarray) -> np.ndarray:
        """
        Отрисовать все активные слои на копии кадра.

        Args:
            frame: Кадр в формате BGR (numpy array), не изменяется

        Returns:
            Новый кадр с наложенными слоями
        """
        output = frame.copy()
        for layer in self.layers:
            if layer.enabled:
                layer.draw(output)
        return output
