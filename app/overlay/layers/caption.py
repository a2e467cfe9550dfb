"""Слой с надписью по центру кадра."""

import cv2
import numpy as np

from app.overlay.base import Layer

MAGENTA = (255, 0, 255)


class CaptionLayer(Layer):
    """
    Крупная жирная надпись по центру кадра.

    Размер шрифта фиксирован и не зависит от разрешения кадра.
    """

    def __init__(
        self,
        text: str,
        enabled: bool = True,
        font_scale: float = 3.0,
        color: tuple[int, int, int] = MAGENTA,  # BGR
        thickness: int = 8,
    ) -> None:
        """
        Инициализация слоя надписи.

        Args:
            text: Текст надписи
            enabled: Включён ли слой
            font_scale: Размер шрифта
            color: Цвет текста (BGR)
            thickness: Толщина линий (жирность)
        """
        super().__init__(enabled, priority=Layer.PRIORITY_HUD)
        self.text = text
        self.font_scale = font_scale
        self.color = color
        self.thickness = thickness
        self.font = cv2.FONT_HERSHEY_SIMPLEX

    def text_origin(self, width: int, height: int) -> tuple[int, int]:
        """Левая нижняя точка базовой линии, при которой текст стоит по центру."""
        (text_width, text_height), _baseline = cv2.getTextSize(
            self.text,
            self.font,
            self.font_scale,
            self.thickness,
        )
        x = (width - text_width) // 2
        y = (height - text_height) // 2 + text_height
        return x, y

    def draw(self, frame: np.ndarray) -> None:
        height, width = frame.shape[:2]
        cv2.putText(
            frame,
            self.text,
            self.text_origin(width, height),
            self.font,
            self.font_scale,
            self.color,
            self.thickness,
            cv2.LINE_AA,
        )
