"""Screen images: live frames, pause frames and their JPEG encoding."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import cv2
import numpy as np

from app.errors import EncodingFailure
from app.messages import ImageKind
from app.overlay import CaptionLayer, CvOverlayRenderer

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JpegMemo:
    """
    Caches the JPEG bytes of one image instance.

    The encoder runs at most once per successful encoding, also when several
    readers ask at the same time. A failed encoding leaves the cache empty.
    """

    def __init__(self) -> None:
        self._bytes: bytes | None = None
        self._lock = threading.Lock()

    def get(self, produce: Callable[[], bytes]) -> bytes:
        cached = self._bytes
        if cached is not None:
            return cached
        with self._lock:
            if self._bytes is None:
                self._bytes = produce()
            return self._bytes


@dataclass(frozen=True, eq=False)
class LiveImage:
    bitmap: np.ndarray
    quality: float
    captured_at: datetime = field(default_factory=_utcnow)
    jpeg: JpegMemo = field(default_factory=JpegMemo, init=False, repr=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.quality <= 1.0:
            raise ValueError(f"JPEG quality must be within [0.0, 1.0], got {self.quality}")
        # Кадр принадлежит изображению и после захвата не меняется
        self.bitmap.flags.writeable = False

    @property
    def kind(self) -> ImageKind:
        return ImageKind.LIVE


@dataclass(frozen=True, eq=False)
class PauseImage:
    """A frozen live frame with a caption drawn over it."""

    caption: str
    source: np.ndarray
    quality: float
    captured_at: datetime
    jpeg: JpegMemo = field(default_factory=JpegMemo, init=False, repr=False)

    def __post_init__(self) -> None:
        self.source.flags.writeable = False

    @classmethod
    def of(cls, caption: str, live: LiveImage) -> "PauseImage":
        return cls(
            caption=caption,
            source=live.bitmap,
            quality=live.quality,
            captured_at=live.captured_at,
        )

    @property
    def kind(self) -> ImageKind:
        return ImageKind.PAUSED


CastImage = LiveImage | PauseImage


def pause_overlay(bitmap: np.ndarray, caption: str) -> np.ndarray:
    """Вернуть копию кадра с надписью по центру."""
    return CvOverlayRenderer([CaptionLayer(caption)]).render(bitmap)


def render(image: CastImage) -> np.ndarray:
    """Кадр, который нужно отдать клиентам для данного изображения."""
    if isinstance(image, PauseImage):
        return pause_overlay(image.source, image.caption)
    return image.bitmap


def encode_jpeg(bitmap: np.ndarray, quality: float) -> bytes:
    """
    Закодировать кадр в JPEG.

    Args:
        bitmap: Кадр в формате BGR
        quality: Качество от 0.0 (худшее) до 1.0 (лучшее)

    Raises:
        EncodingFailure: если кодек вернул ошибку
    """
    params = [cv2.IMWRITE_JPEG_QUALITY, int(round(quality * 100))]
    try:
        ok, buffer = cv2.imencode(".jpg", bitmap, params)
    except cv2.error as exc:
        raise EncodingFailure(f"Failed to encode frame as JPEG: {exc}") from exc
    if not ok:
        raise EncodingFailure("Failed to encode frame as JPEG")
    return buffer.tobytes()


def jpeg_bytes(image: CastImage) -> bytes:
    """JPEG bytes of the image, encoded on first access and cached afterwards."""

    def _encode() -> bytes:
        data = encode_jpeg(render(image), image.quality)
        logger.debug("Encoded %s image: %d bytes", image.kind.value, len(data))
        return data

    return image.jpeg.get(_encode)
