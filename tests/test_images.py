"""Тесты для изображений экрана и JPEG кодирования."""

import threading

import cv2
import numpy as np
import pytest

from app import images
from app.errors import EncodingFailure
from app.images import LiveImage, PauseImage, jpeg_bytes, render
from app.messages import ImageKind


def _frame(value: int = 0, shape: tuple[int, int, int] = (480, 640, 3)) -> np.ndarray:
    return np.full(shape, value, dtype=np.uint8)


def _count_encodes(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    calls: list[float] = []
    real_encode = images.encode_jpeg

    def counting_encode(bitmap: np.ndarray, quality: float) -> bytes:
        calls.append(quality)
        return real_encode(bitmap, quality)

    monkeypatch.setattr(images, "encode_jpeg", counting_encode)
    return calls


@pytest.mark.parametrize("quality", [0.0, 0.7, 1.0])
def test_live_image_is_encoded_once(monkeypatch: pytest.MonkeyPatch, quality: float) -> None:
    """Повторное чтение байтов одного изображения не кодирует его заново."""
    calls = _count_encodes(monkeypatch)
    image = LiveImage(_frame(120), quality)

    first = jpeg_bytes(image)
    second = jpeg_bytes(image)

    assert first == second
    assert calls == [quality]


def test_encoding_produces_jpeg() -> None:
    """Результат кодирования - корректный JPEG."""
    data = jpeg_bytes(LiveImage(_frame(200), 0.7))

    assert data[:2] == b"\xff\xd8", "JPEG начинается с маркера SOI"
    decoded = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
    assert decoded.shape == (480, 640, 3)


def test_higher_quality_gives_larger_output() -> None:
    """Качество передаётся в кодек."""
    rng = np.random.default_rng(42)
    bitmap = rng.integers(0, 256, size=(240, 320, 3), dtype=np.uint8)

    low = images.encode_jpeg(bitmap, 0.1)
    high = images.encode_jpeg(bitmap, 1.0)

    assert len(high) > len(low)


def test_quality_out_of_range_is_rejected() -> None:
    """Качество вне [0, 1] недопустимо."""
    with pytest.raises(ValueError):
        LiveImage(_frame(), 1.5)


def test_concurrent_readers_encode_once(monkeypatch: pytest.MonkeyPatch) -> None:
    """Одновременные читатели не приводят к повторному кодированию."""
    calls = _count_encodes(monkeypatch)
    image = LiveImage(_frame(50), 0.7)
    results: list[bytes] = []

    def reader() -> None:
        results.append(jpeg_bytes(image))

    threads = [threading.Thread(target=reader) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len(set(results)) == 1


def test_failed_encoding_is_retried(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ошибка кодирования не кэшируется, следующая попытка кодирует снова."""
    real_encode = images.encode_jpeg
    attempts: list[int] = []

    def flaky_encode(bitmap: np.ndarray, quality: float) -> bytes:
        attempts.append(1)
        if len(attempts) == 1:
            raise EncodingFailure("codec error")
        return real_encode(bitmap, quality)

    monkeypatch.setattr(images, "encode_jpeg", flaky_encode)
    image = LiveImage(_frame(10), 0.7)

    with pytest.raises(EncodingFailure):
        jpeg_bytes(image)

    assert jpeg_bytes(image)[:2] == b"\xff\xd8"
    assert len(attempts) == 2


def test_encode_reports_codec_error() -> None:
    """Некорректный кадр приводит к EncodingFailure."""
    with pytest.raises(EncodingFailure):
        images.encode_jpeg(np.zeros((0, 0, 3), dtype=np.uint8), 0.7)


def test_pause_image_keeps_source_untouched() -> None:
    """Надпись паузы рисуется на копии кадра."""
    live = LiveImage(_frame(0), 0.7)
    pause = PauseImage.of("Paused...", live)

    rendered = render(pause)

    assert pause.source is live.bitmap
    assert live.bitmap.sum() == 0, "Исходный кадр не должен меняться"
    assert rendered.sum() > 0, "На кадре паузы должна быть надпись"


def test_pause_image_encodes_overlaid_bitmap() -> None:
    """JPEG паузы отличается от JPEG исходного кадра."""
    live = LiveImage(_frame(0), 0.7)
    pause = PauseImage.of("Paused...", live)

    assert jpeg_bytes(pause) != jpeg_bytes(live)


def test_pause_image_inherits_quality_and_timestamp() -> None:
    """Пауза сохраняет качество и время снимка исходного кадра."""
    live = LiveImage(_frame(), 0.3)
    pause = PauseImage.of("Paused...", live)

    assert pause.quality == 0.3
    assert pause.captured_at == live.captured_at
    assert live.kind is ImageKind.LIVE
    assert pause.kind is ImageKind.PAUSED


def test_render_live_image_returns_bitmap() -> None:
    """Живое изображение отдаётся без изменений."""
    live = LiveImage(_frame(7), 0.7)

    assert render(live) is live.bitmap


def test_captured_bitmap_is_read_only() -> None:
    """Захваченный кадр нельзя случайно изменить на месте."""
    live = LiveImage(_frame(0), 0.7)
    pause = PauseImage.of("Paused...", live)

    with pytest.raises(ValueError):
        live.bitmap[0, 0] = 255
    with pytest.raises(ValueError):
        pause.source[0, 0] = 255
    assert render(pause).flags.writeable, "Надпись рисуется на копии"
