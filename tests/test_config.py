"""Тесты для конфигурации."""

import json

import pytest
from pydantic import ValidationError

from app.config import CONFIG_ENV_VAR, Config, GrabbingConfig, ScreencastConfig, load_config


def test_grabbing_defaults() -> None:
    """Экран по умолчанию и качество 0.7."""
    config = GrabbingConfig()

    assert config.screen_no == -1
    assert config.quality == 0.7


@pytest.mark.parametrize("quality", [-0.1, 1.1])
def test_quality_must_be_in_range(quality: float) -> None:
    """Качество должно лежать в [0.0, 1.0]."""
    with pytest.raises(ValidationError):
        GrabbingConfig(quality=quality)


def test_screencast_defaults() -> None:
    """Трансляция стартует сразу, интервалы в секундах."""
    config = ScreencastConfig()

    assert config.auto_start is True
    assert config.pause_text == "Paused..."
    assert config.refresh_interval_s == 1.0
    assert config.refresh_pointer_s == 0.05


def test_load_config_without_file() -> None:
    """Без файла используются значения по умолчанию."""
    assert load_config("") == Config()


def test_load_config_from_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Путь к файлу берётся из переменной окружения."""
    path = tmp_path / "screencaster.json"
    path.write_text(
        json.dumps(
            {
                "grabbing": {"screen_no": 1, "quality": 0.9},
                "screencast": {"auto_start": False, "refresh_interval_ms": -1},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    config = load_config()

    assert config.grabbing.screen_no == 1
    assert config.grabbing.quality == 0.9
    assert config.screencast.auto_start is False
    assert config.screencast.refresh_interval_ms == -1
    assert config.server.port == 8000
