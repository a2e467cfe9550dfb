import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SCREENCASTER_CONFIG"

DEFAULT_SCREEN = -1
DEFAULT_QUALITY = 0.7


class ServerConfig(BaseModel):
    """Настройки веб-сервера"""
    host: str = Field("0.0.0.0", description="Адрес для привязки сервера")
    port: int = Field(8000, ge=1, le=65535, description="Порт сервера")
    reload: bool = Field(False, description="Auto-reload при изменении кода (для разработки)")


class GrabbingConfig(BaseModel):
    """Настройки захвата экрана"""
    screen_no: int = Field(DEFAULT_SCREEN, ge=-1, description="Номер экрана, -1 = экран по умолчанию")
    quality: float = Field(DEFAULT_QUALITY, ge=0.0, le=1.0, description="Качество JPEG (0.0 - 1.0)")


class ScreencastConfig(BaseModel):
    """Настройки трансляции"""
    auto_start: bool = Field(True, description="Начинать трансляцию сразу после запуска")

    # Интервалы опроса, <= 0 отключает таймер
    refresh_interval_ms: int = Field(1000, description="Интервал обновления снимка экрана (мс)")
    refresh_pointer_ms: int = Field(50, description="Интервал опроса позиции указателя (мс)")

    pause_text: str = Field("Paused...", min_length=1, description="Надпись на кадре паузы")

    @property
    def refresh_interval_s(self) -> float:
        return self.refresh_interval_ms / 1000

    @property
    def refresh_pointer_s(self) -> float:
        return self.refresh_pointer_ms / 1000


class NotesConfig(BaseModel):
    """Настройки хранилища заметок"""
    database_path: str = Field("notes.db", description="Путь к файлу SQLite (':memory:' для тестов)")


class Config(BaseModel):
    """Главная конфигурация приложения"""
    server: ServerConfig = ServerConfig()
    grabbing: GrabbingConfig = GrabbingConfig()
    screencast: ScreencastConfig = ScreencastConfig()
    notes: NotesConfig = NotesConfig()


def load_config(path: str | os.PathLike[str] | None = None) -> Config:
    """
    Загрузить конфигурацию из JSON файла.

    Если путь не указан, берётся из переменной окружения SCREENCASTER_CONFIG.
    Без файла возвращаются значения по умолчанию.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return Config()

    logger.info("Loading configuration from %s", path)
    return Config.model_validate_json(Path(path).read_text(encoding="utf-8"))


# Глобальный экземпляр конфигурации
config = load_config()
