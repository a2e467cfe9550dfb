"""Ошибки приложения."""


class ScreenCasterError(Exception):
    """Базовая ошибка приложения."""


class CaptureUnavailable(ScreenCasterError):
    """Экран недоступен для захвата (нет дисплея или неверный номер экрана)."""


class PointerUnavailable(ScreenCasterError):
    """Не удалось прочитать позицию указателя."""


class EncodingFailure(ScreenCasterError):
    """Ошибка кодирования кадра в JPEG."""


class ImageNotYetAvailable(ScreenCasterError):
    """С момента запуска ещё не было ни одного снимка экрана."""


class NoteNotFound(ScreenCasterError):
    def __init__(self, note_id: int) -> None:
        super().__init__(f"Note {note_id} not found")
        self.note_id = note_id


class VersionConflict(ScreenCasterError):
    def __init__(self, note_id: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Note {note_id} was modified concurrently "
            f"(expected version {expected}, stored version {actual})"
        )
        self.note_id = note_id
        self.expected = expected
        self.actual = actual
