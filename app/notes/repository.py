import logging
import sqlite3
import threading
from datetime import datetime, timezone

from app.errors import NoteNotFound, VersionConflict
from app.notes.models import Note, validate_text
from app.notes.render import render_html

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS note (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    text TEXT NOT NULL,
    html TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    version INTEGER NOT NULL DEFAULT 0
)
"""

_COLUMNS = "id, text, html, created_at, updated_at, version"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=row["id"],
        text=row["text"],
        html=row["html"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        version=row["version"],
    )


class NoteRepository:
    """
    Хранилище заметок в SQLite.

    Обновление использует оптимистичную блокировку: вызывающий передаёт
    версию, которую он видел последней.
    """

    def __init__(self, database_path: str = ":memory:") -> None:
        self.database_path = database_path
        # Запросы приходят из пула потоков веб-сервера
        self._conn = sqlite3.connect(database_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        with self._lock, self._conn:
            self._conn.execute(_SCHEMA)
        logger.info("Note store opened at %s", database_path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _fetch(self, note_id: int) -> sqlite3.Row:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM note WHERE id = ?", (note_id,)
        ).fetchone()
        if row is None:
            raise NoteNotFound(note_id)
        return row

    def create(self, text: str) -> Note:
        validate_text(text)
        now = _now().isoformat()
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "INSERT INTO note (text, html, created_at, updated_at, version) "
                "VALUES (?, ?, ?, ?, 0)",
                (text, render_html(text), now, now),
            )
            note = _to_note(self._fetch(cursor.lastrowid))
        logger.info("Created note %d", note.id)
        return note

    def get(self, note_id: int) -> Note:
        with self._lock:
            return _to_note(self._fetch(note_id))

    def update(self, note_id: int, text: str, version: int) -> Note:
        """
        Обновить текст заметки.

        Raises:
            NoteNotFound: если заметки нет
            VersionConflict: если заметку уже изменили после версии version
        """
        validate_text(text)
        with self._lock, self._conn:
            stored = self._fetch(note_id)
            if stored["version"] != version:
                raise VersionConflict(note_id, expected=version, actual=stored["version"])
            self._conn.execute(
                "UPDATE note SET text = ?, html = ?, updated_at = ?, version = version + 1 "
                "WHERE id = ? AND version = ?",
                (text, render_html(text), _now().isoformat(), note_id, version),
            )
            note = _to_note(self._fetch(note_id))
        logger.info("Updated note %d to version %d", note.id, note.version)
        return note

    def list(self) -> list[Note]:
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM note ORDER BY created_at, id"
            ).fetchall()
        return [_to_note(row) for row in rows]
