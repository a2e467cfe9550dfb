"""Короткие заметки с HTML представлением."""

from app.notes.models import MAX_TEXT_LENGTH, Note
from app.notes.render import render_html
from app.notes.repository import NoteRepository

__all__ = ["MAX_TEXT_LENGTH", "Note", "NoteRepository", "render_html"]
