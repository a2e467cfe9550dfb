"""Text to HTML rendering for notes."""

import html
import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def render_html(text: str) -> str:
    """
    Преобразовать текст заметки в HTML.

    Пустые строки разделяют абзацы (<p>), одиночные переводы строк
    становятся <br>. Разметка в тексте экранируется.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    paragraphs = [p.strip("\n") for p in _PARAGRAPH_BREAK.split(normalized) if p.strip()]
    return "\n".join(
        "<p>" + "<br>\n".join(html.escape(line) for line in paragraph.split("\n")) + "</p>"
        for paragraph in paragraphs
    )
