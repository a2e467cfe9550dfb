from dataclasses import dataclass
from datetime import datetime
from typing import Any

MAX_TEXT_LENGTH = 64000


@dataclass(frozen=True)
class Note:
    id: int
    text: str
    html: str
    created_at: datetime
    updated_at: datetime
    version: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "html": self.html,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "version": self.version,
        }


def validate_text(text: str) -> str:
    if not text or not text.strip():
        raise ValueError("Note text must not be empty")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValueError(f"Note text must not exceed {MAX_TEXT_LENGTH} characters")
    return text
