from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

TOPIC_POINTER = "/topic/pointer"
TOPIC_IMAGE = "/topic/image"


class ImageKind(str, Enum):
    LIVE = "live"
    PAUSED = "paused"


@dataclass(frozen=True)
class PointerLocation:
    x: int
    y: int

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ImageUpdate:
    kind: ImageKind
    captured_at: datetime

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "captured_at": self.captured_at.isoformat()}
