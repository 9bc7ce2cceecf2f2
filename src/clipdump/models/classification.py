from dataclasses import dataclass
from enum import Enum

DEFAULT_PREVIEW_BYTES = 128


class Kind(Enum):
    TEXT = "text"
    RICH_TEXT = "rich text"
    FILE_LIST = "file list"
    IMAGE = "image"
    BINARY = "binary"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class Classification:
    kind: Kind
    fallback: bool = False
    max_preview_bytes: int = DEFAULT_PREVIEW_BYTES

    @property
    def label(self) -> str:
        if self.fallback:
            return f"{self.kind.value} (fallback)"
        return self.kind.value
