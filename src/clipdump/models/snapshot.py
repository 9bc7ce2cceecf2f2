from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

TextFetcher = Callable[[], Optional[str]]
BytesFetcher = Callable[[], Optional[bytes]]
PathsFetcher = Callable[[], Optional[List[str]]]
ImageFetcher = Callable[[], Any]


@dataclass(frozen=True)
class FormatEntry:
    """One format of a clipboard item with lazy, platform-supplied readers.

    Each fetcher is tagged by what it returns, so nothing downstream has to
    inspect payload types. A fetcher that is ``None`` cannot be attempted.
    """
    format_id: str
    fetch_text: Optional[TextFetcher] = None
    fetch_bytes: Optional[BytesFetcher] = None
    fetch_paths: Optional[PathsFetcher] = None
    fetch_image: Optional[ImageFetcher] = None

    @property
    def attemptable(self) -> bool:
        return any(
            fetcher is not None
            for fetcher in (self.fetch_text, self.fetch_bytes, self.fetch_paths, self.fetch_image)
        )


@dataclass(frozen=True)
class ClipboardItem:
    index: int
    entries: Tuple[FormatEntry, ...]

    @property
    def format_ids(self) -> List[str]:
        return [entry.format_id for entry in self.entries]


@dataclass(frozen=True)
class ClipboardSnapshot:
    """Clipboard state captured once per dump."""
    items: Tuple[ClipboardItem, ...]

    @property
    def is_empty(self) -> bool:
        return not self.items
