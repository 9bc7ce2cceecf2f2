import logging
from abc import ABC, abstractmethod
from typing import List

from clipdump.config import DumpSettings
from clipdump.models.snapshot import ClipboardItem, ClipboardSnapshot, FormatEntry

logger = logging.getLogger(__name__)


class ItemHandle(ABC):
    """One clipboard item as exposed by a platform accessor."""

    @abstractmethod
    def _format_ids(self) -> List[str]:
        pass

    @abstractmethod
    def access(self, format_id: str) -> FormatEntry:
        pass

    def list_format_ids(self) -> List[str]:
        return sorted(set(self._format_ids()))


class ClipboardAccessor(ABC):
    """Scoped access to the platform clipboard.

    ``open()`` raises ``ClipboardUnavailable`` when the clipboard subsystem
    cannot be reached. Readers handed out through ``FormatEntry`` are only
    valid while the accessor is open.
    """

    def __init__(self):
        self._opened = False

    @classmethod
    def from_settings(cls, settings: DumpSettings) -> "ClipboardAccessor":
        return cls()

    @abstractmethod
    def _open(self) -> None:
        pass

    @abstractmethod
    def _close(self) -> None:
        pass

    @abstractmethod
    def list_items(self) -> List[ItemHandle]:
        pass

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self) -> None:
        if self._opened:
            return
        logger.debug(f"Opening clipboard via {type(self).__name__}")
        self._open()
        self._opened = True

    def close(self) -> None:
        if not self._opened:
            return
        self._opened = False
        try:
            self._close()
        finally:
            logger.debug(f"Closed clipboard via {type(self).__name__}")

    def __enter__(self) -> "ClipboardAccessor":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def snapshot(self) -> ClipboardSnapshot:
        items = []
        for index, handle in enumerate(self.list_items()):
            entries = tuple(handle.access(format_id) for format_id in handle.list_format_ids())
            items.append(ClipboardItem(index=index, entries=entries))
        return ClipboardSnapshot(items=tuple(items))
