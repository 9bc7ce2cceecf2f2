import logging
from typing import Any, List, Optional

try:
    from AppKit import NSPasteboard
    HAS_APPKIT = True
except ImportError:
    HAS_APPKIT = False

from clipdump.clipboard.base import ClipboardAccessor, ItemHandle
from clipdump.errors import ClipboardUnavailable
from clipdump.models.snapshot import FormatEntry
from clipdump.services.classifier import is_image_format
from clipdump.utils.imaging import load_image

logger = logging.getLogger(__name__)

FILENAMES_TYPE = "NSFilenamesPboardType"


class MacOSItem(ItemHandle):

    def __init__(self, pasteboard_item: Any):
        self._item = pasteboard_item

    def _format_ids(self) -> List[str]:
        return [str(pb_type) for pb_type in (self._item.types() or [])]

    def access(self, format_id: str) -> FormatEntry:
        if format_id == FILENAMES_TYPE:
            return FormatEntry(format_id, fetch_paths=lambda: self._filenames(format_id))
        if is_image_format(format_id):
            return FormatEntry(
                format_id,
                fetch_bytes=lambda: self._data(format_id),
                fetch_image=lambda: self._image(format_id),
            )
        return FormatEntry(
            format_id,
            fetch_text=lambda: self._string(format_id),
            fetch_bytes=lambda: self._data(format_id),
        )

    def _string(self, pb_type: str) -> Optional[str]:
        text = self._item.stringForType_(pb_type)
        return str(text) if text is not None else None

    def _data(self, pb_type: str) -> Optional[bytes]:
        data = self._item.dataForType_(pb_type)
        return bytes(data) if data is not None else None

    def _image(self, pb_type: str) -> Any:
        data = self._data(pb_type)
        if not data:
            return None
        return load_image(data)

    def _filenames(self, pb_type: str) -> Optional[List[str]]:
        plist = self._item.propertyListForType_(pb_type)
        if plist is None:
            return None
        return [str(path) for path in plist]


class MacOSClipboard(ClipboardAccessor):

    def __init__(self):
        super().__init__()
        self._pasteboard = None

    def _open(self) -> None:
        if not HAS_APPKIT:
            raise ClipboardUnavailable("AppKit is not available; install pyobjc-framework-Cocoa")
        self._pasteboard = NSPasteboard.generalPasteboard()
        if self._pasteboard is None:
            raise ClipboardUnavailable("NSPasteboard.generalPasteboard() returned nothing")

    def _close(self) -> None:
        self._pasteboard = None

    def list_items(self) -> List[ItemHandle]:
        items = self._pasteboard.pasteboardItems() or []
        logger.debug(f"Pasteboard holds {len(items)} item(s)")
        return [MacOSItem(item) for item in items]
