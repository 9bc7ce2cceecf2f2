import io
import logging
import time
from typing import Any, Dict, List, Optional

import win32clipboard as wc
import win32con
from PIL import BmpImagePlugin

from clipdump.clipboard.base import ClipboardAccessor, ItemHandle
from clipdump.errors import ClipboardUnavailable
from clipdump.models.snapshot import FormatEntry

logger = logging.getLogger(__name__)

# Standard formats, named the way .NET DataFormats reports them.
STANDARD_FORMAT_NAMES: Dict[int, str] = {
    win32con.CF_TEXT: "Text",
    win32con.CF_BITMAP: "Bitmap",
    win32con.CF_METAFILEPICT: "MetaFilePict",
    win32con.CF_SYLK: "SymbolicLink",
    win32con.CF_DIF: "DataInterchangeFormat",
    win32con.CF_TIFF: "TaggedImageFileFormat",
    win32con.CF_OEMTEXT: "OemText",
    win32con.CF_DIB: "DeviceIndependentBitmap",
    win32con.CF_PALETTE: "Palette",
    win32con.CF_PENDATA: "PenData",
    win32con.CF_RIFF: "RiffAudio",
    win32con.CF_WAVE: "WaveAudio",
    win32con.CF_UNICODETEXT: "UnicodeText",
    win32con.CF_ENHMETAFILE: "EnhancedMetafile",
    win32con.CF_HDROP: "FileDrop",
    win32con.CF_LOCALE: "Locale",
    win32con.CF_DIBV5: "DeviceIndependentBitmapV5",
}

# GDI handles; their data is only readable through a synthesized format.
_HANDLE_FORMATS = {
    win32con.CF_BITMAP,
    win32con.CF_METAFILEPICT,
    win32con.CF_PALETTE,
    win32con.CF_ENHMETAFILE,
}

_ANSI_TEXT_CODECS = {
    win32con.CF_TEXT: "mbcs",
    win32con.CF_OEMTEXT: "oem",
}

_IMAGE_SOURCES = {
    win32con.CF_BITMAP: win32con.CF_DIB,
    win32con.CF_DIB: win32con.CF_DIB,
    win32con.CF_DIBV5: win32con.CF_DIBV5,
}


def format_name(format_id: int) -> str:
    if format_id in STANDARD_FORMAT_NAMES:
        return STANDARD_FORMAT_NAMES[format_id]
    try:
        return wc.GetClipboardFormatName(format_id)
    except Exception:
        return f"Format{format_id}"


def _strip_nul(data: bytes) -> bytes:
    return data.split(b"\x00", 1)[0]


class WindowsItem(ItemHandle):

    def __init__(self, formats: Dict[str, int]):
        self._formats = formats

    def _format_ids(self) -> List[str]:
        return list(self._formats)

    def access(self, format_id: str) -> FormatEntry:
        code = self._formats[format_id]

        if code == win32con.CF_UNICODETEXT:
            return FormatEntry(format_id, fetch_text=self._unicode_text, fetch_bytes=lambda: self._raw(code))
        if code in _ANSI_TEXT_CODECS:
            return FormatEntry(format_id, fetch_text=lambda: self._ansi_text(code), fetch_bytes=lambda: self._raw(code))
        if code == win32con.CF_HDROP:
            return FormatEntry(format_id, fetch_paths=self._dropped_files)
        if code in _IMAGE_SOURCES:
            source = _IMAGE_SOURCES[code]
            return FormatEntry(format_id, fetch_image=lambda: self._dib_image(source))
        if code in _HANDLE_FORMATS:
            return FormatEntry(format_id)
        return FormatEntry(format_id, fetch_text=lambda: self._registered_text(code), fetch_bytes=lambda: self._raw(code))

    def _raw(self, code: int) -> Optional[bytes]:
        if not wc.IsClipboardFormatAvailable(code):
            return None
        data = wc.GetClipboardData(code)
        if isinstance(data, str):
            return data.encode("utf-16-le")
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        return None

    def _unicode_text(self) -> Optional[str]:
        text = wc.GetClipboardData(win32con.CF_UNICODETEXT)
        return text if isinstance(text, str) else None

    def _ansi_text(self, code: int) -> Optional[str]:
        data = wc.GetClipboardData(code)
        if isinstance(data, str):
            return data
        if data is None:
            return None
        return _strip_nul(bytes(data)).decode(_ANSI_TEXT_CODECS[code])

    def _registered_text(self, code: int) -> Optional[str]:
        data = self._raw(code)
        if data is None:
            return None
        try:
            return _strip_nul(data).decode("utf-8")
        except UnicodeDecodeError:
            return None

    def _dropped_files(self) -> Optional[List[str]]:
        files = wc.GetClipboardData(win32con.CF_HDROP)
        if isinstance(files, str):
            files = [files]
        return [str(path) for path in files or []]

    def _dib_image(self, source: int) -> Any:
        data = wc.GetClipboardData(source)
        if not data:
            return None
        image = BmpImagePlugin.DibImageFile(io.BytesIO(bytes(data)))
        image.load()
        return image


class WindowsClipboard(ClipboardAccessor):
    open_attempts = 3
    retry_delay = 0.05

    def _open(self) -> None:
        last_error: Optional[Exception] = None
        for _ in range(self.open_attempts):
            try:
                wc.OpenClipboard()
                return
            except Exception as e:
                last_error = e
                time.sleep(self.retry_delay)
        raise ClipboardUnavailable(f"Could not open the Windows clipboard: {last_error}")

    def _close(self) -> None:
        wc.CloseClipboard()

    def list_items(self) -> List[ItemHandle]:
        formats: Dict[str, int] = {}
        try:
            code = wc.EnumClipboardFormats(0)
            while code:
                formats[format_name(code)] = code
                code = wc.EnumClipboardFormats(code)
        except Exception as e:
            raise ClipboardUnavailable(f"Could not enumerate Windows clipboard formats: {e}") from e

        if not formats:
            return []
        logger.debug(f"Windows clipboard formats: {sorted(formats)}")
        return [WindowsItem(formats)]
