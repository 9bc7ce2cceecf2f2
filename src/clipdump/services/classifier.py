"""Decide how each clipboard format is interpreted and rendered.

The rules run in priority order and the first one that matches wins:

1. known textual format whose text read succeeds -> text / rich text
2. file-list format whose payload yields paths -> file list
3. image format -> image
4. raw bytes readable -> binary
5. text readable (any other format) -> text, marked as fallback
6. nothing readable -> unreadable
"""

import logging
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

from clipdump.errors import FormatReadFailure
from clipdump.models.classification import DEFAULT_PREVIEW_BYTES, Classification, Kind
from clipdump.models.snapshot import FormatEntry
from clipdump.utils.paths import parse_path_list

logger = logging.getLogger(__name__)

TEXT_FORMATS = frozenset({
    # macOS
    "public.utf8-plain-text",
    "public.utf16-plain-text",
    "public.utf16-external-plain-text",
    "public.plain-text",
    "public.text",
    "public.url",
    "public.file-url",
    "NSStringPboardType",
    # Windows
    "UnicodeText",
    "Text",
    "OemText",
    "UniformResourceLocator",
    "UniformResourceLocatorW",
    # X11 / Wayland
    "UTF8_STRING",
    "STRING",
    "TEXT",
    "text/plain",
    "text/plain;charset=utf-8",
    "text/x-moz-url",
})

RICH_TEXT_FORMATS = frozenset({
    "public.rtf",
    "public.html",
    "public.comma-separated-values-text",
    "net.daringfireball.markdown",
    "HTML Format",
    "Html",
    "Rich Text Format",
    "Rtf",
    "Csv",
    "text/html",
    "text/rtf",
    "text/richtext",
    "text/markdown",
    "text/csv",
})

FILE_LIST_FORMATS = frozenset({
    "FileDrop",
    "NSFilenamesPboardType",
    "text/uri-list",
    "x-special/gnome-copied-files",
})

IMAGE_FORMATS = frozenset({
    "public.png",
    "public.tiff",
    "public.jpeg",
    "com.compuserve.gif",
    "com.microsoft.bmp",
    "NSTIFFPboardType",
    "Apple PNG pasteboard type",
    "Bitmap",
    "DeviceIndependentBitmap",
    "DeviceIndependentBitmapV5",
    "TaggedImageFileFormat",
    "PNG",
})


def is_text_format(format_id: str) -> bool:
    return format_id in TEXT_FORMATS or format_id in RICH_TEXT_FORMATS


def is_rich_text_format(format_id: str) -> bool:
    return format_id in RICH_TEXT_FORMATS


def is_file_list_format(format_id: str) -> bool:
    return format_id in FILE_LIST_FORMATS


def is_image_format(format_id: str) -> bool:
    return format_id in IMAGE_FORMATS or format_id.lower().startswith("image/")


class PayloadView(Protocol):
    def has_text(self) -> bool: ...

    def has_bytes(self) -> bool: ...

    def has_paths(self) -> bool: ...


_MISSING = object()


class EntryView:
    """Reads a FormatEntry lazily, at most once per accessor.

    Exceptions raised by the platform readers are recorded as
    ``FormatReadFailure`` and the read is treated as absent.
    """

    def __init__(self, entry: FormatEntry):
        self.entry = entry
        self.failures: List[FormatReadFailure] = []
        self._text: Any = _MISSING
        self._bytes: Any = _MISSING
        self._paths: Any = _MISSING
        self._image: Any = _MISSING

    def _read(self, fetcher: Optional[Callable[[], Any]]) -> Any:
        if fetcher is None:
            return None
        try:
            return fetcher()
        except Exception as e:
            failure = FormatReadFailure(self.entry.format_id, e)
            logger.warning(str(failure))
            self.failures.append(failure)
            return None

    @property
    def text(self) -> Optional[str]:
        if self._text is _MISSING:
            self._text = self._read(self.entry.fetch_text)
        return self._text

    @property
    def data(self) -> Optional[bytes]:
        if self._bytes is _MISSING:
            self._bytes = self._read(self.entry.fetch_bytes)
        return self._bytes

    @property
    def paths(self) -> Optional[List[str]]:
        if self._paths is _MISSING:
            if self.entry.fetch_paths is not None:
                paths = self._read(self.entry.fetch_paths)
            elif self.text is not None:
                paths = parse_path_list(self.text)
            elif self.data is not None:
                paths = parse_path_list(self.data)
            else:
                paths = None
            self._paths = list(paths) if paths else None
        return self._paths

    @property
    def image(self) -> Any:
        if self._image is _MISSING:
            self._image = self._read(self.entry.fetch_image)
        return self._image

    def has_text(self) -> bool:
        return self.text is not None

    def has_bytes(self) -> bool:
        return self.data is not None

    def has_paths(self) -> bool:
        return self.paths is not None


Rule = Callable[[str, PayloadView], Optional[Tuple[Kind, bool]]]


def _known_text_rule(format_id: str, view: PayloadView) -> Optional[Tuple[Kind, bool]]:
    if is_text_format(format_id) and view.has_text():
        return (Kind.RICH_TEXT if is_rich_text_format(format_id) else Kind.TEXT), False
    return None


def _file_list_rule(format_id: str, view: PayloadView) -> Optional[Tuple[Kind, bool]]:
    if is_file_list_format(format_id) and view.has_paths():
        return Kind.FILE_LIST, False
    return None


def _image_rule(format_id: str, view: PayloadView) -> Optional[Tuple[Kind, bool]]:
    if is_image_format(format_id):
        return Kind.IMAGE, False
    return None


def _binary_rule(format_id: str, view: PayloadView) -> Optional[Tuple[Kind, bool]]:
    if view.has_bytes():
        return Kind.BINARY, False
    return None


def _text_fallback_rule(format_id: str, view: PayloadView) -> Optional[Tuple[Kind, bool]]:
    if view.has_text():
        return Kind.TEXT, True
    return None


RULES: Sequence[Rule] = (
    _known_text_rule,
    _file_list_rule,
    _image_rule,
    _binary_rule,
    _text_fallback_rule,
)


def classify(
    format_id: str,
    view: PayloadView,
    max_preview_bytes: int = DEFAULT_PREVIEW_BYTES,
) -> Classification:
    for rule in RULES:
        match = rule(format_id, view)
        if match is not None:
            kind, fallback = match
            return Classification(kind=kind, fallback=fallback, max_preview_bytes=max_preview_bytes)
    return Classification(kind=Kind.UNREADABLE, max_preview_bytes=max_preview_bytes)
