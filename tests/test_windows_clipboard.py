import importlib
import io
import sys
import types

import pytest
from PIL import Image

from clipdump.errors import ClipboardUnavailable
from clipdump.services.dump_service import DumpService

CF = {
    "CF_TEXT": 1,
    "CF_BITMAP": 2,
    "CF_METAFILEPICT": 3,
    "CF_SYLK": 4,
    "CF_DIF": 5,
    "CF_TIFF": 6,
    "CF_OEMTEXT": 7,
    "CF_DIB": 8,
    "CF_PALETTE": 9,
    "CF_PENDATA": 10,
    "CF_RIFF": 11,
    "CF_WAVE": 12,
    "CF_UNICODETEXT": 13,
    "CF_ENHMETAFILE": 14,
    "CF_HDROP": 15,
    "CF_LOCALE": 16,
    "CF_DIBV5": 17,
}

CF_HTML = 49161
CF_PRIVATE = 49999


class FakeWin32Clipboard:
    """Stands in for pywin32's ``win32clipboard`` over an in-memory board."""

    def __init__(self):
        self.data = {}
        self.names = {CF_HTML: "HTML Format"}
        self.open_failures = 0
        self.enum_error = None
        self.opened = False
        self.open_calls = 0
        self.close_calls = 0

    def module(self) -> types.ModuleType:
        module = types.ModuleType("win32clipboard")
        for name in ("OpenClipboard", "CloseClipboard", "EnumClipboardFormats",
                     "GetClipboardFormatName", "IsClipboardFormatAvailable", "GetClipboardData"):
            setattr(module, name, getattr(self, name))
        return module

    def OpenClipboard(self):
        self.open_calls += 1
        if self.open_calls <= self.open_failures:
            raise RuntimeError("Access is denied.")
        self.opened = True

    def CloseClipboard(self):
        self.close_calls += 1
        self.opened = False

    def EnumClipboardFormats(self, code):
        if self.enum_error is not None:
            raise self.enum_error
        codes = list(self.data)
        if code == 0:
            return codes[0] if codes else 0
        position = codes.index(code) + 1
        return codes[position] if position < len(codes) else 0

    def GetClipboardFormatName(self, code):
        if code not in self.names:
            raise RuntimeError("The parameter is incorrect.")
        return self.names[code]

    def IsClipboardFormatAvailable(self, code):
        return code in self.data

    def GetClipboardData(self, code):
        if not self.opened:
            raise RuntimeError("clipboard is not open")
        return self.data[code]


@pytest.fixture
def board(monkeypatch):
    board = FakeWin32Clipboard()
    monkeypatch.setitem(sys.modules, "win32clipboard", board.module())
    monkeypatch.setitem(sys.modules, "win32con", types.SimpleNamespace(**CF))
    monkeypatch.delitem(sys.modules, "clipdump.clipboard.windows", raising=False)
    return board


@pytest.fixture
def windows(board, monkeypatch):
    module = importlib.import_module("clipdump.clipboard.windows")
    monkeypatch.setitem(sys.modules, "clipdump.clipboard.windows", module)
    # mbcs and oem are only registered on Windows
    monkeypatch.setattr(module, "_ANSI_TEXT_CODECS", {CF["CF_TEXT"]: "cp1252", CF["CF_OEMTEXT"]: "cp437"})
    monkeypatch.setattr(module.WindowsClipboard, "retry_delay", 0)
    return module


def dib_bytes(size=(4, 3)) -> bytes:
    output = io.BytesIO()
    Image.new("RGB", size, (200, 10, 10)).save(output, format="BMP")
    # drop the 14-byte BITMAPFILEHEADER
    return output.getvalue()[14:]


def dump(windows) -> str:
    sink = io.StringIO()
    DumpService(windows.WindowsClipboard(), sink=sink).run()
    return sink.getvalue()


def block(output: str, format_id: str) -> str:
    return output.split(f"--- {format_id} ---\n", 1)[1].split("\n\n", 1)[0]


def test_format_names(board, windows):
    assert windows.format_name(CF["CF_UNICODETEXT"]) == "UnicodeText"
    assert windows.format_name(CF["CF_HDROP"]) == "FileDrop"
    assert windows.format_name(CF["CF_DIBV5"]) == "DeviceIndependentBitmapV5"
    assert windows.format_name(CF_HTML) == "HTML Format"
    assert windows.format_name(CF_PRIVATE) == f"Format{CF_PRIVATE}"


def test_formats_listed_sorted_in_one_item(board, windows):
    board.data = {
        CF["CF_UNICODETEXT"]: "hi",
        CF_HTML: b"<b>hi</b>\x00",
        CF["CF_TEXT"]: b"hi\x00",
    }
    with windows.WindowsClipboard() as accessor:
        items = accessor.list_items()
        assert len(items) == 1
        assert items[0].list_format_ids() == ["HTML Format", "Text", "UnicodeText"]


def test_empty_clipboard(board, windows):
    assert dump(windows) == "Clipboard: empty\n"
    assert board.close_calls == 1


def test_text_formats(board, windows):
    board.data = {
        CF["CF_UNICODETEXT"]: "h\u00e9llo",
        CF["CF_TEXT"]: b"caf\xe9\x00trailing",
        CF["CF_OEMTEXT"]: b"r\x82sum\x82\x00\x00",
    }
    output = dump(windows)

    assert block(output, "UnicodeText") == (
        "Kind      : text\nChars     : 5\nUTF8 bytes: 6\nContent   :\nh\u00e9llo"
    )
    assert "Chars     : 4\nUTF8 bytes: 5\nContent   :\ncaf\u00e9" in block(output, "Text")
    assert block(output, "OemText").endswith("Content   :\nr\u00e9sum\u00e9")


def test_registered_html_is_rich_text(board, windows):
    board.data = {CF_HTML: b"<b>hi</b>\x00\x00"}
    output = dump(windows)

    assert block(output, "HTML Format") == (
        "Kind      : rich text\nChars     : 9\nUTF8 bytes: 9\nContent   :\n<b>hi</b>"
    )


def test_unnamed_registered_format_is_binary(board, windows):
    board.data = {CF_PRIVATE: b"\x00\x01\x02"}
    output = dump(windows)

    assert f"  - Format{CF_PRIVATE}" in output
    assert block(output, f"Format{CF_PRIVATE}") == "Kind      : binary\nBytes     : 3\nHex(128)  : 00 01 02"


def test_file_drop_paths(board, windows):
    board.data = {CF["CF_HDROP"]: ("C:\\Users\\me\\a.txt", "C:\\Users\\me\\b b.txt")}
    output = dump(windows)

    assert block(output, "FileDrop") == (
        "Kind      : file list\nCount     : 2\nContent   :\nC:\\Users\\me\\a.txt\nC:\\Users\\me\\b b.txt"
    )


def test_bitmap_reads_synthesized_dib(board, windows):
    board.data = {
        CF["CF_BITMAP"]: 0x1234,
        CF["CF_DIB"]: dib_bytes((4, 3)),
    }
    output = dump(windows)

    for format_id in ("Bitmap", "DeviceIndependentBitmap"):
        rendered = block(output, format_id)
        assert "Kind      : image" in rendered
        assert "Encoding  : PNG" in rendered
        assert "Size      : 4x3" in rendered
        assert "Hex(128)  : 89 50 4E 47" in rendered


def test_gdi_handle_formats_are_unreadable(board, windows):
    board.data = {
        CF["CF_PALETTE"]: 0x10,
        CF["CF_METAFILEPICT"]: 0x20,
        CF["CF_ENHMETAFILE"]: 0x30,
    }
    output = dump(windows)

    for format_id in ("Palette", "MetaFilePict", "EnhancedMetafile"):
        assert block(output, format_id) == "Unable to read data for this type."


def test_open_retries_then_unavailable(board, windows):
    board.open_failures = 10
    accessor = windows.WindowsClipboard()
    with pytest.raises(ClipboardUnavailable, match="Access is denied"):
        accessor.open()
    assert board.open_calls == windows.WindowsClipboard.open_attempts
    assert not accessor.is_open
    assert board.close_calls == 0


def test_open_succeeds_on_retry(board, windows):
    board.open_failures = 2
    board.data = {CF["CF_UNICODETEXT"]: "x"}
    output = dump(windows)

    assert board.open_calls == 3
    assert "Content   :\nx" in output
    assert board.close_calls == 1


def test_enumeration_failure_is_unavailable(board, windows):
    board.data = {CF["CF_UNICODETEXT"]: "x"}
    board.enum_error = RuntimeError("Thread does not have a clipboard open.")
    sink = io.StringIO()

    with pytest.raises(ClipboardUnavailable, match="enumerate"):
        DumpService(windows.WindowsClipboard(), sink=sink).run()
    assert sink.getvalue() == ""
    assert board.close_calls == 1
    assert not board.opened
