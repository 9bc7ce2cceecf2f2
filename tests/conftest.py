import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Make src importable without an install
REPO_ROOT = Path(__file__).resolve().parent.parent
SRC = REPO_ROOT / "src"
sys.path.insert(0, str(SRC))

from clipdump.clipboard.base import ClipboardAccessor, ItemHandle  # type: ignore
from clipdump.models.snapshot import FormatEntry  # type: ignore


class FakeItem(ItemHandle):

    def __init__(self, entries: Dict[str, FormatEntry]):
        self.entries = entries

    def _format_ids(self) -> List[str]:
        return list(self.entries)

    def access(self, format_id: str) -> FormatEntry:
        return self.entries[format_id]


class FakeClipboard(ClipboardAccessor):
    """In-memory accessor; readers work only while the accessor is open."""

    def __init__(self, items: List[Dict[str, FormatEntry]], open_error: Optional[Exception] = None,
                 list_error: Optional[Exception] = None):
        super().__init__()
        self.items = items
        self.open_error = open_error
        self.list_error = list_error
        self.open_calls = 0
        self.close_calls = 0

    def _open(self) -> None:
        self.open_calls += 1
        if self.open_error is not None:
            raise self.open_error

    def _close(self) -> None:
        self.close_calls += 1

    def list_items(self) -> List[ItemHandle]:
        if self.list_error is not None:
            raise self.list_error
        return [FakeItem(entries) for entries in self.items]


def raiser(exc: Exception):
    def fetch():
        raise exc
    return fetch


@pytest.fixture
def fake_clipboard():
    return FakeClipboard


@pytest.fixture
def failing_fetch():
    return raiser
