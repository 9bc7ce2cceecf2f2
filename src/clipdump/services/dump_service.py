import logging
import sys
from typing import Iterator, List, Optional, TextIO

from clipdump.clipboard.base import ClipboardAccessor
from clipdump.config import DumpSettings
from clipdump.models.snapshot import ClipboardItem, ClipboardSnapshot, FormatEntry
from clipdump.services.classifier import EntryView, classify
from clipdump.services.renderer import UNREADABLE_MESSAGE, RenderedBlock, render

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "Clipboard: empty"


class DumpService:
    """Writes a diagnostic dump of every clipboard format to a text sink."""

    def __init__(
        self,
        accessor: ClipboardAccessor,
        settings: Optional[DumpSettings] = None,
        sink: Optional[TextIO] = None,
    ) -> None:
        self.accessor = accessor
        self.settings = settings or DumpSettings()
        self.sink = sink if sink is not None else sys.stdout

    def run(self) -> ClipboardSnapshot:
        """Capture the clipboard and stream the dump.

        Raises ``ClipboardUnavailable`` if the clipboard cannot be opened or
        enumerated; every other failure is reported inside the dump.
        """
        with self.accessor:
            snapshot = self.accessor.snapshot()
            for line in self.dump_lines(snapshot):
                print(line, file=self.sink)
        return snapshot

    def dump_lines(self, snapshot: ClipboardSnapshot) -> Iterator[str]:
        if snapshot.is_empty:
            yield EMPTY_MESSAGE
            return

        yield f"Items: {len(snapshot.items)}"
        yield ""
        for item in snapshot.items:
            yield from self.item_lines(item)

    def item_lines(self, item: ClipboardItem) -> Iterator[str]:
        yield f"=== Item {item.index} ==="
        yield f"Types ({len(item.entries)}):"
        for format_id in item.format_ids:
            yield f"  - {format_id}"

        for entry in item.entries:
            yield ""
            yield from self.render_entry(entry).lines()
        yield ""
        yield ""

    def render_entry(self, entry: FormatEntry) -> RenderedBlock:
        view = EntryView(entry)
        try:
            classification = classify(
                entry.format_id, view, max_preview_bytes=self.settings.max_preview_bytes)
            logger.debug(f"{entry.format_id}: {classification.label}")
            return render(view, classification)
        except Exception as e:
            logger.exception(f"Failed to render {entry.format_id}")
            fields: List = [("Reason", f"{type(e).__name__}: {e}")]
            return RenderedBlock(title=entry.format_id, fields=fields, message=UNREADABLE_MESSAGE)
