from clipdump.models.classification import DEFAULT_PREVIEW_BYTES, Classification, Kind
from clipdump.models.snapshot import ClipboardItem, ClipboardSnapshot, FormatEntry

__all__ = [
    'DEFAULT_PREVIEW_BYTES',
    'Classification',
    'ClipboardItem',
    'ClipboardSnapshot',
    'FormatEntry',
    'Kind',
]
