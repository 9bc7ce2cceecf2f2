"""
Platform clipboard access.

Each platform module exposes a ClipboardAccessor that enumerates clipboard
items and hands out lazy per-format readers.
"""

from clipdump.clipboard.base import ClipboardAccessor, ItemHandle
from clipdump.clipboard.factory import get_accessor, get_accessor_class

__all__ = [
    'ClipboardAccessor',
    'ItemHandle',
    'get_accessor',
    'get_accessor_class',
]
