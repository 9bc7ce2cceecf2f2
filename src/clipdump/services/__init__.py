"""Service layer for clipdump."""

from .classifier import EntryView, classify
from .dump_service import DumpService
from .renderer import RenderedBlock, render

__all__ = ["DumpService", "EntryView", "RenderedBlock", "classify", "render"]
