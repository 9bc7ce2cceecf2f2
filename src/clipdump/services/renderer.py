import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from clipdump.errors import EncodeFailure
from clipdump.models.classification import Classification, Kind
from clipdump.services.classifier import EntryView
from clipdump.utils.imaging import ENCODING, encode_png, image_size, load_image

logger = logging.getLogger(__name__)

LABEL_WIDTH = 10
UNREADABLE_MESSAGE = "Unable to read data for this type."
ENCODE_FAILED_MARKER = "unable to encode image"


def hex_preview(data: bytes, limit: int) -> str:
    """Uppercase hex pairs of the first ``limit`` bytes, space separated."""
    return " ".join(f"{byte:02X}" for byte in data[:limit])


def utf8_length(text: str) -> int:
    return len(text.encode("utf-8", errors="surrogatepass"))


@dataclass(frozen=True)
class RenderedBlock:
    title: str
    fields: List[Tuple[str, str]] = field(default_factory=list)
    content: Optional[str] = None
    message: Optional[str] = None

    def lines(self) -> List[str]:
        out = [f"--- {self.title} ---"]
        if self.message is not None:
            out.append(self.message)
        for label, value in self.fields:
            out.append(f"{label:<{LABEL_WIDTH}}: {value}")
        if self.content is not None:
            out.append(f"{'Content':<{LABEL_WIDTH}}:")
            out.append(self.content)
        return out


def render(view: EntryView, classification: Classification) -> RenderedBlock:
    kind = classification.kind
    if kind in (Kind.TEXT, Kind.RICH_TEXT):
        return _render_text(view, classification)
    if kind == Kind.FILE_LIST:
        return _render_file_list(view, classification)
    if kind == Kind.IMAGE:
        return _render_image(view, classification)
    if kind == Kind.BINARY:
        return _render_binary(view, classification)
    return _render_unreadable(view)


def _render_text(view: EntryView, classification: Classification) -> RenderedBlock:
    text = view.text or ""
    return RenderedBlock(
        title=view.entry.format_id,
        fields=[
            ("Kind", classification.label),
            ("Chars", str(len(text))),
            ("UTF8 bytes", str(utf8_length(text))),
        ],
        content=text,
    )


def _render_file_list(view: EntryView, classification: Classification) -> RenderedBlock:
    paths = view.paths or []
    return RenderedBlock(
        title=view.entry.format_id,
        fields=[
            ("Kind", classification.label),
            ("Count", str(len(paths))),
        ],
        content="\n".join(paths),
    )


def _render_binary(view: EntryView, classification: Classification) -> RenderedBlock:
    data = view.data or b""
    limit = classification.max_preview_bytes
    return RenderedBlock(
        title=view.entry.format_id,
        fields=[
            ("Kind", classification.label),
            ("Bytes", str(len(data))),
            (f"Hex({limit})", hex_preview(data, limit)),
        ],
    )


def _render_image(view: EntryView, classification: Classification) -> RenderedBlock:
    format_id = view.entry.format_id
    fields = [("Kind", classification.label)]

    try:
        image = view.image
        if image is None and view.data is not None:
            try:
                image = load_image(view.data)
            except Exception as e:
                raise EncodeFailure(format_id, e) from e
        if image is None and view.failures:
            raise EncodeFailure(format_id, view.failures[-1].cause)

        size = image_size(image) if image is not None else None
        payload = encode_png(format_id, image)
    except EncodeFailure as e:
        reason = e.cause if e.cause is not None else e
        logger.warning(str(e))
        fields.append(("Encoding", f"{ENCODE_FAILED_MARKER} ({reason})"))
        return RenderedBlock(title=format_id, fields=fields)

    limit = classification.max_preview_bytes
    fields.extend([
        ("Encoding", ENCODING),
        ("Bytes", str(len(payload))),
        ("Size", f"{size[0]}x{size[1]}" if size else "unknown"),
        (f"Hex({limit})", hex_preview(payload, limit)),
    ])
    return RenderedBlock(title=format_id, fields=fields)


def _render_unreadable(view: EntryView) -> RenderedBlock:
    fields = []
    if view.failures:
        fields.append(("Reason", str(view.failures[-1])))
    return RenderedBlock(
        title=view.entry.format_id,
        fields=fields,
        message=UNREADABLE_MESSAGE,
    )
