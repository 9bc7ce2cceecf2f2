import io
from typing import Any, Optional, Tuple

from PIL import Image

from clipdump.errors import EncodeFailure


ENCODING = "PNG"


def load_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def image_size(image: Any) -> Optional[Tuple[int, int]]:
    size = getattr(image, "size", None)
    if not isinstance(size, tuple) or len(size) != 2:
        return None
    width, height = size
    if not isinstance(width, int) or not isinstance(height, int):
        return None
    return width, height


def encode_png(format_id: str, image: Any) -> bytes:
    """Re-encode a decoded image as PNG without ancillary metadata.

    Native bitmap payloads differ between platforms and reads; the pixel data
    re-encoded this way does not. Raises ``EncodeFailure`` on any error.
    """
    if image is None:
        raise EncodeFailure(format_id, ValueError("no image data"))

    output = io.BytesIO()
    try:
        if image.mode not in ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"):
            image = image.convert("RGBA")
        image.save(output, format=ENCODING)
    except Exception as e:
        raise EncodeFailure(format_id, e) from e
    return output.getvalue()
