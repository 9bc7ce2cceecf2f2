"""clipdump - diagnostic dump of every format on the system clipboard."""

from clipdump.errors import ClipboardUnavailable, EncodeFailure, FormatReadFailure

__version__ = "0.1.0"

__all__ = [
    'ClipboardUnavailable',
    'EncodeFailure',
    'FormatReadFailure',
    '__version__',
]
