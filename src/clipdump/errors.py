"""Error types raised while dumping the clipboard."""

from typing import Optional


class ClipdumpError(Exception):
    pass


class ClipboardUnavailable(ClipdumpError):
    """The platform clipboard could not be reached at all."""


class FormatReadFailure(ClipdumpError):

    def __init__(self, format_id: str, cause: Optional[BaseException] = None):
        self.format_id = format_id
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to read '{format_id}'{detail}")


class EncodeFailure(ClipdumpError):

    def __init__(self, format_id: str, cause: Optional[BaseException] = None):
        self.format_id = format_id
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to encode image '{format_id}'{detail}")
