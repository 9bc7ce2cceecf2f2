import logging
import os
import shutil
import subprocess
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from clipdump.clipboard.base import ClipboardAccessor, ItemHandle
from clipdump.config import DumpSettings
from clipdump.errors import ClipboardUnavailable
from clipdump.models.snapshot import FormatEntry
from clipdump.services.classifier import is_file_list_format, is_image_format
from clipdump.utils.imaging import load_image
from clipdump.utils.paths import parse_path_list

logger = logging.getLogger(__name__)

# X selection protocol targets, not clipboard data.
_PROTOCOL_TARGETS = {"TARGETS", "TIMESTAMP", "MULTIPLE", "SAVE_TARGETS"}

# ICCCM STRING is Latin-1 by definition.
_LATIN1_TARGETS = {"STRING"}

# stderr of a listing that failed only because nothing is copied.
_EMPTY_SELECTION_MESSAGES = ("nothing is copied", "no selection", "not available")


def _is_empty_selection(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _EMPTY_SELECTION_MESSAGES)


class LinuxItem(ItemHandle):
    """Single clipboard item; each target is read from the tool at most once."""

    def __init__(self, targets: List[str], reader: Callable[[str], Optional[bytes]]):
        self._targets = targets
        self._reader = reader
        self._reads: Dict[str, Any] = {}

    def _format_ids(self) -> List[str]:
        return list(self._targets)

    def access(self, format_id: str) -> FormatEntry:
        fetch_bytes = partial(self._data, format_id)

        if is_file_list_format(format_id):
            return FormatEntry(format_id, fetch_bytes=fetch_bytes, fetch_paths=lambda: self._paths(format_id))
        if is_image_format(format_id):
            return FormatEntry(format_id, fetch_bytes=fetch_bytes, fetch_image=lambda: self._image(format_id))
        return FormatEntry(format_id, fetch_text=lambda: self._text(format_id), fetch_bytes=fetch_bytes)

    def _data(self, target: str) -> Optional[bytes]:
        if target not in self._reads:
            try:
                self._reads[target] = self._reader(target)
            except Exception as e:
                self._reads[target] = e
        result = self._reads[target]
        if isinstance(result, Exception):
            raise result
        return result

    def _text(self, target: str) -> Optional[str]:
        data = self._data(target)
        if data is None:
            return None
        encoding = "latin-1" if target in _LATIN1_TARGETS else "utf-8"
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            return None

    def _paths(self, target: str) -> Optional[List[str]]:
        data = self._data(target)
        if data is None:
            return None
        return parse_path_list(data)

    def _image(self, target: str) -> Any:
        data = self._data(target)
        if not data:
            return None
        return load_image(data)


class LinuxClipboard(ClipboardAccessor):
    """Clipboard access through ``wl-paste`` (Wayland) or ``xclip`` (X11)."""

    def __init__(self, backend: str = "auto", timeout: float = 1.5):
        super().__init__()
        self.requested_backend = backend
        self.timeout = timeout
        self.backend: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: DumpSettings) -> "LinuxClipboard":
        return cls(backend=settings.linux_backend, timeout=settings.command_timeout)

    def _open(self) -> None:
        self.backend = self._select_backend()
        logger.debug(f"Using {self.backend} clipboard backend")

    def _close(self) -> None:
        self.backend = None

    def _select_backend(self) -> str:
        wayland = bool(os.environ.get("WAYLAND_DISPLAY")) and shutil.which("wl-paste") is not None
        x11 = bool(os.environ.get("DISPLAY")) and shutil.which("xclip") is not None

        if self.requested_backend == "wayland":
            if not wayland:
                raise ClipboardUnavailable("wl-paste not found or WAYLAND_DISPLAY not set")
            return "wayland"
        if self.requested_backend == "x11":
            if not x11:
                raise ClipboardUnavailable("xclip not found or DISPLAY not set")
            return "x11"

        if wayland:
            return "wayland"
        if x11:
            return "x11"
        raise ClipboardUnavailable("No usable display: need wl-paste with WAYLAND_DISPLAY or xclip with DISPLAY")

    def list_items(self) -> List[ItemHandle]:
        command = self._list_command()
        try:
            result = self._run(command)
        except (subprocess.TimeoutExpired, OSError) as e:
            raise ClipboardUnavailable(f"Could not list clipboard targets: {e}") from e

        if result.returncode != 0:
            message = (result.stderr or b"").decode("utf-8", errors="ignore").strip()
            if not _is_empty_selection(message):
                raise ClipboardUnavailable(
                    f"{command[0]} exited with {result.returncode}: {message or 'no error output'}")
            logger.debug(f"{command[0]} reports an empty clipboard: {message}")
            return []

        targets = [
            target for target in self._parse_type_list(result.stdout)
            if target not in _PROTOCOL_TARGETS
        ]
        if not targets:
            return []
        return [LinuxItem(targets, self._read_target)]

    def _list_command(self) -> List[str]:
        if self.backend == "wayland":
            return ["wl-paste", "--list-types"]
        return ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"]

    def _read_target(self, target: str) -> Optional[bytes]:
        if self.backend == "wayland":
            command = ["wl-paste", "--type", target]
            if target.lower().startswith("text/"):
                command.append("--no-newline")
        else:
            command = ["xclip", "-selection", "clipboard", "-t", target, "-o"]
        return self._run_command(command)

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        """Run a clipboard tool. Timeouts and launch failures propagate."""
        return subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=self.timeout,
        )

    def _run_command(self, command: List[str]) -> Optional[bytes]:
        result = self._run(command)
        if result.returncode != 0:
            logger.debug(f"{command[0]} exited with {result.returncode}: {result.stderr!r}")
            return None
        return result.stdout
