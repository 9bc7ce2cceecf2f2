import platform
from typing import Optional, Type

from clipdump.clipboard.base import ClipboardAccessor
from clipdump.config import DumpSettings
from clipdump.errors import ClipboardUnavailable


def get_accessor_class() -> Type[ClipboardAccessor]:
    system = platform.system()

    if system == "Windows":
        from clipdump.clipboard.windows import WindowsClipboard
        return WindowsClipboard
    elif system == "Linux":
        from clipdump.clipboard.linux import LinuxClipboard
        return LinuxClipboard
    elif system == "Darwin":
        from clipdump.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    else:
        raise ClipboardUnavailable(f"Platform '{system}' is not supported")


def get_accessor(settings: Optional[DumpSettings] = None) -> ClipboardAccessor:
    settings = settings or DumpSettings()
    return get_accessor_class().from_settings(settings)
