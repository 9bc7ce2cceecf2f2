"""Runtime settings for a clipboard dump."""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

from clipdump.models.classification import DEFAULT_PREVIEW_BYTES


class DumpSettings(BaseModel):
    max_preview_bytes: int = Field(default=DEFAULT_PREVIEW_BYTES, ge=0)
    command_timeout: float = Field(default=1.5, gt=0)
    linux_backend: Literal["auto", "wayland", "x11"] = "auto"
    verbose: bool = False


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> DumpSettings:
    """Build settings from ``CLIPDUMP_*`` environment variables.

    Unset variables keep the model defaults. Raises ``pydantic.ValidationError``
    for values that do not validate.
    """
    env = os.environ if environ is None else environ
    values = {}

    if env.get("CLIPDUMP_MAX_PREVIEW_BYTES"):
        values["max_preview_bytes"] = env["CLIPDUMP_MAX_PREVIEW_BYTES"]
    if env.get("CLIPDUMP_TIMEOUT"):
        values["command_timeout"] = env["CLIPDUMP_TIMEOUT"]
    if env.get("CLIPDUMP_BACKEND"):
        values["linux_backend"] = env["CLIPDUMP_BACKEND"].lower()

    return DumpSettings(**values)
