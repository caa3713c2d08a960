"""Render mode selection.

The mode is decided once from the launch arguments and handed to the
dispatcher; nothing reads it ambiently afterwards.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

DEV_FLAG = "--dev"


class RenderMode(str, Enum):
    """How pages are produced for the lifetime of the process."""

    LIVE = "live"
    COMPILED = "compiled"

    @property
    def label(self) -> str:
        return "development" if self is RenderMode.LIVE else "production"


def select_render_mode(argv: Sequence[str]) -> RenderMode:
    """Return LIVE when the development flag was passed, COMPILED otherwise."""
    return RenderMode.LIVE if DEV_FLAG in argv else RenderMode.COMPILED
