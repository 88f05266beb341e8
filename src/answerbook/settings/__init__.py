"""Settings package: re-exports the cached settings accessor."""

from __future__ import annotations

from answerbook.settings.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
