"""pbpup settings package."""

from __future__ import annotations

from pbpup.settings.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
