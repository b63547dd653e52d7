"""pbpup: push build output into a forum plugin editor through a scripted browser."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("pbpup")
except Exception:
    __version__ = "0.0.0"
