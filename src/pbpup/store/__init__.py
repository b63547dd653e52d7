"""Profile persistence: SQL schema, engine helpers, and ProfileStore."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pbpup.store.profile_store import ProfileStore


def build_profile_store(db_path: str | Path | None = None) -> "ProfileStore":
    """Factory: return the SQLite ``ProfileStore`` honouring pbpup settings.

    Args:
        db_path: Optional override for the SQLite file path. Defaults to
            ``get_settings().store.path``.
    """
    from pbpup.store.profile_store import SqlProfileStore

    return SqlProfileStore(db_path=db_path)
