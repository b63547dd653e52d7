"""Profile store with SQLite and in-memory backends.

Both backends expose the same small keyed interface: a value is addressed
by ``(profile, key)`` and a profile is an entry holding a flat mapping of
field keys to strings.

Usage::

    from pbpup.store import build_profile_store

    store = build_profile_store()
    store.set("forumA", "forum_url", "https://example.com")
    store.get("forumA", "forum_url")
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker

from pbpup.store import sql as sql_schema
from pbpup.store.sql import METADATA, build_session_factory

logger = logging.getLogger(__name__)


class ProfileStore:
    """Abstract-ish profile store interface implemented by both backends."""

    def get(self, profile: str, key: str) -> Any | None:
        """Return the stored value or ``None`` if absent."""
        raise NotImplementedError

    def set(self, profile: str, key: str, value: Any) -> None:
        """Store *value* under *key*, creating the profile if needed."""
        raise NotImplementedError

    def clear(self, profile: str, key: str) -> None:
        """Remove a single key from a profile (no-op if absent)."""
        raise NotImplementedError

    def delete(self, profile: str) -> None:
        """Remove a whole profile entry."""
        raise NotImplementedError

    def list_profiles(self) -> set[str]:
        """Return the names of every stored profile."""
        raise NotImplementedError

    def exists(self, profile: str) -> bool:
        return profile in self.list_profiles()


class InMemoryProfileStore(ProfileStore):
    """In-memory profile store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    def get(self, profile: str, key: str) -> Any | None:
        return self._data.get(profile, {}).get(key)

    def set(self, profile: str, key: str, value: Any) -> None:
        self._data.setdefault(profile, {})[key] = value

    def clear(self, profile: str, key: str) -> None:
        self._data.get(profile, {}).pop(key, None)

    def delete(self, profile: str) -> None:
        self._data.pop(profile, None)

    def list_profiles(self) -> set[str]:
        return set(self._data)


class SqlProfileStore(ProfileStore):
    """SQLite-backed profile store (one row per profile).

    Args:
        db_path: Convenience path for a local SQLite file. Mutually
            exclusive with *session_factory*.
        session_factory: Pre-configured ``sessionmaker`` (e.g. a shared
            test fixture).
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        session_factory: sessionmaker | None = None,
    ) -> None:
        if session_factory is not None:
            self._session_factory = session_factory
        else:
            self._session_factory = build_session_factory(db_path=db_path)

        # Ensure schema exists
        with self._session_factory() as session:
            METADATA.create_all(session.connection())
            session.commit()

    def _load(self, session, profile: str) -> dict[str, Any] | None:
        row = session.execute(
            sa.select(sql_schema.profiles.c.data).where(sql_schema.profiles.c.name == profile)
        ).first()
        if row is None:
            return None
        return dict(row[0] or {})

    def _save(self, session, profile: str, data: dict[str, Any], *, exists: bool) -> None:
        now = datetime.now(timezone.utc)
        if exists:
            session.execute(
                sa.update(sql_schema.profiles)
                .where(sql_schema.profiles.c.name == profile)
                .values(data=data, updated_at=now)
            )
        else:
            session.execute(
                sa.insert(sql_schema.profiles).values(
                    name=profile, data=data, created_at=now, updated_at=now
                )
            )

    def get(self, profile: str, key: str) -> Any | None:
        with self._session_factory() as session:
            data = self._load(session, profile)
        if data is None:
            return None
        return data.get(key)

    def set(self, profile: str, key: str, value: Any) -> None:
        with self._session_factory() as session:
            data = self._load(session, profile)
            exists = data is not None
            data = data or {}
            data[key] = value
            self._save(session, profile, data, exists=exists)
            session.commit()
        logger.debug("Stored %s on profile %s", key, profile)

    def clear(self, profile: str, key: str) -> None:
        with self._session_factory() as session:
            data = self._load(session, profile)
            if data is None or key not in data:
                return
            del data[key]
            self._save(session, profile, data, exists=True)
            session.commit()

    def delete(self, profile: str) -> None:
        with self._session_factory() as session:
            session.execute(sa.delete(sql_schema.profiles).where(sql_schema.profiles.c.name == profile))
            session.commit()
        logger.info("Deleted profile %s", profile)

    def list_profiles(self) -> set[str]:
        with self._session_factory() as session:
            rows = session.execute(sa.select(sql_schema.profiles.c.name)).all()
        return {row[0] for row in rows}
