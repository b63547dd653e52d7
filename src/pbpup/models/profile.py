"""Profile model: a named bundle of persisted per-forum settings.

A ``Profile`` does not cache anything. It is a handle pairing a profile name
with the store, so every read sees the latest persisted value and every
reset made by one flow is visible to the next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pbpup.exceptions import ProfileError

if TYPE_CHECKING:
    from pbpup.store.profile_store import ProfileStore

logger = logging.getLogger(__name__)

NAME_KEY = "name"
_SCHEMES = ("https://", "http://")


class ProfileField(str, Enum):
    """Persisted profile fields, keyed by their store key."""

    FORUM_URL = "forum_url"
    USERNAME = "username"
    ACCOUNT_ID = "account_id"
    PLUGIN_NAME = "plugin_name"
    BUILD_COMMAND = "build_command"


def normalize_forum_url(hostname: str) -> str:
    """Return ``https://<hostname>`` with exactly one scheme prefix.

    Any scheme the operator typed anyway and trailing slashes are dropped
    first.
    """
    host = hostname.strip()
    lowered = host.lower()
    for scheme in _SCHEMES:
        if lowered.startswith(scheme):
            host = host[len(scheme):]
            break
    return "https://" + host.rstrip("/")


@dataclass(frozen=True)
class Profile:
    """Handle on one stored profile."""

    name: str
    store: ProfileStore

    def get(self, field: ProfileField) -> str | None:
        """Return the stored value, treating an empty string as unset."""
        value = self.store.get(self.name, field.value)
        return value or None

    def set(self, field: ProfileField, value: str) -> None:
        if field is ProfileField.FORUM_URL and self.get(field):
            raise ProfileError(f"Profile {self.name!r} already has a forum URL")
        self.store.set(self.name, field.value, value)

    def clear(self, field: ProfileField) -> None:
        """Forget a single field after a remote operation proved it wrong."""
        logger.info("Clearing %s on profile %s", field.value, self.name)
        self.store.clear(self.name, field.value)

    @property
    def forum_url(self) -> str | None:
        return self.get(ProfileField.FORUM_URL)

    def to_dict(self) -> dict[str, str | None]:
        """Serialize the current field values."""
        return {field.value: self.get(field) for field in ProfileField}
