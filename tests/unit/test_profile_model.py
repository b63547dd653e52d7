"""Unit tests for the Profile handle and forum URL normalisation."""

from __future__ import annotations

import pytest

from pbpup.exceptions import ProfileError
from pbpup.models.profile import Profile, ProfileField, normalize_forum_url


class TestNormalizeForumUrl:
    @pytest.mark.parametrize(
        "hostname",
        [
            "example.com",
            "https://example.com",
            "http://example.com",
            "HTTPS://example.com/",
            "  example.com  ",
        ],
    )
    def test_single_https_prefix(self, hostname: str) -> None:
        assert normalize_forum_url(hostname) == "https://example.com"

    def test_idempotent(self) -> None:
        once = normalize_forum_url("forum.example.org")
        assert normalize_forum_url(once) == once


class TestProfile:
    def test_unset_fields_are_none(self, store) -> None:
        p = Profile("fresh", store)
        assert all(value is None for value in p.to_dict().values())

    def test_empty_string_counts_as_unset(self, store) -> None:
        store.set("legacy", "username", "")
        assert Profile("legacy", store).get(ProfileField.USERNAME) is None

    def test_reads_latest_store_value(self, profile, store) -> None:
        store.set("forumA", "plugin_name", "Widget")
        assert profile.get(ProfileField.PLUGIN_NAME) == "Widget"

    def test_forum_url_is_immutable(self, profile) -> None:
        with pytest.raises(ProfileError):
            profile.set(ProfileField.FORUM_URL, "https://other.example")
        assert profile.forum_url == "https://example.com"

    def test_clear_touches_one_field(self, profile) -> None:
        profile.set(ProfileField.USERNAME, "alice")
        profile.set(ProfileField.PLUGIN_NAME, "Widget")
        profile.clear(ProfileField.USERNAME)
        assert profile.get(ProfileField.USERNAME) is None
        assert profile.get(ProfileField.PLUGIN_NAME) == "Widget"
        assert profile.forum_url == "https://example.com"
