"""Configuration loader for pbpup using Pydantic settings.

Config precedence (highest wins):
  1. Environment variables (PBPUP_* with __ for nesting)
  2. <config_dir>/settings.toml
  3. Built-in defaults

``config_dir`` is ``$PBPUP_CONFIG_DIR`` or ``~/.config/pbpup``.
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

CONFIG_DIR_ENV = "PBPUP_CONFIG_DIR"


def config_dir() -> Path:
    """Return the directory holding ``settings.toml`` and the profile database."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "pbpup"


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


BROWSER_CHANNELS = (
    "chromium",
    "chrome",
    "chrome-beta",
    "chrome-dev",
    "chrome-canary",
    "msedge",
    "msedge-beta",
    "msedge-dev",
    "msedge-canary",
)


class BrowserSettings(BaseSettings):
    """Playwright browser settings."""

    model_config = SettingsConfigDict(env_prefix="PBPUP_BROWSER__")

    headless: bool = False
    channel: str = ""  # e.g. "chrome" to drive an installed Chrome instead of bundled Chromium
    slow_mo_ms: int = Field(default=0, ge=0)
    timeout_ms: int = Field(default=30_000, gt=0)
    find_timeout_ms: int = Field(default=5_000, gt=0)

    @field_validator("channel")
    @classmethod
    def _known_channel(cls, value: str) -> str:
        value = value.strip().lower()
        if value and value not in BROWSER_CHANNELS:
            raise ValueError(f"unknown browser channel {value!r}, expected one of: {', '.join(BROWSER_CHANNELS)}")
        return value


class StoreSettings(BaseSettings):
    """Profile store location."""

    model_config = SettingsConfigDict(env_prefix="PBPUP_STORE__")

    path: str = "profiles.db"


class EditorSettings(BaseSettings):
    """Key chords sent to the remote plugin editor."""

    model_config = SettingsConfigDict(env_prefix="PBPUP_EDITOR__")

    select_all_keys: str = "ControlOrMeta+a"
    paste_keys: str = "Shift+Insert"


class BuildSettings(BaseSettings):
    """Build command execution."""

    model_config = SettingsConfigDict(env_prefix="PBPUP_BUILD__")

    timeout_sec: float | None = None


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root pbpup settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="PBPUP_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    config_dir: Path = Field(default_factory=config_dir)
    log_level: str = "WARNING"
    log_file: str = ""

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    editor: EditorSettings = Field(default_factory=EditorSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)

    @model_validator(mode="before")
    @classmethod
    def _merge_toml_file(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Layer settings.toml under env var overrides."""
        root = Path(values.get("config_dir") or config_dir())
        file_values = _load_toml(root / "settings.toml")

        merged: dict[str, Any] = {}
        for layer in (file_values, values):
            for key, val in layer.items():
                if isinstance(val, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **val}
                else:
                    merged[key] = val
        return merged

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Normalize the store path against config_dir."""
        store_path = Path(self.store.path).expanduser()
        if not store_path.is_absolute():
            self.store.path = str(self.config_dir / store_path)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
