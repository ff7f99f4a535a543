"""
Runtime settings for the emoji service.

Values come from environment variables with sensible defaults:

* EMOJILIST_CATALOGUE_URL  - where to download emoji-test.txt from
* EMOJILIST_MAX_AGE_DAYS   - refresh the catalogue when older than this
* EMOJILIST_PORTABLE       - save the cache next to the application (1/true/yes)
* EMOJILIST_BASE_DIR       - application base directory (portable cache location)
* EMOJILIST_USER_DATA_DIR  - per-user application data directory
* EMOJILIST_TIMEOUT        - HTTP timeout in seconds
"""
from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_CATALOGUE_URL = "https://unicode.org/Public/emoji/latest/emoji-test.txt"
CACHE_FILE_NAME = "emoji-cache.bin"
USER_CACHE_DIR_NAME = "EmojiList"

# Resolve project root (not the Python package root)
_REPO_ROOT = Path(__file__).resolve().parents[2]

_TRUE_VALUES = {"1", "true", "yes", "on"}


def default_user_data_dir() -> Path:
    """
    Per-user application data directory.

    Priority:
    1. %APPDATA% (Windows)
    2. $XDG_CONFIG_HOME
    3. ~/.config
    """
    for var in ("APPDATA", "XDG_CONFIG_HOME"):
        value = os.environ.get(var)
        if value:
            return Path(value).expanduser()
    return Path.home() / ".config"


class ServiceSettings(BaseModel):
    """Configuration for the emoji catalogue service."""

    catalogue_url: str = Field(
        default=DEFAULT_CATALOGUE_URL,
        description="URL of the Unicode emoji test list.",
    )
    max_age_days: int = Field(
        default=30,
        ge=0,
        description="Maximum age of cached data before it is refreshed. 0 forces a refresh.",
    )
    portable: bool = Field(
        default=False,
        description="If True, the cache is saved in the application directory instead of the user profile.",
    )
    base_dir: Path = Field(
        default=_REPO_ROOT,
        description="Application base directory, holds the portable cache file.",
    )
    user_data_dir: Path = Field(
        default_factory=default_user_data_dir,
        description="Per-user application data directory.",
    )
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for downloading the emoji list.",
    )

    @property
    def max_age(self) -> timedelta:
        return timedelta(days=self.max_age_days)

    def cache_path(self, portable: Optional[bool] = None) -> Path:
        """Return the portable or per-user cache file path."""
        if portable is None:
            portable = self.portable
        if portable:
            return self.base_dir / CACHE_FILE_NAME
        return self.user_data_dir / USER_CACHE_DIR_NAME / CACHE_FILE_NAME

    def cache_candidates(self) -> List[Path]:
        """Cache locations to try when loading, portable first."""
        return [self.cache_path(True), self.cache_path(False)]

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        values = {}
        env = os.environ
        if env.get("EMOJILIST_CATALOGUE_URL"):
            values["catalogue_url"] = env["EMOJILIST_CATALOGUE_URL"]
        if env.get("EMOJILIST_MAX_AGE_DAYS"):
            values["max_age_days"] = int(env["EMOJILIST_MAX_AGE_DAYS"])
        if env.get("EMOJILIST_PORTABLE"):
            values["portable"] = env["EMOJILIST_PORTABLE"].strip().lower() in _TRUE_VALUES
        if env.get("EMOJILIST_BASE_DIR"):
            values["base_dir"] = Path(env["EMOJILIST_BASE_DIR"]).expanduser()
        if env.get("EMOJILIST_USER_DATA_DIR"):
            values["user_data_dir"] = Path(env["EMOJILIST_USER_DATA_DIR"]).expanduser()
        if env.get("EMOJILIST_TIMEOUT"):
            values["request_timeout"] = float(env["EMOJILIST_TIMEOUT"])
        return cls(**values)
