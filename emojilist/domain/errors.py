"""
Exception types raised by the emoji catalogue components.

Every error carries a ``stage`` naming the lifecycle step it came from
(parse, decode, fetch, load, save, lookup, initialize) so callers can log it
meaningfully.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class EmojiListError(Exception):
    """Base class for all emoji catalogue errors."""

    stage = "unknown"


class CatalogueFormatError(EmojiListError, ValueError):
    """A data line of the emoji test list could not be interpreted."""

    stage = "parse"

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class InvalidCacheDataError(EmojiListError, ValueError):
    """The binary cache is truncated, corrupt, or holds unknown values."""

    stage = "decode"


class CacheLoadError(InvalidCacheDataError):
    """A cache file was found but its contents could not be decoded."""

    stage = "load"

    def __init__(self, message: str, path: Path):
        super().__init__(f"{path}: {message}")
        self.path = path


class CacheSaveError(EmojiListError, IOError):
    """Writing the cache file failed."""

    stage = "save"

    def __init__(self, message: str, path: Path):
        super().__init__(f"{path}: {message}")
        self.path = path


class CatalogueFetchError(EmojiListError, IOError):
    """Downloading the emoji test list failed."""

    stage = "fetch"

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class InvalidStateError(EmojiListError, RuntimeError):
    """A lookup was attempted while no usable data is installed."""

    stage = "lookup"


class NotInitializedError(InvalidStateError):
    """No emoji data has been loaded yet."""


class EmptyCatalogueError(InvalidStateError):
    """Emoji data was loaded but contains no groups."""


class InitializationError(EmojiListError, IOError):
    """Neither the cache nor the internet could provide any emoji data."""

    stage = "initialize"
