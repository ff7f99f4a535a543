"""
Emoji catalogue lifecycle and lookups.

This service handles:
- Loading the catalogue from the local binary cache
- Refreshing it from the Unicode emoji test list when stale
- Saving it back to the cache
- Answering lookups against the installed catalogue

The installed catalogue and its glyph index live in one immutable snapshot.
Writers build a complete new snapshot and publish it with a single attribute
assignment, so readers always see either the old or the new data.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from emojilist.core.config import ServiceSettings
from emojilist.domain.errors import (
    CacheLoadError,
    CacheSaveError,
    EmptyCatalogueError,
    InitializationError,
    InvalidCacheDataError,
    NotInitializedError,
)
from emojilist.domain.models import Catalogue, EmojiInfo, Group, build_index
from emojilist.domain.parser import parse_catalogue
from emojilist.services.downloader import CatalogueDownloader
from emojilist.storage.cache_storage import CacheStorage, FileCacheStorage
from emojilist.storage.codec import decode_catalogue, encode_catalogue

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class _Snapshot:
    catalogue: Catalogue = field(default_factory=Catalogue)
    index: Dict[str, EmojiInfo] = field(default_factory=dict)

    @classmethod
    def of(cls, catalogue: Catalogue) -> "_Snapshot":
        return cls(catalogue=catalogue, index=build_index(catalogue))


class EmojiService:
    """
    Owns the emoji catalogue of the process.

    Use auto_initialize() once at startup, then the lookup methods.
    """

    def __init__(
        self,
        settings: Optional[ServiceSettings] = None,
        storage: Optional[CacheStorage] = None,
        downloader: Optional[CatalogueDownloader] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or ServiceSettings()
        self.storage = storage or FileCacheStorage()
        self.downloader = downloader or CatalogueDownloader(
            self.settings.catalogue_url, timeout=self.settings.request_timeout
        )
        self._clock = clock or _utcnow
        self._snapshot = _Snapshot()
        self._write_lock = asyncio.Lock()

    # ========================================================================
    # State
    # ========================================================================

    @property
    def catalogue(self) -> Catalogue:
        return self._snapshot.catalogue

    @property
    def last_update(self) -> Optional[datetime]:
        return self._snapshot.catalogue.last_update

    @property
    def has_data(self) -> bool:
        """True if the installed catalogue has at least one group."""
        return len(self._snapshot.catalogue.groups) > 0

    def _install(self, catalogue: Catalogue) -> None:
        self._snapshot = _Snapshot.of(catalogue)

    def status(self) -> Dict[str, Any]:
        snapshot = self._snapshot
        return {
            "has_data": len(snapshot.catalogue.groups) > 0,
            "last_update": snapshot.catalogue.last_update,
            "groups": len(snapshot.catalogue.groups),
            "emoji": len(snapshot.index),
        }

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def auto_initialize(self, portable: Optional[bool] = None) -> None:
        """
        Load the cache, refresh from the internet if stale, then save the cache.

        Raises InitializationError if the refresh fails and no cached data is
        available. With cached data present, refresh failures are logged and
        the stale data stays in use.
        """
        await self.load_from_cache()
        try:
            updated = await self.refresh_if_stale(self.settings.max_age)
        except Exception as e:
            if not self.has_data:
                raise InitializationError(
                    "Failed to obtain emoji data from the internet, "
                    f"and no cached version exists on this machine yet. {e}"
                ) from e
            # Don't save the cache if we could not update it
            logger.warning(f"Emoji list refresh failed ({e.__class__.__name__}), using cached data: {e}")
            return

        if updated:
            try:
                await self.save_to_cache(portable)
            except OSError as e:
                logger.warning(f"Failed to save emoji cache: {e}")

    async def refresh_if_stale(self, max_age: timedelta = timedelta(days=30)) -> bool:
        """
        Download and install a fresh catalogue if the current one is missing or too old.

        A zero max_age forces the download.

        Returns:
            True if new data was installed, False if the current data is recent enough.
        """
        async with self._write_lock:
            last_update = self.last_update
            if max_age and last_update is not None and self._clock() - max_age < last_update:
                logger.debug(f"Emoji data from {last_update.isoformat()} is recent, not refreshing")
                return False

            text = await self.downloader.fetch_text()
            parsed = parse_catalogue(text)
            catalogue = Catalogue(last_update=self._clock(), groups=parsed.groups)
            self._install(catalogue)

        logger.info(
            f"Emoji list refreshed: {len(catalogue.groups)} groups, "
            f"{len(self._snapshot.index)} distinct emoji"
        )
        return True

    async def refresh(self) -> bool:
        """Download the list regardless of the age of the current data."""
        return await self.refresh_if_stale(timedelta(0))

    async def load_from_cache(self) -> bool:
        """
        Load the first available cache file, preferring the portable location.

        A file that cannot be opened is skipped; a file that opens but cannot be
        decoded raises CacheLoadError, an InvalidCacheDataError naming the file.

        Returns:
            True if a cache file was loaded, False if none exists.
        """
        async with self._write_lock:
            for path in self.settings.cache_candidates():
                try:
                    data = await self.storage.read(path)
                except OSError as e:
                    logger.debug(f"No emoji cache at {path}: {e}")
                    continue

                try:
                    catalogue = decode_catalogue(data)
                except InvalidCacheDataError as e:
                    raise CacheLoadError(str(e), path=path) from e
                self._install(catalogue)
                logger.info(f"Loaded emoji cache from {path} ({catalogue.emoji_count} entries)")
                return True
        return False

    async def save_to_cache(self, portable: Optional[bool] = None) -> None:
        """
        Save the installed catalogue to the portable or per-user cache file.

        Raises CacheSaveError (an OSError) if the file cannot be written.
        """
        path = self.settings.cache_path(portable)
        try:
            await self.storage.write(path, self.serialize())
        except OSError as e:
            raise CacheSaveError(f"Cannot write cache file: {e}", path=path) from e
        logger.info(f"Saved emoji cache to {path}")

    def serialize(self) -> bytes:
        return encode_catalogue(self._snapshot.catalogue)

    async def deserialize(self, data: bytes) -> None:
        """Install a catalogue previously produced by serialize()."""
        async with self._write_lock:
            self._install(decode_catalogue(data))

    # ========================================================================
    # Lookups
    # ========================================================================

    def _ensure_has_data(self) -> _Snapshot:
        snapshot = self._snapshot
        if snapshot.catalogue.last_update is None:
            raise NotInitializedError("No emoji data has been loaded yet")
        if not snapshot.catalogue.groups:
            raise EmptyCatalogueError("The loaded emoji data is empty")
        return snapshot

    def get_emoji(self, glyph: str) -> Optional[EmojiInfo]:
        """Return information about an emoji, or None if the glyph is unknown."""
        return self._ensure_has_data().index.get(glyph)

    def is_emoji(self, glyph: str) -> bool:
        return self.get_emoji(glyph) is not None

    def get_all_emoji(self) -> List[str]:
        return list(self._ensure_has_data().index.keys())

    def get_all_groups(self) -> List[Group]:
        return list(self._ensure_has_data().catalogue.groups)
