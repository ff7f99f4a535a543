from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import aiofiles

logger = logging.getLogger(__name__)


class CacheStorage(ABC):
    """
    Abstract base class for the byte store holding the emoji cache.
    """

    @abstractmethod
    async def read(self, path: Path) -> bytes:
        """Return the full content at path. Raises OSError if it cannot be opened."""
        pass

    @abstractmethod
    async def write(self, path: Path, data: bytes) -> None:
        """Replace the content at path, creating parent directories as needed."""
        pass


class FileCacheStorage(CacheStorage):
    """Local filesystem implementation backed by aiofiles."""

    async def read(self, path: Path) -> bytes:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temp file first to avoid leaving a partial cache behind.
        tmp_path = path.with_name(f"{path.name}.tmp")
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(data)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {len(data)} bytes to {path}")
