"""
Download the Unicode emoji test list.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from emojilist.core.config import DEFAULT_CATALOGUE_URL
from emojilist.domain.errors import CatalogueFetchError

logger = logging.getLogger(__name__)


class CatalogueDownloader:
    """
    Fetches emoji-test.txt with a single GET request.

    There is no retry; a failed download is reported to the caller right away.
    """

    def __init__(
        self,
        url: str = DEFAULT_CATALOGUE_URL,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.client = client

    async def fetch_text(self) -> str:
        """
        Download the list and return it as text.

        Raises:
            CatalogueFetchError: on a malformed URL, connection problems or a
                non-success status.
        """
        logger.info(f"Downloading emoji list from {self.url}")
        try:
            if self.client is not None:
                response = await self.client.get(self.url)
            else:
                async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as client:
                    response = await client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CatalogueFetchError(
                f"Emoji list request returned HTTP {e.response.status_code}",
                url=self.url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise CatalogueFetchError(f"Failed to download emoji list: {e}", url=self.url) from e
        except httpx.InvalidURL as e:
            raise CatalogueFetchError(f"Invalid emoji list URL {self.url!r}: {e}", url=self.url) from e

        try:
            text = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CatalogueFetchError(f"Emoji list is not valid UTF-8: {e}", url=self.url) from e
        logger.debug(f"Downloaded {len(text)} characters from {self.url}")
        return text
