"""
Emoji detection backed by the Unicode emoji test list.

The catalogue is downloaded from the Unicode Consortium, cached locally in a
compact binary format, and queried through EmojiService. This works
independently of whatever emoji support the platform or its fonts provide.
"""

from emojilist.domain.errors import (
    CacheLoadError,
    CacheSaveError,
    CatalogueFetchError,
    CatalogueFormatError,
    EmojiListError,
    EmptyCatalogueError,
    InitializationError,
    InvalidCacheDataError,
    InvalidStateError,
    NotInitializedError,
)
from emojilist.domain.models import Catalogue, EmojiInfo, Group, Qualifier, Subgroup
from emojilist.domain.parser import parse_catalogue
from emojilist.services.emoji_service import EmojiService
from emojilist.storage.codec import decode_catalogue, encode_catalogue

__version__ = "0.1.0"
