from typing import Optional

from emojilist.core.config import ServiceSettings
from emojilist.services.emoji_service import EmojiService

_settings: Optional[ServiceSettings] = None
_emoji_service: Optional[EmojiService] = None

def get_settings() -> ServiceSettings:
    global _settings
    if _settings is None:
        _settings = ServiceSettings.from_env()
    return _settings

def get_emoji_service() -> EmojiService:
    global _emoji_service
    if _emoji_service is None:
        _emoji_service = EmojiService(get_settings())
    return _emoji_service
