"""
Shared test data: a trimmed emoji-test.txt and helpers to build services.
"""

from datetime import datetime, timezone
from pathlib import Path

import httpx

from emojilist.core.config import ServiceSettings
from emojilist.domain.models import Catalogue, EmojiInfo, Group, Qualifier, Subgroup
from emojilist.services.downloader import CatalogueDownloader
from emojilist.services.emoji_service import EmojiService

TEST_URL = "https://unicode.example/emoji-test.txt"

FACE_IN_CLOUDS = "\U0001F636\u200d\U0001F32B"
SMILING_FACE = "\u263a\ufe0f"
SMILING_FACE_UNQUALIFIED = "\u263a"
FLAG_GERMANY = "\U0001F1E9\U0001F1EA"

SAMPLE_TEST_LIST = (
    "# emoji-test.txt\n"
    "# This file provides data for testing which emoji forms should be in keyboards.\n"
    "# Version: 15.1\n"
    "\n"
    "# subgroup: declared-too-early\n"
    "1F47B                                                  ; fully-qualified     # \U0001F47B E0.6 ghost\n"
    "\n"
    "# group: Smileys & Emotion\n"
    "\n"
    "# subgroup: face-smiling\n"
    "1F600                                                  ; fully-qualified     # \U0001F600 E1.0 grinning face\n"
    "1F603                                                  ; fully-qualified     # \U0001F603 E0.6 grinning face with big eyes\n"
    "\n"
    "# subgroup: face-affection\n"
    f"263A FE0F                                              ; fully-qualified     # {SMILING_FACE} E0.6 smiling face\n"
    f"263A                                                   ; unqualified         # {SMILING_FACE_UNQUALIFIED} E0.6 smiling face\n"
    "\n"
    "# subgroup: face-neutral-skeptical\n"
    f"1F636 200D 1F32B                                       ; minimally-qualified # {FACE_IN_CLOUDS} E13.1 face in clouds\n"
    "\n"
    "# Smileys & Emotion subtotal:\t\t5\n"
    "\n"
    "# group: Flags\n"
    "1F3C1                                                  ; fully-qualified     # \U0001F3C1 E0.6 chequered flag\n"
    "\n"
    "# subgroup: country-flag\n"
    f"1F1E9 1F1EA                                            ; fully-qualified     # {FLAG_GERMANY} E2.0 flag: Germany\n"
    "\n"
    "# group: Component\n"
    "\n"
    "# subgroup: skin-tone\n"
    "1F3FB                                                  ; component           # \U0001F3FB E1.0 light skin tone\n"
    "\n"
    "#EOF\n"
)

SAMPLE_GLYPHS = [
    "\U0001F600",
    "\U0001F603",
    SMILING_FACE,
    SMILING_FACE_UNQUALIFIED,
    FACE_IN_CLOUDS,
    FLAG_GERMANY,
    "\U0001F3FB",
]


def make_catalogue(glyph="\U0001F600", name="grinning face", last_update=None) -> Catalogue:
    """A single-emoji catalogue, handy for cache files."""
    info = EmojiInfo(
        name=name,
        glyph=glyph,
        specification="E1.0",
        qualifier=Qualifier.FULLY_QUALIFIED,
        code_points=[ord(c) for c in glyph],
    )
    return Catalogue(
        last_update=last_update or datetime(2026, 1, 1, tzinfo=timezone.utc),
        groups=[Group(name="Smileys & Emotion", subgroups=[Subgroup(name="face-smiling", emoji=[info])])],
    )


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class RecordingHandler:
    """httpx.MockTransport handler that counts requests."""

    def __init__(self, status_code: int = 200, text: str = SAMPLE_TEST_LIST, error: Exception = None):
        self.status_code = status_code
        self.text = text
        self.error = error
        self.requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.text.encode("utf-8"))


def make_settings(root: Path, portable: bool = False) -> ServiceSettings:
    return ServiceSettings(
        catalogue_url=TEST_URL,
        base_dir=root / "app",
        user_data_dir=root / "appdata",
        portable=portable,
    )


def make_service(root: Path, handler: RecordingHandler, clock: FakeClock = None, **kwargs) -> EmojiService:
    settings = make_settings(root)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    downloader = CatalogueDownloader(settings.catalogue_url, client=client)
    return EmojiService(settings, downloader=downloader, clock=clock, **kwargs)
