"""
Pydantic models for the emoji catalogue.

This module defines the hierarchical data model built from the Unicode
emoji test list:
- Catalogue (top level, carries the last refresh timestamp)
- Group -> Subgroup -> EmojiInfo

All records are frozen after construction and hold their children in tuples,
so nothing reachable from an installed catalogue can be changed in place.
Field aliases match the JSON export shape (``Name``, ``Subgroups``,
``Emoji``, ``Specification``, ``Qualifier``, ``CodePoints``); Python code
uses the snake_case names.
"""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Annotated, Dict, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


MAX_CODE_POINT = 0x10FFFF

CodePoint = Annotated[int, Field(ge=0, le=MAX_CODE_POINT)]


class Qualifier(IntEnum):
    """
    Unicode qualification status of an emoji sequence (see UTS #51).

    The integer values are persisted in the binary cache and exported to JSON.
    """

    # A fully-qualified emoji (ED-18), excluding Emoji_Component
    FULLY_QUALIFIED = 1
    # An unqualified emoji (ED-19)
    UNQUALIFIED = 2
    # A minimally-qualified emoji (ED-18a)
    MINIMALLY_QUALIFIED = 3
    # An Emoji_Component, excluding Regional_Indicators, ASCII, and non-Emoji
    COMPONENT = 4


class EmojiInfo(BaseModel):
    """A single emoji sequence as listed in the catalogue."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(
        alias="Name",
        min_length=1,
        description="Display name of the emoji (e.g. 'grinning face').",
    )
    glyph: str = Field(
        alias="Emoji",
        description="The emoji as a string, exactly as it appears in the catalogue.",
    )
    specification: str = Field(
        alias="Specification",
        description="Emoji version that introduced the sequence (e.g. 'E1.0').",
    )
    qualifier: Qualifier = Field(
        alias="Qualifier",
        description="Qualification status of the sequence.",
    )
    code_points: Tuple[CodePoint, ...] = Field(
        alias="CodePoints",
        min_length=1,
        description="Unicode scalar values making up the sequence, in order.",
    )

    def __str__(self) -> str:
        return f"{self.glyph} {self.name}"


class Subgroup(BaseModel):
    """Second level of grouping, e.g. 'face-smiling'."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    emoji: Tuple[EmojiInfo, ...] = Field(alias="Emoji", default=())

    def __str__(self) -> str:
        return f"Emoji subgroup: {self.name}"


class Group(BaseModel):
    """Top level of grouping, e.g. 'Smileys & Emotion'."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    subgroups: Tuple[Subgroup, ...] = Field(alias="Subgroups", default=())

    def __str__(self) -> str:
        return f"Emoji group: {self.name}"


class Catalogue(BaseModel):
    """
    The full emoji dataset plus the time it was last obtained.

    ``last_update`` is ``None`` until a load (fetch or cache) succeeded.
    A catalogue is replaced as a whole; it is never mutated in place.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    last_update: Optional[datetime] = Field(
        default=None,
        alias="LastUpdate",
        description="UTC timestamp of the last successful refresh from the internet.",
    )
    groups: Tuple[Group, ...] = Field(alias="Groups", default=())

    def iter_emoji(self) -> Iterator[EmojiInfo]:
        """Walk all entries in catalogue order (group, subgroup, emoji)."""
        for group in self.groups:
            for subgroup in group.subgroups:
                yield from subgroup.emoji

    @property
    def emoji_count(self) -> int:
        return sum(1 for _ in self.iter_emoji())


def build_index(catalogue: Catalogue) -> Dict[str, EmojiInfo]:
    """
    Build the glyph -> EmojiInfo lookup table.

    The catalogue lists some glyphs more than once (under different
    qualifiers); the entry encountered last in catalogue order wins.
    """
    index: Dict[str, EmojiInfo] = {}
    for info in catalogue.iter_emoji():
        index[info.glyph] = info
    return index
