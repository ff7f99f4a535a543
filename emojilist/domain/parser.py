"""
Parse the Unicode emoji test list (emoji-test.txt) into a Catalogue.

The file is line oriented:

    # group: Smileys & Emotion
    # subgroup: face-smiling
    1F600 ; fully-qualified # 😀 E1.0 grinning face

Anything that is neither a group/subgroup header nor a data line is skipped.
A subgroup header seen before any group header is dropped together with its
data lines; data lines outside a subgroup are dropped as well.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import ValidationError

from emojilist.domain.errors import CatalogueFormatError
from emojilist.domain.models import Catalogue, EmojiInfo, Group, Qualifier, Subgroup

logger = logging.getLogger(__name__)

HEADER_RE = re.compile(r"^\s*#\s+((?:sub)?group):\s+(.+)")
DATA_LINE_RE = re.compile(r"^([0-9A-Fa-f\s]+);([^#]+)#\s+(\S+)\s+(\S+)\s+(.+)$")

_QUALIFIERS = {q.name.replace("_", "").casefold(): q for q in Qualifier}


def parse_qualifier(text: str) -> Qualifier:
    """
    Parse a qualifier the way it appears in the test list ('fully-qualified').

    Raises ValueError for empty input and CatalogueFormatError for unknown names.
    """
    if text is None or not text.strip():
        raise ValueError("'qualifier' cannot be empty or whitespace.")

    key = text.strip().replace("-", "").casefold()
    try:
        return _QUALIFIERS[key]
    except KeyError:
        raise CatalogueFormatError(f"Unknown emoji qualifier: {text.strip()!r}") from None


def parse_code_points(text: str) -> Tuple[int, ...]:
    """Decode space separated hexadecimal code points, keeping their order."""
    try:
        return tuple(int(token, 16) for token in text.split())
    except ValueError as e:
        raise CatalogueFormatError(f"Invalid code point sequence {text.strip()!r}: {e}") from e


@dataclass
class ParseStats:
    """Counters collected during a parse, for diagnostics only."""
    lines: int = 0
    emoji: int = 0
    skipped_lines: int = 0
    orphan_subgroups: int = 0
    orphan_data_lines: int = 0


class CatalogueParser:
    """
    Single-use parser turning emoji-test.txt content into a Catalogue.

    Groups and subgroups are collected in mutable buffers and only turned into
    frozen models once they are closed.
    """

    def __init__(self):
        self.stats = ParseStats()
        self._groups: List[Group] = []
        self._group_name: Optional[str] = None
        self._subgroups: List[Subgroup] = []
        self._subgroup_name: Optional[str] = None
        self._emoji: List[EmojiInfo] = []

    def parse(self, text: str) -> Catalogue:
        for line_number, raw_line in enumerate(text.split("\n"), start=1):
            self.stats.lines += 1
            self._feed(raw_line.strip(), line_number)

        self._close_group()

        logger.debug(
            f"Parsed {len(self._groups)} groups and {self.stats.emoji} emoji "
            f"from {self.stats.lines} lines ({self.stats.skipped_lines} skipped)"
        )
        if self.stats.orphan_subgroups:
            logger.warning(
                f"Dropped {self.stats.orphan_subgroups} subgroup(s) declared before any group"
            )
        return Catalogue(groups=tuple(self._groups))

    def _feed(self, line: str, line_number: int) -> None:
        header = HEADER_RE.match(line)
        if header:
            kind, name = header.group(1), header.group(2).strip()
            if kind == "group":
                self._open_group(name)
            elif self._group_name is None:
                # Subgroup without a group: skip it and everything under it
                self.stats.orphan_subgroups += 1
                self.stats.skipped_lines += 1
            else:
                self._open_subgroup(name)
            return

        data = DATA_LINE_RE.match(line)
        if not data:
            self.stats.skipped_lines += 1
            return
        if self._subgroup_name is None:
            self.stats.orphan_data_lines += 1
            self.stats.skipped_lines += 1
            return

        try:
            info = EmojiInfo(
                name=data.group(5).strip(),
                glyph=data.group(3).strip(),
                specification=data.group(4).strip(),
                qualifier=parse_qualifier(data.group(2)),
                code_points=parse_code_points(data.group(1)),
            )
        except CatalogueFormatError as e:
            raise CatalogueFormatError(str(e), line_number) from e
        except ValidationError as e:
            raise CatalogueFormatError(f"Invalid emoji entry: {e}", line_number) from e
        self._emoji.append(info)
        self.stats.emoji += 1

    def _open_group(self, name: str) -> None:
        self._close_group()
        self._group_name = name

    def _open_subgroup(self, name: str) -> None:
        self._close_subgroup()
        self._subgroup_name = name

    def _close_subgroup(self) -> None:
        if self._subgroup_name is None:
            return
        self._subgroups.append(Subgroup(name=self._subgroup_name, emoji=tuple(self._emoji)))
        self._subgroup_name = None
        self._emoji = []

    def _close_group(self) -> None:
        if self._group_name is None:
            return
        self._close_subgroup()
        self._groups.append(Group(name=self._group_name, subgroups=tuple(self._subgroups)))
        self._group_name = None
        self._subgroups = []


def parse_catalogue(text: str) -> Catalogue:
    """
    Parse emoji-test.txt content.

    The returned catalogue has no ``last_update``; the caller stamps it when
    the result is installed.
    """
    return CatalogueParser().parse(text)
