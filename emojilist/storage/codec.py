"""
Binary serialization of the emoji catalogue.

Layout (little endian, strings are 7-bit length prefixed UTF-8 as written by
.NET's BinaryWriter):

    Catalogue  := last_update_ticks:i64 group_count:i32 Group*
    Group      := name:str subgroup_count:i32 Subgroup*
    Subgroup   := name:str emoji_count:i32 EmojiInfo*
    EmojiInfo  := name:str glyph:str specification:str qualifier:u8
                  code_point_count:i32 code_point:i32*

``last_update_ticks`` counts 100ns intervals since 0001-01-01 UTC;
INT64_MIN means the catalogue was never loaded.
"""
from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone
from typing import BinaryIO

from pydantic import ValidationError

from emojilist.domain.errors import InvalidCacheDataError
from emojilist.domain.models import Catalogue, EmojiInfo, Group, Qualifier, Subgroup

NO_UPDATE_TICKS = -(2 ** 63)
TICKS_PER_MICROSECOND = 10
TICKS_EPOCH = datetime(1, 1, 1, tzinfo=timezone.utc)

_INT64 = struct.Struct("<q")
_INT32 = struct.Struct("<i")
_UINT8 = struct.Struct("<B")

# Smallest possible encoding of one element, used to bound untrusted counts
_MIN_GROUP_SIZE = 1 + 4
_MIN_SUBGROUP_SIZE = 1 + 4
_MIN_EMOJI_SIZE = 1 + 1 + 1 + 1 + 4
_CODE_POINT_SIZE = 4


def datetime_to_ticks(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - TICKS_EPOCH) // timedelta(microseconds=1) * TICKS_PER_MICROSECOND


def ticks_to_datetime(ticks: int) -> datetime:
    return TICKS_EPOCH + timedelta(microseconds=ticks // TICKS_PER_MICROSECOND)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class _Writer:
    def __init__(self):
        self.buf = bytearray()

    def int64(self, value: int) -> None:
        self.buf += _INT64.pack(value)

    def int32(self, value: int) -> None:
        self.buf += _INT32.pack(value)

    def uint8(self, value: int) -> None:
        self.buf += _UINT8.pack(value)

    def string(self, value: str) -> None:
        data = value.encode("utf-8")
        length = len(data)
        # 7-bit encoded length, low bits first
        while length >= 0x80:
            self.buf.append((length & 0x7F) | 0x80)
            length >>= 7
        self.buf.append(length)
        self.buf += data


def _write_emoji(w: _Writer, info: EmojiInfo) -> None:
    w.string(info.name)
    w.string(info.glyph)
    w.string(info.specification)
    w.uint8(int(info.qualifier))
    w.int32(len(info.code_points))
    for code_point in info.code_points:
        w.int32(code_point)


def _write_subgroup(w: _Writer, subgroup: Subgroup) -> None:
    w.string(subgroup.name)
    w.int32(len(subgroup.emoji))
    for info in subgroup.emoji:
        _write_emoji(w, info)


def _write_group(w: _Writer, group: Group) -> None:
    w.string(group.name)
    w.int32(len(group.subgroups))
    for subgroup in group.subgroups:
        _write_subgroup(w, subgroup)


def encode_catalogue(catalogue: Catalogue) -> bytes:
    """Serialize a catalogue into the binary cache format."""
    w = _Writer()
    if catalogue.last_update is None:
        w.int64(NO_UPDATE_TICKS)
    else:
        w.int64(datetime_to_ticks(catalogue.last_update))
    w.int32(len(catalogue.groups))
    for group in catalogue.groups:
        _write_group(w, group)
    return bytes(w.buf)


def write_catalogue(stream: BinaryIO, catalogue: Catalogue) -> None:
    stream.write(encode_catalogue(catalogue))
    stream.flush()


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class _Reader:
    """Bounds-checked cursor over an in-memory buffer."""

    def __init__(self, data: bytes):
        self.data = memoryview(data)
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def _take(self, size: int) -> memoryview:
        if size > self.remaining:
            raise InvalidCacheDataError(
                f"Unexpected end of data at offset {self.pos}: "
                f"needed {size} bytes, {self.remaining} left"
            )
        chunk = self.data[self.pos:self.pos + size]
        self.pos += size
        return chunk

    def int64(self) -> int:
        return _INT64.unpack(self._take(8))[0]

    def int32(self) -> int:
        return _INT32.unpack(self._take(4))[0]

    def uint8(self) -> int:
        return self._take(1)[0]

    def count(self, what: str, min_item_size: int) -> int:
        value = self.int32()
        if value < 0:
            raise InvalidCacheDataError(f"Negative {what} count {value} at offset {self.pos - 4}")
        if value * min_item_size > self.remaining:
            raise InvalidCacheDataError(
                f"{what} count {value} at offset {self.pos - 4} exceeds the remaining data"
            )
        return value

    def string(self) -> str:
        length = 0
        shift = 0
        while True:
            if shift > 28:
                raise InvalidCacheDataError(f"Malformed string length at offset {self.pos}")
            byte = self.uint8()
            length |= (byte & 0x7F) << shift
            shift += 7
            if not byte & 0x80:
                break
        raw = self._take(length)
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidCacheDataError(f"Invalid UTF-8 string ending at offset {self.pos}") from e


def _read_qualifier(r: _Reader) -> Qualifier:
    value = r.uint8()
    try:
        return Qualifier(value)
    except ValueError:
        raise InvalidCacheDataError(
            f"Unknown qualifier value {value} at offset {r.pos - 1}"
        ) from None


def _read_emoji(r: _Reader) -> EmojiInfo:
    name = r.string()
    glyph = r.string()
    specification = r.string()
    qualifier = _read_qualifier(r)
    code_points = tuple(r.int32() for _ in range(r.count("code point", _CODE_POINT_SIZE)))
    return EmojiInfo(
        name=name,
        glyph=glyph,
        specification=specification,
        qualifier=qualifier,
        code_points=code_points,
    )


def _read_subgroup(r: _Reader) -> Subgroup:
    name = r.string()
    emoji = tuple(_read_emoji(r) for _ in range(r.count("emoji", _MIN_EMOJI_SIZE)))
    return Subgroup(name=name, emoji=emoji)


def _read_group(r: _Reader) -> Group:
    name = r.string()
    subgroups = tuple(_read_subgroup(r) for _ in range(r.count("subgroup", _MIN_SUBGROUP_SIZE)))
    return Group(name=name, subgroups=subgroups)


def decode_catalogue(data: bytes) -> Catalogue:
    """
    Deserialize a catalogue written by encode_catalogue().

    Raises InvalidCacheDataError for any truncated or invalid input; nothing
    is returned unless the whole catalogue was read.
    """
    r = _Reader(data)
    ticks = r.int64()
    if ticks == NO_UPDATE_TICKS:
        last_update = None
    else:
        try:
            last_update = ticks_to_datetime(ticks)
        except OverflowError:
            raise InvalidCacheDataError(f"Timestamp out of range: {ticks} ticks") from None

    try:
        groups = tuple(_read_group(r) for _ in range(r.count("group", _MIN_GROUP_SIZE)))
    except ValidationError as e:
        raise InvalidCacheDataError(f"Invalid emoji record in cache: {e}") from e

    return Catalogue(last_update=last_update, groups=groups)


def read_catalogue(stream: BinaryIO) -> Catalogue:
    return decode_catalogue(stream.read())
