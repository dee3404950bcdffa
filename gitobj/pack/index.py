"""Pack index files: the locations of objects inside a packfile."""

from __future__ import annotations

import dataclasses
import struct
from abc import ABC, abstractmethod
from typing import Sequence

from gitobj.pack.bounds import Bounds
from gitobj.pack.errors import (
    ObjectNotFoundError,
    ShortFanoutError,
    UnsupportedVersionError,
)
from gitobj.pack.readers import ReaderAt, read_full

INDEX_MAGIC = b"\xfftOc"

_MAGIC_WIDTH = 4
_VERSION_WIDTH = 4
_V2_HEADER_WIDTH = _MAGIC_WIDTH + _VERSION_WIDTH
_V1_HEADER_WIDTH = 0

FANOUT_ENTRIES = 256
FANOUT_ENTRY_WIDTH = 4
FANOUT_WIDTH = FANOUT_ENTRIES * FANOUT_ENTRY_WIDTH

_V1_OBJECTS_START = _V1_HEADER_WIDTH + FANOUT_WIDTH
_V2_OBJECTS_START = _V2_HEADER_WIDTH + FANOUT_WIDTH

_CRC_WIDTH = 4
_SMALL_OFFSET_WIDTH = 4
_LARGE_OFFSET_WIDTH = 8

_LARGE_OFFSET_FLAG = 0x80000000


@dataclasses.dataclass(frozen=True)
class IndexEntry:
    """The data stored in a pack index for one object."""

    pack_offset: int


class IndexVersion(ABC):
    """The layout of a particular pack index version."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Number of bytes occupied by this version's header."""

    @abstractmethod
    def name(self, idx: "Index", at: int) -> bytes:
        """Return the object name stored at position ``at`` in ``idx``."""

    @abstractmethod
    def entry(self, idx: "Index", at: int) -> IndexEntry:
        """Return the full entry stored at position ``at`` in ``idx``."""


@dataclasses.dataclass(frozen=True)
class V1(IndexVersion):
    """Version 1 pack index layout: interleaved offsets and names."""

    hash_size: int

    @property
    def width(self) -> int:
        return _V1_HEADER_WIDTH

    def _entry_offset(self, at: int) -> int:
        return _V1_OBJECTS_START + (self.hash_size + _SMALL_OFFSET_WIDTH) * at

    def name(self, idx: "Index", at: int) -> bytes:
        return idx.read_at(self.hash_size, self._entry_offset(at) + _SMALL_OFFSET_WIDTH)

    def entry(self, idx: "Index", at: int) -> IndexEntry:
        (offset,) = struct.unpack(">I", idx.read_at(_SMALL_OFFSET_WIDTH, self._entry_offset(at)))
        return IndexEntry(pack_offset=offset)


@dataclasses.dataclass(frozen=True)
class V2(IndexVersion):
    """Version 2 pack index layout: separate name, CRC and offset tables."""

    hash_size: int

    @property
    def width(self) -> int:
        return _V2_HEADER_WIDTH

    def _small_offset_offset(self, at: int, total: int) -> int:
        return (
            _V2_OBJECTS_START
            + self.hash_size * total
            + _CRC_WIDTH * total
            + _SMALL_OFFSET_WIDTH * at
        )

    def _large_offset_offset(self, at: int, total: int) -> int:
        return (
            _V2_OBJECTS_START
            + self.hash_size * total
            + _CRC_WIDTH * total
            + _SMALL_OFFSET_WIDTH * total
            + _LARGE_OFFSET_WIDTH * at
        )

    def name(self, idx: "Index", at: int) -> bytes:
        return idx.read_at(self.hash_size, _V2_OBJECTS_START + self.hash_size * at)

    def entry(self, idx: "Index", at: int) -> IndexEntry:
        total = idx.count
        raw = idx.read_at(_SMALL_OFFSET_WIDTH, self._small_offset_offset(at, total))
        (loc,) = struct.unpack(">I", raw)
        if loc & _LARGE_OFFSET_FLAG:
            where = self._large_offset_offset(loc & 0x7FFFFFFF, total)
            (loc,) = struct.unpack(">Q", idx.read_at(_LARGE_OFFSET_WIDTH, where))
        return IndexEntry(pack_offset=loc)


class Index:
    """A decoded pack index: its version, fanout table and raw data."""

    def __init__(self, version: IndexVersion, fanout: Sequence[int], reader: ReaderAt) -> None:
        self.version = version
        self.fanout = list(fanout)
        self._reader = reader

    @property
    def count(self) -> int:
        """Number of objects in the packfile."""
        return self.fanout[255]

    def close(self) -> None:
        """Close the underlying data source, if it can be closed."""
        close = getattr(self._reader, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "Index":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def read_at(self, size: int, offset: int) -> bytes:
        """Read exactly ``size`` bytes of index data at ``offset``."""
        return read_full(self._reader, size, offset)

    def _bounds(self, name: bytes) -> Bounds:
        first = name[0]
        left = 0 if first == 0 else self.fanout[first - 1]
        right = self.count if first == 255 else self.fanout[first + 1]
        return Bounds(left, right)

    def entry(self, name: bytes) -> IndexEntry:
        """Find the entry for the object ``name``.

        Raises ObjectNotFoundError if the index holds no such object.
        """
        if not name:
            raise ValueError("gitobj/pack: empty object name")
        name = bytes(name)
        last: Bounds | None = None
        bounds = self._bounds(name)
        while bounds.left < bounds.right:
            if bounds == last:
                raise ObjectNotFoundError()
            last = bounds

            mid = bounds.left + (bounds.right - bounds.left) // 2
            got = self.version.name(self, mid)
            if name == got:
                return self.version.entry(self, mid)
            if name < got:
                bounds = bounds.with_right(mid)
            else:
                bounds = bounds.with_left(mid)
        raise ObjectNotFoundError()


def _decode_header(reader: ReaderAt, hash_size: int) -> IndexVersion:
    header = read_full(reader, _MAGIC_WIDTH, 0)
    if header != INDEX_MAGIC:
        return V1(hash_size)
    (version,) = struct.unpack(">I", read_full(reader, _VERSION_WIDTH, _MAGIC_WIDTH))
    if version == 1:
        return V1(hash_size)
    if version == 2:
        return V2(hash_size)
    raise UnsupportedVersionError(version)


def _decode_fanout(reader: ReaderAt, offset: int) -> list[int]:
    data = reader.read_at(FANOUT_WIDTH, offset)
    if len(data) < FANOUT_WIDTH:
        raise ShortFanoutError()
    return list(struct.unpack(f">{FANOUT_ENTRIES}I", data))


def decode_index(reader: ReaderAt, hash_size: int) -> Index:
    """Decode the header and fanout table of the pack index in ``reader``.

    Entries are read lazily on lookup.
    """
    version = _decode_header(reader, hash_size)
    fanout = _decode_fanout(reader, version.width)
    return Index(version, fanout, reader)