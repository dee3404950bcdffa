"""Delta-base chains of packed objects."""

from __future__ import annotations

import zlib
from abc import ABC, abstractmethod

from gitobj.pack.errors import InvalidDeltaError
from gitobj.pack.readers import OffsetReader, ReaderAt
from gitobj.pack.type import PackedObjectType

_CHUNK_SIZE = 16 * 1024


class Chain(ABC):
    """One element of the delta-base chain of a packed object."""

    @abstractmethod
    def unpack(self) -> bytes:
        """Resolve the chain up to and including this element."""

    @property
    @abstractmethod
    def type(self) -> PackedObjectType:
        """The object type this chain element resolves to."""


class ChainBase(Chain):
    """The zlib-compressed base at the bottom of a delta-base chain."""

    def __init__(
        self,
        reader: ReaderAt,
        offset: int,
        size: int,
        object_type: PackedObjectType = PackedObjectType.NONE,
    ) -> None:
        self.reader = reader
        self.offset = offset
        self.size = size
        self._type = object_type

    @property
    def type(self) -> PackedObjectType:
        return self._type

    def unpack(self) -> bytes:
        """Inflate and return exactly ``size`` bytes of the base."""
        source = OffsetReader(self.reader, self.offset)
        inflater = zlib.decompressobj()
        out = bytearray()
        while len(out) < self.size and not inflater.eof:
            data = inflater.unconsumed_tail or source.read(_CHUNK_SIZE)
            if not data:
                break
            out += inflater.decompress(data, self.size - len(out))
        if len(out) < self.size:
            raise EOFError(
                f"gitobj/pack: expected {self.size} bytes, inflated {len(out)}"
            )
        return bytes(out)


class ChainDelta(Chain):
    """A delta applied on top of another chain element."""

    def __init__(self, base: Chain, delta: bytes) -> None:
        self.base = base
        self.delta = bytes(delta)

    @property
    def type(self) -> PackedObjectType:
        return self.base.type

    def unpack(self) -> bytes:
        """Resolve the base and apply this delta to it."""
        return patch(self.base.unpack(), self.delta)


def _delta_header(delta: bytes, pos: int) -> tuple[int, int]:
    size = 0
    shift = 0
    while True:
        if pos >= len(delta):
            raise InvalidDeltaError("gitobj/pack: invalid delta header")
        c = delta[pos]
        pos += 1
        size |= (c & 0x7F) << shift
        shift += 7
        if not c & 0x80:
            return size, pos


def _read_masked(delta: bytes, pos: int, mask: int, width: int) -> tuple[int, int]:
    value = 0
    for byte_index in range(width):
        if mask & (1 << byte_index):
            value |= delta[pos] << (8 * byte_index)
            pos += 1
    return value, pos


def patch(base: bytes, delta: bytes) -> bytes:
    """Apply the delta instructions in ``delta`` to ``base`` and return the result."""
    src_size, pos = _delta_header(delta, 0)
    if src_size != len(base):
        raise InvalidDeltaError()
    dest_size, pos = _delta_header(delta, pos)

    dest = bytearray()
    try:
        while pos < len(delta):
            c = delta[pos]
            pos += 1
            if c & 0x80:
                offset, pos = _read_masked(delta, pos, c & 0x0F, 4)
                size, pos = _read_masked(delta, pos, (c >> 4) & 0x07, 3)
                if size == 0:
                    size = 0x10000
                if offset + size > len(base):
                    raise InvalidDeltaError()
                dest += base[offset:offset + size]
            elif c:
                if pos + c > len(delta):
                    raise InvalidDeltaError()
                dest += delta[pos:pos + c]
                pos += c
            else:
                raise InvalidDeltaError()
    except IndexError as exc:
        raise InvalidDeltaError() from exc

    if len(dest) != dest_size:
        raise InvalidDeltaError()
    return bytes(dest)