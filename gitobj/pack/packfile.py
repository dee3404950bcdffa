"""Packfiles: access to the objects stored in a single pack."""

from __future__ import annotations

import struct
import zlib
from typing import Optional

from gitobj.pack.chain import Chain, ChainBase, ChainDelta
from gitobj.pack.errors import (
    BadPackHeaderError,
    ObjectNotFoundError,
    PackError,
    UnrecognizedObjectTypeError,
)
from gitobj.pack.index import Index
from gitobj.pack.packed_object import PackedObject
from gitobj.pack.readers import OffsetReader, ReaderAt, read_full
from gitobj.pack.type import PackedObjectType

PACK_MAGIC = b"PACK"
_HEADER_WIDTH = 12
_CHUNK_SIZE = 16 * 1024

_BASE_TYPES = frozenset(
    {
        PackedObjectType.COMMIT,
        PackedObjectType.TREE,
        PackedObjectType.BLOB,
        PackedObjectType.TAG,
    }
)
_DELTA_TYPES = frozenset({PackedObjectType.OFS_DELTA, PackedObjectType.REF_DELTA})


def _inflate_all(reader: ReaderAt, offset: int) -> bytes:
    source = OffsetReader(reader, offset)
    inflater = zlib.decompressobj()
    out = bytearray()
    while not inflater.eof:
        chunk = source.read(_CHUNK_SIZE)
        if not chunk:
            raise EOFError("gitobj/pack: unexpected end of compressed data")
        out += inflater.decompress(chunk)
    return bytes(out)


class Packfile:
    """A single packfile together with its index."""

    def __init__(
        self,
        reader: ReaderAt,
        hash_size: int = 20,
        *,
        version: int = 0,
        objects: int = 0,
        idx: Optional[Index] = None,
    ) -> None:
        self.reader = reader
        self.hash_size = hash_size
        self.version = version
        self.objects = objects
        self.idx = idx

    def close(self) -> None:
        """Close the index and the pack data, where they can be closed.

        An error closing the pack data takes precedence over one closing the
        index; the latter is only raised when the pack data is not closeable.
        """
        idx_error: Optional[BaseException] = None
        if self.idx is not None:
            try:
                self.idx.close()
            except Exception as exc:
                idx_error = exc
        close = getattr(self.reader, "close", None)
        if callable(close):
            close()
            return
        if idx_error is not None:
            raise idx_error

    def __enter__(self) -> "Packfile":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def object(self, name: bytes) -> PackedObject:
        """Return the packed object named ``name`` without unpacking it.

        Raises ObjectNotFoundError if the index does not hold the object.
        """
        if self.idx is None:
            raise PackError("gitobj/pack: packfile has no index")
        try:
            entry = self.idx.entry(name)
        except ObjectNotFoundError:
            raise
        except Exception as exc:
            raise PackError(f"gitobj/pack: could not load index: {exc}") from exc

        chain = self._find(entry.pack_offset)
        return PackedObject(data=chain, type=chain.type)

    def _find(self, offset: int) -> Chain:
        object_offset = offset
        byte = read_full(self.reader, 1, offset)[0]

        raw_type = (byte >> 4) & 0x7
        size = byte & 0x0F
        shift = 4
        offset += 1

        while byte & 0x80:
            byte = read_full(self.reader, 1, offset)[0]
            size |= (byte & 0x7F) << shift
            shift += 7
            offset += 1

        if raw_type not in {t.value for t in _BASE_TYPES | _DELTA_TYPES}:
            raise UnrecognizedObjectTypeError()
        object_type = PackedObjectType(raw_type)

        if object_type in _DELTA_TYPES:
            base, offset = self._find_base(object_type, offset, object_offset)
            delta = _inflate_all(self.reader, offset)
            return ChainDelta(base, delta)

        return ChainBase(self.reader, offset, size, object_type)

    def _find_base(
        self, object_type: PackedObjectType, offset: int, object_offset: int
    ) -> tuple[Chain, int]:
        if object_type is PackedObjectType.OFS_DELTA:
            data = self.reader.read_at(self.hash_size, offset)
            try:
                i = 0
                c = data[i]
                distance = c & 0x7F
                while c & 0x80:
                    i += 1
                    c = data[i]
                    distance = ((distance + 1) << 7) | (c & 0x7F)
            except IndexError as exc:
                raise EOFError("gitobj/pack: truncated delta base offset") from exc
            base_offset = object_offset - distance
            offset += i + 1
        elif object_type is PackedObjectType.REF_DELTA:
            if self.idx is None:
                raise PackError("gitobj/pack: packfile has no index")
            name = read_full(self.reader, self.hash_size, offset)
            base_offset = self.idx.entry(name).pack_offset
            offset += self.hash_size
        else:
            raise PackError(f"gitobj/pack: type {object_type} is not deltafied")

        return self._find(base_offset), offset


def decode_packfile(reader: ReaderAt, hash_size: int) -> Packfile:
    """Read the header of the packfile in ``reader``.

    No objects are read or unpacked. Raises BadPackHeaderError if the data
    does not start with the pack magic.
    """
    header = read_full(reader, _HEADER_WIDTH, 0)
    if not header.startswith(PACK_MAGIC):
        raise BadPackHeaderError()
    version, objects = struct.unpack(">II", header[4:12])
    return Packfile(reader, hash_size, version=version, objects=objects)