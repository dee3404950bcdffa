"""Read-only object storage backed by the packfiles of an object database."""

from __future__ import annotations

import io
import os
from typing import Optional

from gitobj.pack.pack_set import PackSet, new_set
from gitobj.pack.packed_object import PackedObject
from gitobj.storage import Storage


class DelayedObjectReader:
    """Reads a packed object in loose-object form, unpacking it on first read.

    The data produced is the object header ``"<type> <size>\\0"`` followed by
    the uncompressed contents of the object.
    """

    def __init__(self, obj: PackedObject) -> None:
        self._obj = obj
        self._stream: Optional[io.BytesIO] = None

    def _open(self) -> io.BytesIO:
        if self._stream is None:
            data = self._obj.unpack()
            header = f"{self._obj.type} {len(data)}\x00".encode()
            self._stream = io.BytesIO(header + data)
        return self._stream

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left when ``size`` is negative."""
        if size is None:
            size = -1
        return self._open().read(size)

    def close(self) -> None:
        """Release the reader; the packed object itself stays open."""

    def __enter__(self) -> "DelayedObjectReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class PackStorage(Storage):
    """Storage that reads objects out of a set of packfiles."""

    def __init__(self, packs: PackSet) -> None:
        self.packs = packs

    @classmethod
    def from_root(cls, root: str | os.PathLike, hash_size: int) -> "PackStorage":
        """Open every packfile under ``root``/pack."""
        return cls(new_set(root, hash_size))

    def open(self, oid: bytes) -> DelayedObjectReader:
        """Return a reader over the object ``oid``.

        Raises NoSuchObjectError if no packfile holds it.
        """
        return DelayedObjectReader(self.packs.object(oid))

    def close(self) -> None:
        """Close every packfile."""
        self.packs.close()

    def is_compressed(self) -> bool:
        """Data read from packs is already decompressed."""
        return False