"""Interfaces for object storage, and storage that combines several sources."""

from __future__ import annotations

import zlib
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Protocol, Sequence

from gitobj.pack.errors import NoSuchObjectError

_CHUNK_SIZE = 16 * 1024


class _Readable(Protocol):
    def read(self, size: int = -1) -> bytes:
        ...


class Storage(ABC):
    """A read-only source of objects."""

    @abstractmethod
    def open(self, oid: bytes) -> BinaryIO:
        """Return a reader over the object ``oid``.

        Raises NoSuchObjectError if the object does not exist.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the storage; no more operations are allowed afterwards."""

    @abstractmethod
    def is_compressed(self) -> bool:
        """Whether data read from this storage is zlib-compressed."""

    def __enter__(self) -> "Storage":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class WritableStorage(Storage):
    """A source of objects that can also store new ones."""

    @abstractmethod
    def store(self, oid: bytes, reader: _Readable) -> int:
        """Copy the data of ``reader`` to the object ``oid``.

        Raises an error if the object already exists. Returns the number of
        bytes written.
        """


class Backend(ABC):
    """A pair of read and optional write locations for objects."""

    @abstractmethod
    def storage(self) -> tuple[Storage, Optional[WritableStorage]]:
        """Return the read source and, if there is one, the write source."""


class Storer(ABC):
    """A store of loose objects that can open and create them."""

    @abstractmethod
    def open(self, sha: bytes) -> BinaryIO:
        """Return a reader over the existing object ``sha``."""

    @abstractmethod
    def store(self, sha: bytes, reader: _Readable) -> int:
        """Copy the data of ``reader`` to the new object ``sha``.

        Raises an error if the object already exists.
        """


class DecompressingReader:
    """Inflates zlib data read from another reader, closing it when done."""

    def __init__(self, reader) -> None:
        self._reader = reader
        self._inflater = zlib.decompressobj()
        self._buffer = bytearray()

    def _fill(self, size: int) -> None:
        while (size < 0 or len(self._buffer) < size) and not self._inflater.eof:
            chunk = self._reader.read(_CHUNK_SIZE)
            if not chunk:
                raise EOFError("gitobj: unexpected end of compressed data")
            self._buffer += self._inflater.decompress(chunk)

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` inflated bytes, or all of them when negative."""
        if size is None:
            size = -1
        self._fill(size)
        if size < 0:
            size = len(self._buffer)
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def close(self) -> None:
        """Close the underlying reader."""
        self._reader.close()

    def __enter__(self) -> "DecompressingReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class MultiStorage(Storage):
    """Reads objects from the first of several storages that holds them.

    Data from compressed storages is inflated, so reads always yield
    uncompressed data.
    """

    def __init__(self, *storages: Storage) -> None:
        self.storages: Sequence[Storage] = list(storages)

    def open(self, oid: bytes):
        """Return a reader over ``oid`` from the first storage holding it."""
        for storage in self.storages:
            try:
                reader = storage.open(oid)
            except NoSuchObjectError:
                continue
            if storage.is_compressed():
                return DecompressingReader(reader)
            return reader
        raise NoSuchObjectError(oid)

    def close(self) -> None:
        """Close every storage, stopping at the first error."""
        for storage in self.storages:
            storage.close()

    def is_compressed(self) -> bool:
        """Always false: compressed sources are inflated on read."""
        return False