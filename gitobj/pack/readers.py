"""Positional readers over in-memory and on-disk data."""

from __future__ import annotations

import threading
from typing import BinaryIO, Protocol, runtime_checkable

_CHUNK_SIZE = 64 * 1024


@runtime_checkable
class ReaderAt(Protocol):
    """Anything that can read up to ``size`` bytes starting at ``offset``."""

    def read_at(self, size: int, offset: int) -> bytes:
        ...


class BytesReaderAt:
    """A positional reader over a bytes-like object."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    def read_at(self, size: int, offset: int) -> bytes:
        """Return up to ``size`` bytes starting at ``offset``."""
        if offset < 0:
            raise ValueError(f"negative offset: {offset}")
        if size < 0:
            raise ValueError(f"negative size: {size}")
        return self._data[offset:offset + size]


class FileReaderAt:
    """A positional reader over an open binary file."""

    def __init__(self, file: BinaryIO) -> None:
        self._file = file
        self._lock = threading.Lock()

    def read_at(self, size: int, offset: int) -> bytes:
        """Return up to ``size`` bytes of the file starting at ``offset``."""
        if offset < 0:
            raise ValueError(f"negative offset: {offset}")
        if size < 0:
            raise ValueError(f"negative size: {size}")
        with self._lock:
            self._file.seek(offset)
            return self._file.read(size)

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> "FileReaderAt":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class OffsetReader:
    """A sequential reader that advances through a ``ReaderAt``."""

    def __init__(self, reader: ReaderAt, offset: int = 0) -> None:
        self._reader = reader
        self.offset = offset

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything left when ``size`` is negative."""
        if size is None or size < 0:
            parts = []
            while chunk := self.read(_CHUNK_SIZE):
                parts.append(chunk)
            return b"".join(parts)
        data = self._reader.read_at(size, self.offset)
        self.offset += len(data)
        return data


def read_full(reader: ReaderAt, size: int, offset: int) -> bytes:
    """Read exactly ``size`` bytes at ``offset``, raising EOFError if short."""
    data = reader.read_at(size, offset)
    if len(data) < size:
        raise EOFError(f"wanted {size} bytes at offset {offset}, got {len(data)}")
    return data