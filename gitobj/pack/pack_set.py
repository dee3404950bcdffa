"""Lookup of objects across all packfiles of an object database."""

from __future__ import annotations

import glob
import os
import re
from typing import Callable, Iterable

from gitobj.pack.errors import NoSuchObjectError, ObjectNotFoundError
from gitobj.pack.index import decode_index
from gitobj.pack.packed_object import PackedObject
from gitobj.pack.packfile import Packfile, decode_packfile
from gitobj.pack.readers import FileReaderAt

_NAME_RE = re.compile(r"^(.*)\.pack$")


class PackSet:
    """A set of packfiles searched together for objects."""

    def __init__(self, packs: Iterable[Packfile] = ()) -> None:
        self.packs = list(packs)
        self._by_prefix: dict[int, list[Packfile]] = {}
        for n in range(256):
            candidates = []
            for pack in self.packs:
                fanout = pack.idx.fanout
                count = fanout[n] if n == 0 else fanout[n] - fanout[n - 1]
                if count > 0:
                    candidates.append(pack)
            if candidates:
                candidates.sort(key=lambda p: p.idx.fanout[n], reverse=True)
                self._by_prefix[n] = candidates

    def close(self) -> None:
        """Close every packfile, stopping at the first error."""
        for pack in self.packs:
            pack.close()

    def __enter__(self) -> "PackSet":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def object(self, name: bytes) -> PackedObject:
        """Return the object ``name`` from the first packfile holding it.

        Raises NoSuchObjectError if no packfile holds it.
        """
        return self.each(name, lambda pack: pack.object(name))

    def each(self, name: bytes, fn: Callable[[Packfile], PackedObject]) -> PackedObject:
        """Call ``fn`` on each packfile that may hold ``name`` until one succeeds.

        Packfiles are tried in descending order of how many objects they hold
        up to the first byte of ``name``. ObjectNotFoundError moves on to the
        next packfile; any other error is raised at once.
        """
        key = name[0] if len(name) > 0 else 0
        for pack in self._by_prefix.get(key, ()):
            try:
                return fn(pack)
            except ObjectNotFoundError:
                continue
        raise NoSuchObjectError(name)


def new_set(db: str | os.PathLike, hash_size: int) -> PackSet:
    """Open every packfile under ``db``/pack that has a matching index.

    Packs whose index is missing or unreadable are skipped.
    """
    pack_dir = os.path.join(os.fspath(db), "pack")
    paths = sorted(glob.glob(os.path.join(glob.escape(pack_dir), "*.pack")))

    packs: list[Packfile] = []
    try:
        for path in paths:
            match = _NAME_RE.match(os.path.basename(path))
            if match is None:
                continue
            name = match.group(1)

            try:
                idx_file = open(os.path.join(pack_dir, f"{name}.idx"), "rb")
            except OSError:
                continue
            idx_reader = FileReaderAt(idx_file)
            try:
                pack_reader = FileReaderAt(
                    open(os.path.join(pack_dir, f"{name}.pack"), "rb")
                )
            except BaseException:
                idx_reader.close()
                raise
            try:
                pack = decode_packfile(pack_reader, hash_size)
                pack.idx = decode_index(idx_reader, hash_size)
            except BaseException:
                pack_reader.close()
                idx_reader.close()
                raise
            packs.append(pack)
    except BaseException:
        for pack in packs:
            try:
                pack.close()
            except Exception:
                pass
        raise
    return PackSet(packs)