import struct
import zlib

import pytest

from gitobj.pack.chain import Chain
from gitobj.pack.errors import NoSuchObjectError
from gitobj.pack.index import decode_index
from gitobj.pack.pack_set import PackSet
from gitobj.pack.packed_object import PackedObject
from gitobj.pack.packfile import Packfile
from gitobj.pack.readers import BytesReaderAt
from gitobj.pack.storage import DelayedObjectReader, PackStorage
from gitobj.pack.type import PackedObjectType

SHA = bytes.fromhex("decafdecafdecafdecafdecafdecafdecafdecaf")
DATA = b"Hello, world!\n"


def index_with(offsets):
    names = sorted(offsets)
    fanout = [sum(1 for n in names if n[0] <= i) for i in range(256)]
    return (
        b"\xff\x74\x4f\x63"
        + struct.pack(">I", 2)
        + struct.pack(">256I", *fanout)
        + b"".join(names)
        + bytes(4 * len(names))
        + b"".join(struct.pack(">I", offsets[n]) for n in names)
    )


def make_storage(pack_reader=None):
    if pack_reader is None:
        pack_reader = BytesReaderAt(bytes([0x3E]) + zlib.compress(DATA))
    idx = decode_index(BytesReaderAt(index_with({SHA: 0})), 20)
    pack = Packfile(pack_reader, 20, idx=idx)
    return PackStorage(PackSet([pack]))


class FailingChain(Chain):
    def __init__(self):
        self.calls = 0

    def unpack(self):
        self.calls += 1
        raise RuntimeError("boom")

    @property
    def type(self):
        return PackedObjectType.BLOB


class ClosingReader(BytesReaderAt):
    def __init__(self, data):
        super().__init__(data)
        self.closed = 0

    def close(self):
        self.closed += 1


def test_open_reads_object_with_loose_header():
    storage = make_storage()
    reader = storage.open(SHA)
    assert reader.read() == b"blob 14\x00" + DATA


def test_open_reads_in_pieces():
    storage = make_storage()
    reader = storage.open(SHA)
    pieces = []
    while chunk := reader.read(3):
        assert len(chunk) <= 3
        pieces.append(chunk)
    assert b"".join(pieces) == b"blob 14\x00" + DATA


def test_open_missing_object_raises():
    storage = make_storage()
    missing = bytes.fromhex("ab" * 20)
    with pytest.raises(NoSuchObjectError) as info:
        storage.open(missing)
    assert info.value.oid == missing


def test_is_compressed_is_false():
    assert make_storage().is_compressed() is False


def test_close_closes_packfiles():
    reader = ClosingReader(bytes([0x3E]) + zlib.compress(DATA))
    storage = make_storage(reader)
    storage.close()
    assert reader.closed == 1


def test_delayed_reader_unpacks_lazily():
    chain = FailingChain()
    reader = DelayedObjectReader(PackedObject(data=chain))
    assert chain.calls == 0
    with pytest.raises(RuntimeError, match="boom"):
        reader.read(1)
    assert chain.calls == 1


def test_from_root_reads_packs_on_disk(tmp_path):
    pack_dir = tmp_path / "pack"
    pack_dir.mkdir()
    body = bytes([0x3E]) + zlib.compress(DATA)
    (pack_dir / "pack-one.pack").write_bytes(b"PACK" + struct.pack(">II", 2, 1) + body)
    (pack_dir / "pack-one.idx").write_bytes(index_with({SHA: 12}))

    storage = PackStorage.from_root(tmp_path, 20)
    try:
        with storage.open(SHA) as reader:
            assert reader.read() == b"blob 14\x00" + DATA
    finally:
        storage.close()


def test_from_root_skips_pack_without_index(tmp_path):
    pack_dir = tmp_path / "pack"
    pack_dir.mkdir()
    body = bytes([0x3E]) + zlib.compress(DATA)
    (pack_dir / "pack-one.pack").write_bytes(b"PACK" + struct.pack(">II", 2, 1) + body)

    storage = PackStorage.from_root(tmp_path, 20)
    try:
        with pytest.raises(NoSuchObjectError):
            storage.open(SHA)
    finally:
        storage.close()