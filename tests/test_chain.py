import zlib

import pytest

from gitobj.pack.chain import ChainBase, ChainDelta
from gitobj.pack.chain import patch as apply_delta
from gitobj.pack.errors import InvalidDeltaError
from gitobj.pack.readers import BytesReaderAt
from gitobj.pack.type import PackedObjectType


def _base(data: bytes) -> ChainBase:
    return ChainBase(BytesReaderAt(zlib.compress(data)), 0, len(data))


def test_chain_base_decompresses_data():
    contents = b"Hello, world!\n"
    buf = b"\x00" * 4 + zlib.compress(contents) + b"\x00" * 4

    base = ChainBase(BytesReaderAt(buf), 4, len(contents))

    assert base.unpack() == contents


def test_chain_base_decompresses_large_data():
    contents = b"four" * 20000
    base = ChainBase(BytesReaderAt(zlib.compress(contents)), 0, len(contents))
    assert base.unpack() == contents


def test_chain_base_short_data_raises():
    contents = b"Hello"
    base = ChainBase(BytesReaderAt(zlib.compress(contents)), 0, 10)
    with pytest.raises(EOFError):
        base.unpack()


def test_chain_base_type_returns_type():
    base = ChainBase(BytesReaderAt(b""), 0, 0, PackedObjectType.COMMIT)
    assert base.type is PackedObjectType.COMMIT


def test_chain_delta_type_is_base_type():
    base = ChainBase(BytesReaderAt(b""), 0, 0, PackedObjectType.BLOB)
    assert ChainDelta(base, b"").type is PackedObjectType.BLOB


def test_chain_delta_unpack_copies_from_base():
    c = ChainDelta(
        _base(bytes([0x0, 0x1, 0x2, 0x3])),
        bytes([0x04, 0x03, 0x80 | 0x01 | 0x10, 0x1, 0x3]),
    )
    assert c.unpack() == bytes([0x1, 0x2, 0x3])


def test_chain_delta_unpack_adds_to_base():
    c = ChainDelta(
        _base(b""),
        bytes([0x0, 0x3, 0x3, 0x1, 0x2, 0x3]),
    )
    assert c.unpack() == bytes([0x1, 0x2, 0x3])


def test_chain_delta_with_multiple_instructions():
    c = ChainDelta(
        _base(b"Hello!\n"),
        bytes([0x07, 0x0E, 0x80 | 0x01 | 0x10, 0x0, 0x5, 0x7])
        + b", world"
        + bytes([0x80 | 0x01 | 0x10, 0x05, 0x02]),
    )
    assert c.unpack() == b"Hello, world!\n"


def test_chain_delta_with_invalid_delta_instruction():
    c = ChainDelta(_base(b""), bytes([0x0, 0x1, 0x0]))
    with pytest.raises(InvalidDeltaError, match="gitobj/pack: invalid delta data"):
        c.unpack()


def test_chain_delta_with_extra_instructions():
    c = ChainDelta(_base(b""), bytes([0x0, 0x3, 0x4, 0x1, 0x2, 0x3, 0x4]))
    with pytest.raises(InvalidDeltaError, match="gitobj/pack: invalid delta data"):
        c.unpack()


def test_chain_delta_propagates_base_errors():
    short_base = ChainBase(BytesReaderAt(zlib.compress(b"Hello")), 0, 10)
    c = ChainDelta(short_base, bytes([0x0, 0x0]))
    with pytest.raises(EOFError):
        c.unpack()


def test_apply_delta_source_size_mismatch():
    with pytest.raises(InvalidDeltaError):
        apply_delta(b"abc", bytes([0x02, 0x01, 0x01, 0x61]))


def test_apply_delta_truncated_header():
    with pytest.raises(InvalidDeltaError, match="invalid delta header"):
        apply_delta(b"", bytes([0x80]))


def test_apply_delta_copy_out_of_base_range():
    with pytest.raises(InvalidDeltaError):
        apply_delta(b"abc", bytes([0x03, 0x05, 0x80 | 0x01 | 0x10, 0x01, 0x05]))


def test_apply_delta_add_past_end_of_delta():
    with pytest.raises(InvalidDeltaError):
        apply_delta(b"", bytes([0x00, 0x03, 0x03, 0x01]))


def test_apply_delta_zero_copy_size_means_0x10000():
    base = bytes(range(256)) * 256
    delta = bytes([0x80, 0x80, 0x04, 0x80, 0x80, 0x04, 0x80])
    assert apply_delta(base, delta) == base