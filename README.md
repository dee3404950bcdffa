# gitobj

`gitobj` reads objects out of a Git object database. It understands
packfiles (`*.pack`) and their indexes (`*.idx`, versions 1 and 2),
resolves delta chains (both offset and reference deltas), and encodes and
decodes annotated tag objects. It works with SHA-1 and SHA-256
repositories: every reader takes the size of the object hash in bytes
(20 or 32).

The package has no dependencies outside the standard library.

## Reading packed objects

`PackStorage` in `gitobj.pack.storage` opens every pack in the `pack/`
directory of an object database and looks objects up by their binary
object ID:

```python
from gitobj.pack.storage import PackStorage

storage = PackStorage.from_root("/path/to/repo/.git/objects", 20)
try:
    reader = storage.open(bytes.fromhex("decafdecafdecafdecafdecafdecafdecafdecaf"))
    data = reader.read(-1)   # b"blob 14\x00Hello, world!\n"
    reader.close()
finally:
    storage.close()
```

The reader yields a loose-object style header (`<type> <size>\0`)
followed by the uncompressed contents. The object is only inflated, and
its delta chain only applied, when the first read happens. Data coming out
of `PackStorage` is already decompressed, so `is_compressed()` returns
`False`.

Packs whose `.idx` file is missing or cannot be opened are skipped.

When an object is in none of the packs, `NoSuchObjectError` is raised;
`is_no_such_object(err)` from `gitobj.pack.errors` tells it apart from
other failures.

## Working with packs directly

```python
from gitobj.pack.pack_set import new_set

with new_set("/path/to/repo/.git/objects", 20) as packs:
    obj = packs.object(oid)
    print(obj.type)          # a PackedObjectType; prints e.g. "blob"
    contents = obj.unpack()
```

`PackSet` tries the packs that may hold an object in descending order of
how many objects they hold up to the object's first byte.

A single pack and its index can also be opened by hand with
`decode_packfile` (in `gitobj.pack.packfile`) and `decode_index` (in
`gitobj.pack.index`). Both accept any reader offering
`read_at(size, offset)`; `BytesReaderAt` and `FileReaderAt` in
`gitobj.pack.readers` wrap in-memory data and open files:

```python
from gitobj.pack.index import decode_index
from gitobj.pack.packfile import decode_packfile
from gitobj.pack.readers import FileReaderAt

pack = decode_packfile(FileReaderAt(open("pack-1234.pack", "rb")), 20)
pack.idx = decode_index(FileReaderAt(open("pack-1234.idx", "rb")), 20)
with pack:
    data = pack.object(oid).unpack()
```

`Index.entry(name)` returns an `IndexEntry` with the object's
`pack_offset`, or raises `ObjectNotFoundError`. `patch(base, delta)` in
`gitobj.pack.chain` applies a raw Git delta to a base.

Malformed input raises a subclass of `PackError`: `BadPackHeaderError`,
`ShortFanoutError`, `UnsupportedVersionError`, `InvalidDeltaError` or
`UnrecognizedObjectTypeError`. Data that ends too early raises `EOFError`.

## Several storages at once

`MultiStorage` in `gitobj.storage` takes several storages, tries them in
turn, and returns a reader from the first that has the object,
decompressing data from storages whose `is_compressed()` is `True`. If
none has it, `NoSuchObjectError` is raised. `close()` closes every
storage.

`gitobj.storage` also defines the abstract interfaces `Storage`,
`WritableStorage`, `Backend` and `Storer` for other storage
implementations to follow.

## Tags

```python
import io
from gitobj.tag import Tag

tag = Tag.decode(io.BytesIO(raw_tag), len(raw_tag))
print(tag.name, tag.tagger, tag.object.hex(), tag.object_type, tag.message)
raw = tag.encode()
```

`Tag.decode` raises `ValueError` on a malformed or unknown header.

## What it does not do

- It does not read or write loose objects. The `WritableStorage` and
  `Storer` interfaces are abstract; no implementation that stores objects
  is included.
- It does not write packfiles or pack indexes.
- It does not decode or encode tree or commit objects; only tags.
- It has no command-line tool.