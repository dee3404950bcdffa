"""Types of objects stored in a packfile."""

from __future__ import annotations

import enum


class PackedObjectType(enum.IntEnum):
    """The type of a packed object, as encoded in a packfile entry header."""

    NONE = 0
    COMMIT = 1
    TREE = 2
    BLOB = 3
    TAG = 4
    OFS_DELTA = 6
    REF_DELTA = 7

    @classmethod
    def _missing_(cls, value):
        raise ValueError(f"gitobj/pack: unknown object type: {value}")

    def __str__(self) -> str:
        return _NAMES[self]

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    @classmethod
    def from_name(cls, name: str) -> "PackedObjectType":
        """Return the type whose loose-object name is ``name``."""
        for member in cls:
            if _NAMES[member] == name:
                return member
        raise ValueError(f"gitobj/pack: unknown object type name: {name!r}")


_NAMES = {
    PackedObjectType.NONE: "<none>",
    PackedObjectType.COMMIT: "commit",
    PackedObjectType.TREE: "tree",
    PackedObjectType.BLOB: "blob",
    PackedObjectType.TAG: "tag",
    PackedObjectType.OFS_DELTA: "obj_ofs_delta",
    PackedObjectType.REF_DELTA: "obj_ref_delta",
}