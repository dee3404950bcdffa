"""Access to objects stored in Git packfiles and their indexes."""

__all__ = [
    "bounds",
    "chain",
    "errors",
    "index",
    "pack_set",
    "packed_object",
    "packfile",
    "readers",
    "storage",
    "type",
]