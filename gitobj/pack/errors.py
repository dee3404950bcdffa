"""Errors raised while reading packfiles and object storage."""

from __future__ import annotations


class PackError(Exception):
    """Base class for errors raised while reading packed objects."""


class UnsupportedVersionError(PackError):
    """The pack index uses a version that is not supported."""

    def __init__(self, got: int) -> None:
        self.got = got
        super().__init__(f"gitobj/pack: unsupported version: {got}")


class ShortFanoutError(PackError):
    """The fanout table of a pack index is truncated."""

    def __init__(self) -> None:
        super().__init__("gitobj/pack: too short fanout table")


class BadPackHeaderError(PackError):
    """The packfile does not start with the expected magic header."""

    def __init__(self) -> None:
        super().__init__("gitobj/pack: bad pack header")


class InvalidDeltaError(PackError):
    """A delta could not be applied to its base."""

    def __init__(self, message: str = "gitobj/pack: invalid delta data") -> None:
        super().__init__(message)


class UnrecognizedObjectTypeError(PackError):
    """A packfile entry has a type that cannot be stored in a pack."""

    def __init__(self) -> None:
        super().__init__("gitobj/pack: unrecognized object type")


class ObjectNotFoundError(PackError, LookupError):
    """An object is not present in a pack index."""

    def __init__(self) -> None:
        super().__init__("gitobj/pack: object not found in index")


class NoSuchObjectError(LookupError):
    """No storage holds the requested object."""

    def __init__(self, oid: bytes) -> None:
        self.oid = bytes(oid)
        super().__init__(f"gitobj: no such object: {self.oid.hex()}")


def is_not_found(err: BaseException | None) -> bool:
    """Return whether ``err`` reports an object missing from a pack index."""
    return isinstance(err, ObjectNotFoundError)


def is_no_such_object(err: BaseException | None) -> bool:
    """Return whether ``err`` reports an object missing from all storage."""
    return isinstance(err, NoSuchObjectError)