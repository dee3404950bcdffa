"""Annotated tag objects."""

from __future__ import annotations

import dataclasses

from gitobj.pack.type import PackedObjectType

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _object_type_from_name(name: str) -> PackedObjectType:
    try:
        return PackedObjectType.from_name(name)
    except ValueError:
        return PackedObjectType.NONE


def _lines(data: bytes) -> list[bytes]:
    if not data:
        return []
    lines = data.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return [line[:-1] if line.endswith(b"\r") else line for line in lines]


@dataclasses.dataclass
class Tag:
    """An annotated tag pointing at another object."""

    object: bytes = b""
    object_type: PackedObjectType = PackedObjectType.NONE
    name: str = ""
    tagger: str = ""
    message: str = ""

    @property
    def type(self) -> PackedObjectType:
        """The object type of tags."""
        return PackedObjectType.TAG

    @classmethod
    def decode(cls, reader, size: int) -> "Tag":
        """Decode a tag from at most ``size`` uncompressed bytes of ``reader``.

        Raises ValueError on a malformed or unknown header.
        """
        data = reader.read(size)
        tag = cls()
        finished_headers = False
        message: list[str] = []

        for raw in _lines(data):
            text = raw.decode(_ENCODING, _ERRORS)
            if finished_headers:
                message.append(text)
                continue
            if not raw:
                finished_headers = True
                continue

            parts = text.split(" ", 1)
            if len(parts) < 2:
                raise ValueError(f"gitobj: invalid tag header: {text}")
            key, value = parts
            if key == "object":
                try:
                    tag.object = bytes.fromhex(value)
                except ValueError as exc:
                    raise ValueError(f"gitobj: unable to decode SHA-1: {exc}") from exc
            elif key == "type":
                tag.object_type = _object_type_from_name(value)
            elif key == "tag":
                tag.name = value
            elif key == "tagger":
                tag.tagger = value
            else:
                raise ValueError(f"gitobj: unknown tag header: {key}")

        tag.message = "\n".join(message)
        return tag

    def encode(self) -> bytes:
        """Return the encoded contents of the tag."""
        headers = "\n".join(
            [
                f"object {bytes(self.object).hex()}",
                f"type {self.object_type}",
                f"tag {self.name}",
                f"tagger {self.tagger}",
            ]
        )
        return f"{headers}\n\n{self.message}".encode(_ENCODING, _ERRORS)