"""An object stored in a packfile."""

from __future__ import annotations

import dataclasses
from typing import Optional

from gitobj.pack.chain import Chain
from gitobj.pack.type import PackedObjectType


@dataclasses.dataclass
class PackedObject:
    """A packed object: the front of its delta-base chain and its real type."""

    data: Chain
    type: Optional[PackedObjectType] = None

    def __post_init__(self) -> None:
        if self.type is None:
            self.type = self.data.type

    def unpack(self) -> bytes:
        """Resolve the delta-base chain and return the object's full contents."""
        return self.data.unpack()