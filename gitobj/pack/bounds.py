"""Search window used for binary search over a pack index."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class Bounds:
    """An immutable pair of lower and upper search bounds."""

    left: int
    right: int

    def with_left(self, left: int) -> "Bounds":
        """Return a copy with the lower bound replaced."""
        return dataclasses.replace(self, left=left)

    def with_right(self, right: int) -> "Bounds":
        """Return a copy with the upper bound replaced."""
        return dataclasses.replace(self, right=right)

    def __str__(self) -> str:
        return f"[{self.left},{self.right}]"