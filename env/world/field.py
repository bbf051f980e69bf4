from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any

from ..core.types import GridPos
from ..core.errors import InvalidConfiguration


@dataclass(frozen=True)
class Field:
    """
    Immutable playing area.

    Valid cells satisfy ``0 <= x < width`` and ``0 <= y < height``.
    Created once when the environment is reset and never mutated.
    """

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfiguration(
                f"Field dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def bounds(self) -> GridPos:
        """(width, height) pair."""
        return (self.width, self.height)

    @property
    def area(self) -> int:
        return self.width * self.height

    def in_bounds(self, pos: GridPos) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def clamp(self, pos: GridPos) -> GridPos:
        """Return the nearest in-bounds cell to ``pos``."""
        x, y = pos
        return (
            min(max(x, 0), self.width - 1),
            min(max(y, 0), self.height - 1),
        )

    @staticmethod
    def distance(a: GridPos, b: GridPos) -> int:
        """
        Squared Euclidean distance between two cells.

        Kept squared so comparisons stay exact integers; the ordering is the
        same as true Euclidean distance.
        """
        dx = a[0] - b[0]
        dy = a[1] - b[1]
        return dx * dx + dy * dy

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Field":
        return cls(width=int(data["width"]), height=int(data["height"]))
