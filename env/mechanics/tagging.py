"""
TagResolver - role changes after movement.

A runner standing on the IT player's cell once every move of the step has
been applied is tagged. If several runners share that cell, only the one
with the lowest index is tagged; the others stay runners. This is the only
place roles change, so the single-it invariant is preserved here.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List

from ..core.types import GridPos, Role

if TYPE_CHECKING:
    from ..world.world import WorldState


@dataclass(frozen=True)
class TagEvent:
    """
    A completed tag.

    Attributes:
        tagger: Player that was IT and is now a runner
        tagged: Player that is now IT
        position: Cell where the tag happened
    """
    tagger: int
    tagged: int
    position: GridPos

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tagger": self.tagger,
            "tagged": self.tagged,
            "position": list(self.position),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TagEvent":
        return cls(
            tagger=data["tagger"],
            tagged=data["tagged"],
            position=tuple(data["position"]),
        )

    def __str__(self) -> str:
        return f"{self.tagger}: TAG {self.tagged} at {self.position}"


class TagResolver:
    """Resolves at most one tag per step."""

    def resolve_tags(self, world: WorldState) -> List[TagEvent]:
        """
        Swap roles if a runner shares the IT player's cell.

        Args:
            world: World to mutate (roles only)

        Returns:
            Empty list, or a single TagEvent
        """
        it = world.get_it()
        # players are stored in index order, so the first match is the lowest index
        caught = next(
            (p for p in world.players if not p.is_it and p.pos == it.pos),
            None,
        )
        if caught is None:
            return []

        it.role = Role.RUNNER
        it.tagged_by = None
        caught.role = Role.IT
        caught.tagged_by = it.id

        return [TagEvent(tagger=it.id, tagged=caught.id, position=caught.pos)]
