from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core.types import GridPos, Role
from ..core.errors import UnknownPlayer
from .field import Field

if TYPE_CHECKING:
    from .world import WorldState


@dataclass(frozen=True)
class VisiblePlayer:
    """
    Frozen record of one player, handed to agents (via the view) and viewers.
    """

    id: int
    pos: GridPos
    role: Role
    tagged_by: Optional[int] = None

    @property
    def is_it(self) -> bool:
        return self.role.is_it

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pos": list(self.pos),
            "role": self.role.value,
            "tagged_by": self.tagged_by,
        }

    def __str__(self) -> str:
        marker = "*" if self.is_it else "."
        return f"{marker}#{self.id} at {self.pos}"


@dataclass(frozen=True)
class EnvironmentView:
    """
    Read-only view of the environment for agent decision-making.

    Built once per step from the pre-step state and shared by every agent,
    so all decisions in a step see the same world. Nothing here holds a
    reference back to the live WorldState.
    """

    field: Field
    players: Tuple[VisiblePlayer, ...]
    turn: int = 0
    no_tag_backs: bool = False

    @property
    def field_bounds(self) -> GridPos:
        """(width, height) of the field."""
        return self.field.bounds

    @property
    def player_ids(self) -> range:
        return range(len(self.players))

    def get_player(self, player: int) -> VisiblePlayer:
        if isinstance(player, bool) or not isinstance(player, int):
            raise UnknownPlayer(player, len(self.players))
        if not 0 <= player < len(self.players):
            raise UnknownPlayer(player, len(self.players))
        return self.players[player]

    def position_of(self, player: int) -> GridPos:
        return self.get_player(player).pos

    def role_of(self, player: int) -> Role:
        return self.get_player(player).role

    @property
    def it_player(self) -> VisiblePlayer:
        return next(p for p in self.players if p.is_it)

    def runners(self, exclude: Optional[int] = None) -> List[VisiblePlayer]:
        """Runners in index order, optionally skipping one player."""
        return [p for p in self.players if not p.is_it and p.id != exclude]

    @classmethod
    def build(cls, world: "WorldState", no_tag_backs: bool = False) -> "EnvironmentView":
        """
        Construct a frozen view from the current world.
        """
        return cls(
            field=world.field,
            players=world.snapshot(),
            turn=world.turn,
            no_tag_backs=no_tag_backs,
        )
