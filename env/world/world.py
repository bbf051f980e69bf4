"""
WorldState - authoritative state of a tag game.

Holds the immutable field and the per-player position/role records. The
environment is the only writer; agents receive a frozen ``EnvironmentView``
built from this object instead.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..core.types import GridPos, Role
from ..core.errors import UnknownPlayer
from .field import Field
from .view import VisiblePlayer


@dataclass
class PlayerState:
    """
    Position and role of a single player.

    Attributes:
        id: Stable player index (0..player_count)
        pos: Current cell
        role: IT or RUNNER (assigned by the environment only)
        tagged_by: Player that made this player IT (None for runners and
            for the initial IT)
    """

    id: int
    pos: GridPos
    role: Role = Role.RUNNER
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

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerState":
        return cls(
            id=int(data["id"]),
            pos=(int(data["pos"][0]), int(data["pos"][1])),
            role=Role(data.get("role", Role.RUNNER.value)),
            tagged_by=data.get("tagged_by"),
        )

    def freeze(self) -> VisiblePlayer:
        return VisiblePlayer(id=self.id, pos=tuple(self.pos), role=self.role, tagged_by=self.tagged_by)

    def __str__(self) -> str:
        marker = "*" if self.is_it else "."
        return f"{marker}#{self.id} at {self.pos}"


class WorldState:
    """
    Mutable container for the field, the players and the turn counter.

    Players are stored in index order; ``players[i].id == i`` always holds.
    """

    def __init__(self, field: Field, players: List[PlayerState], turn: int = 0):
        self.field = field
        self.players: List[PlayerState] = list(players)
        self.turn = turn

    # ------------------------------------------------------------------#
    # Queries
    # ------------------------------------------------------------------#
    @property
    def player_count(self) -> int:
        return len(self.players)

    def get_player(self, player: int) -> PlayerState:
        """Return the live record for ``player`` or raise UnknownPlayer."""
        # bool is an int subclass but never a valid player id
        if isinstance(player, bool) or not isinstance(player, int):
            raise UnknownPlayer(player, self.player_count)
        if not 0 <= player < self.player_count:
            raise UnknownPlayer(player, self.player_count)
        return self.players[player]

    def it_players(self) -> List[PlayerState]:
        return [p for p in self.players if p.is_it]

    def get_it(self) -> PlayerState:
        """Return the unique IT player; raises if the invariant is broken."""
        its = self.it_players()
        if len(its) != 1:
            raise RuntimeError(
                f"Single-it invariant violated: {len(its)} players are it"
            )
        return its[0]

    def runners(self) -> List[PlayerState]:
        return [p for p in self.players if not p.is_it]

    def check_invariants(self) -> None:
        """
        Verify exactly one IT, in-bounds positions and contiguous ids.

        Raises:
            RuntimeError: If any invariant is violated
        """
        self.get_it()
        for index, player in enumerate(self.players):
            if player.id != index:
                raise RuntimeError(f"Player at slot {index} has id {player.id}")
            if not self.field.in_bounds(player.pos):
                raise RuntimeError(
                    f"Player {player.id} out of bounds at {player.pos} "
                    f"(field {self.field.width}x{self.field.height})"
                )

    # ------------------------------------------------------------------#
    # Copies / serialization
    # ------------------------------------------------------------------#
    def snapshot(self) -> Tuple[VisiblePlayer, ...]:
        """Frozen, ordered records of every player."""
        return tuple(p.freeze() for p in self.players)

    def clone(self) -> "WorldState":
        return WorldState(self.field, [copy.copy(p) for p in self.players], self.turn)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field.to_dict(),
            "turn": self.turn,
            "players": [p.to_dict() for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorldState":
        return cls(
            field=Field.from_dict(data["field"]),
            players=[PlayerState.from_dict(p) for p in data.get("players", [])],
            turn=int(data.get("turn", 0)),
        )

    def __repr__(self) -> str:
        return (f"WorldState(field={self.field.width}x{self.field.height}, "
                f"turn={self.turn}, players={self.player_count})")
