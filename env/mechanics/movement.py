"""
MovementResolver - Move application.

This module handles:
- Applying a one-cell move to a player
- Clamping results that leave the field to the nearest edge cell
- Applying a full step of moves in player-index order

Leaving the field is an expected, routine outcome (a runner backed into a
wall), so it is clamped rather than rejected.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping

from ..core.types import GridPos, MoveDir

if TYPE_CHECKING:
    from ..world.world import WorldState


@dataclass
class MoveResult:
    """
    Result of applying a single move.

    Attributes:
        player: Player that moved
        move: Requested direction
        from_pos: Position before the move
        to_pos: Position after the move (always in bounds)
        clamped: Whether the field edge stopped the move
    """
    player: int
    move: MoveDir
    from_pos: GridPos
    to_pos: GridPos
    clamped: bool

    @property
    def moved(self) -> bool:
        return self.from_pos != self.to_pos

    def to_dict(self) -> Dict[str, Any]:
        """Serialize move result to a plain dict."""
        return {
            "player": self.player,
            "move": self.move.value,
            "from_pos": list(self.from_pos),
            "to_pos": list(self.to_pos),
            "clamped": self.clamped,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoveResult":
        return cls(
            player=data["player"],
            move=MoveDir(data["move"]),
            from_pos=tuple(data["from_pos"]),
            to_pos=tuple(data["to_pos"]),
            clamped=data["clamped"],
        )


@dataclass
class MovementResolutionResult:
    """All move results for one step, in the order they were applied."""
    results: List[MoveResult] = field(default_factory=list)

    @property
    def clamped_players(self) -> List[int]:
        return [r.player for r in self.results if r.clamped]

    def to_dict(self) -> Dict[str, Any]:
        return {"results": [r.to_dict() for r in self.results]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MovementResolutionResult":
        return cls(results=[MoveResult.from_dict(r) for r in data.get("results", [])])


class MovementResolver:
    """
    Applies moves to the world in place. Stateless; never touches roles.
    """

    def apply_move(self, world: WorldState, player: int, move: MoveDir) -> MoveResult:
        """
        Move one player by one cell, clamping to the field edge.

        Args:
            world: World to mutate
            player: Player index
            move: Requested direction

        Returns:
            MoveResult describing what happened

        Raises:
            UnknownPlayer: If ``player`` is not a valid index
            TypeError: If ``move`` is not a MoveDir
        """
        if not isinstance(move, MoveDir):
            raise TypeError(f"Player {player} requested an invalid move: {move!r}")

        state = world.get_player(player)
        from_pos = state.pos
        candidate = move.apply(from_pos)
        to_pos = world.field.clamp(candidate)
        state.pos = to_pos

        return MoveResult(
            player=player,
            move=move,
            from_pos=from_pos,
            to_pos=to_pos,
            clamped=to_pos != candidate,
        )

    def resolve_moves(
        self,
        world: WorldState,
        moves: Mapping[int, MoveDir],
    ) -> MovementResolutionResult:
        """
        Apply one move per player in increasing player-index order.

        Raises:
            ValueError: If ``moves`` does not hold exactly one move per player
        """
        expected = set(range(world.player_count))
        if set(moves) != expected:
            missing = sorted(expected - set(moves))
            extra = sorted(set(moves) - expected)
            raise ValueError(
                f"Must apply one move for each player (missing={missing}, extra={extra})"
            )

        result = MovementResolutionResult()
        for player in range(world.player_count):
            result.results.append(self.apply_move(world, player, moves[player]))
        return result
