from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from env.core.types import MoveDir
from env.environment import StepInfo
from env.mechanics import TagEvent
from env.world import Field, VisiblePlayer


@dataclass
class Frame:
    """
    Snapshot of a single step, with helpers to serialize for transport.

    ``players`` holds frozen post-resolution records of every player in index order.
    ``moves`` and ``tags`` describe what happened during the step (both empty
    for the step-0 frame).
    """

    step: int
    area: Field
    players: Tuple[VisiblePlayer, ...]
    moves: Optional[Mapping[int, MoveDir]] = None
    tags: List[TagEvent] = field(default_factory=list)
    step_info: Optional[StepInfo] = None
    done: bool = False

    @property
    def it_player(self) -> int:
        return next(p.id for p in self.players if p.is_it)

    @property
    def tagged_players(self) -> List[int]:
        return [t.tagged for t in self.tags]

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the frame into a JSON-friendly dictionary.
        """
        frame: Dict[str, Any] = {
            "step": self.step,
            "field": self.area.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "it": self.it_player,
            "done": self.done,
        }

        moves_payload = self._serialize_moves(self.moves or {})
        if moves_payload:
            frame["moves"] = moves_payload
        if self.tags:
            frame["tags"] = [t.to_dict() for t in self.tags]
        if self.step_info is not None:
            frame["step_info"] = self.step_info.to_dict()

        return frame

    @staticmethod
    def _serialize_moves(moves: Mapping[int, MoveDir]) -> List[Dict[str, Any]]:
        """Serialize the move map to a list ordered by player."""
        return [
            {"player": player, "move": moves[player].value}
            for player in sorted(moves)
        ]
