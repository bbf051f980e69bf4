"""
Shared plumbing for role strategies.

Candidates are evaluated where the player would actually end up, i.e. after
clamping to the field edge, and are listed in MoveDir declaration order so
``min``/``max`` (which keep the first best element) apply the fixed
UP, DOWN, LEFT, RIGHT, STAY tie-break for free.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

from env.core.types import GridPos, MoveDir
from env.world.view import EnvironmentView

# Tie-break preference order.
MOVE_PREFERENCE: Tuple[MoveDir, ...] = tuple(MoveDir)


class Strategy(ABC):
    """Deterministic decision logic for one role."""

    @abstractmethod
    def decide(self, view: EnvironmentView, player: int) -> MoveDir:
        """Return the move for ``player`` given the pre-step view."""
        pass

    @staticmethod
    def candidates(view: EnvironmentView, pos: GridPos) -> List[Tuple[MoveDir, GridPos]]:
        """Every move with its clamped landing cell, in preference order."""
        return [(move, view.field.clamp(move.apply(pos))) for move in MOVE_PREFERENCE]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
