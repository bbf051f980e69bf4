"""
Core value types shared by the environment, agents and runner.

Everything here is a plain value: positions are integer tuples, roles and
move directions are enums. The declaration order of ``MoveDir`` doubles as
the fixed tie-break preference used by every strategy.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

# (x, y) cell on the field. y grows downward (row index when rendered).
GridPos = Tuple[int, int]


class Role(Enum):
    """Role held by a player. Exactly one player is IT at any time."""

    IT = "it"
    RUNNER = "runner"

    @property
    def is_it(self) -> bool:
        return self is Role.IT


class MoveDir(Enum):
    """
    One-cell move a player can request for a single step.

    Order matters: strategies break ties by taking the first direction in
    declaration order (UP, DOWN, LEFT, RIGHT, STAY).
    """

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    STAY = "stay"

    @property
    def delta(self) -> GridPos:
        """(dx, dy) offset applied by this move."""
        return _DELTAS[self]

    def apply(self, pos: GridPos) -> GridPos:
        """Return the (unclamped) position reached from ``pos``."""
        dx, dy = self.delta
        return (pos[0] + dx, pos[1] + dy)


_DELTAS = {
    MoveDir.UP: (0, -1),
    MoveDir.DOWN: (0, 1),
    MoveDir.LEFT: (-1, 0),
    MoveDir.RIGHT: (1, 0),
    MoveDir.STAY: (0, 0),
}


class SimulationPhase(Enum):
    """Lifecycle of a simulation run. No pause/resume."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"
