"""Core types and errors for the tag environment."""

from .types import GridPos, Role, MoveDir, SimulationPhase
from .errors import UnknownPlayer, InvalidConfiguration

__all__ = [
    "GridPos",
    "Role",
    "MoveDir",
    "SimulationPhase",
    "UnknownPlayer",
    "InvalidConfiguration",
]
