"""World model: field geometry, player records and agent views."""

from .field import Field
from .world import PlayerState, WorldState
from .view import EnvironmentView, VisiblePlayer

__all__ = [
    "Field",
    "PlayerState",
    "WorldState",
    "EnvironmentView",
    "VisiblePlayer",
]
