"""Game mechanics: movement and tag resolution."""

from .movement import MovementResolver, MoveResult, MovementResolutionResult
from .tagging import TagResolver, TagEvent

__all__ = [
    "MovementResolver",
    "MoveResult",
    "MovementResolutionResult",
    "TagResolver",
    "TagEvent",
]
