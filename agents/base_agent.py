"""
Base agent interface for the tag environment.

All agents must implement this interface to take part in a simulation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from env.core.types import MoveDir
from env.world.view import EnvironmentView


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    One agent instance drives one player. Agents only ever see a frozen
    ``EnvironmentView`` and answer with a ``MoveDir``; the simulation applies
    the move. Roles are read from the view, never assigned by the agent.

    Subclasses must implement:
    - decide(): Produce the move for one player this step

    Attributes:
        name: Agent name for logging/identification
        last_move: Move returned by the previous decide() call (None before
            the first step)
    """

    def __init__(self, name: Optional[str] = None):
        """
        Initialize the agent.

        Args:
            name: Optional name for the agent (defaults to class name)
        """
        self.name = name or self.__class__.__name__
        self.last_move: Optional[MoveDir] = None

    @abstractmethod
    def decide(self, view: EnvironmentView, player: int) -> MoveDir:
        """
        Choose the move for ``player`` given the pre-step view.

        Must be deterministic: the same view and player must always yield
        the same move.

        Args:
            view: Read-only snapshot of the environment before this step
            player: Index of the player this agent controls

        Returns:
            One of the five MoveDir values
        """
        pass

    def __str__(self) -> str:
        """String representation."""
        return self.name

    def __repr__(self) -> str:
        """Detailed representation."""
        return f"{self.__class__.__name__}(name='{self.name}')"
