"""
Default tag player: chases when it is IT, runs otherwise.
"""

from typing import Any, Optional

from env.core.types import MoveDir
from env.world.view import EnvironmentView
from infra.logger import get_logger
from ..base_agent import BaseAgent
from ..registry import register_agent
from ..strategies import ItStrategy, RunnerStrategy

logger = get_logger(__name__)


@register_agent("tag")
class TagAgent(BaseAgent):
    """
    Agent that delegates to the strategy matching the player's current role.

    Decision process:
    - Read the player's role from the view
    - IT -> ItStrategy (close in on the nearest runner)
    - RUNNER -> RunnerStrategy (maximize distance from IT)

    The role can change between steps after a tag, so the strategy is
    picked again on every call.
    """

    def __init__(self, name: Optional[str] = None, **_: Any):
        """
        Initialize the tag agent.

        Args:
            name: Agent name (default: "TagAgent")
        """
        super().__init__(name)
        self.it_strategy = ItStrategy()
        self.runner_strategy = RunnerStrategy()

    def decide(self, view: EnvironmentView, player: int) -> MoveDir:
        role = view.role_of(player)
        strategy = self.it_strategy if role.is_it else self.runner_strategy
        move = strategy.decide(view, player)
        logger.debug("turn %d player %d (%s) -> %s", view.turn, player, role.value, move.value)
        self.last_move = move
        return move
