"""Role strategies: what IT and the runners do each step."""

from .base import Strategy, MOVE_PREFERENCE
from .it_strategy import ItStrategy
from .runner_strategy import RunnerStrategy

__all__ = ["Strategy", "MOVE_PREFERENCE", "ItStrategy", "RunnerStrategy"]
