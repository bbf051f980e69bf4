from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .base_agent import BaseAgent
from .registry import resolve_agent_class
from .spec import AgentSpec


@dataclass
class PreparedAgent:
    """An instantiated agent bound to the player it controls."""

    spec: AgentSpec
    player: int
    agent: BaseAgent


def create_agent_from_spec(spec: AgentSpec, player: int) -> PreparedAgent:
    """Instantiate the agent described by ``spec`` for one player."""
    agent_cls = resolve_agent_class(spec.type)
    name = f"{spec.name or agent_cls.__name__}#{player}"
    agent = agent_cls(name=name, **spec.init_params)
    return PreparedAgent(spec=spec, player=player, agent=agent)


def create_agents(spec: AgentSpec, player_count: int) -> List[PreparedAgent]:
    """One agent per player, in player-index order."""
    return [create_agent_from_spec(spec, player) for player in range(player_count)]
