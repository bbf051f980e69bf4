"""
Agent interface and implementations for the tag environment.

This module provides:
- BaseAgent: Abstract interface for all agents
- ItStrategy / RunnerStrategy: Role-specific decision logic
- TagAgent: Default agent that switches strategy with the player's role
"""

from .base_agent import BaseAgent
from .factory import PreparedAgent, create_agent_from_spec, create_agents

from .registry import register_agent, resolve_agent_class, registered_agent_types
from .spec import AgentSpec
from .strategies import Strategy, ItStrategy, RunnerStrategy, MOVE_PREFERENCE
from .tag_agent import TagAgent

__all__ = [
    "BaseAgent",
    "AgentSpec",
    "PreparedAgent",
    "create_agent_from_spec",
    "create_agents",
    "register_agent",
    "resolve_agent_class",
    "registered_agent_types",
    "Strategy",
    "ItStrategy",
    "RunnerStrategy",
    "MOVE_PREFERENCE",
    "TagAgent",
]
