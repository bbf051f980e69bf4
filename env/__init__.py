"""
Tag Environment - a 2D turn-based simulation of the game of tag.

This package provides a small, deterministic, testable environment: a
bounded grid field, players with positions and roles (exactly one is IT),
clamped one-cell moves and tag resolution.

Quick Start:
    from env import TagEnv, Scenario
    from env.core import MoveDir

    # Create environment and scenario
    env = TagEnv()
    state = env.reset(scenario=Scenario.from_counts(player_count=5, step_count=100))

    # Run one step
    moves = {p: MoveDir.STAY for p in range(env.player_count)}
    state, done, info = env.step(moves)
"""

__version__ = "1.0.0"

# Main environment interface
from .environment import TagEnv, StepInfo

# Scenario system
from .scenario import (
    Scenario,
    create_default_scenario,
    create_corner_scenario,
)

# Core types available at package level
from .core import (
    GridPos,
    Role,
    MoveDir,
    SimulationPhase,
    UnknownPlayer,
    InvalidConfiguration,
)

from .world import (
    Field,
    PlayerState,
    WorldState,
    EnvironmentView,
)

from .mechanics import TagEvent, MoveResult

from .rendering import (
    AsciiRenderer,
    RenderStateBuilder,
    WebRenderer,
)

__all__ = [
    # Main interface
    "TagEnv",
    "StepInfo",

    # Scenario system
    "Scenario",
    "create_default_scenario",
    "create_corner_scenario",

    # Core types
    "GridPos",
    "Role",
    "MoveDir",
    "SimulationPhase",
    "UnknownPlayer",
    "InvalidConfiguration",

    # World
    "Field",
    "PlayerState",
    "WorldState",
    "EnvironmentView",
    "TagEvent",
    "MoveResult",

    # Rendering
    "AsciiRenderer",
    "RenderStateBuilder",
    "WebRenderer",
]
