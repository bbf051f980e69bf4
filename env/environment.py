"""
TagEnv - Main environment interface.

This is the authoritative owner of the field and of every player's position
and role. It provides a gym-like interface (reset/step) on top of the
primitives the simulation needs.

Usage:
    from env import TagEnv, Scenario

    env = TagEnv()
    state = env.reset(scenario=Scenario.from_counts(5, 100))

    view = env.view()                      # frozen, shared by all agents
    moves = {p: agent.decide(view, p) for p, agent in agents.items()}
    state, done, info = env.step(moves)    # apply in index order, then tag

    print(env.snapshot())

State Structure:
    {
        "world": WorldState  # Live world object (treat as read-only)
    }

Mutation only happens through apply_move() and resolve_tags().
"""

from __future__ import annotations
from typing import Dict, Any, Optional, List, Mapping, Tuple
from dataclasses import dataclass, field

from infra.logger import get_logger
from .core.types import GridPos, MoveDir, Role
from .core.errors import InvalidConfiguration
from .world import Field, VisiblePlayer, WorldState, EnvironmentView
from .scenario import Scenario
from .mechanics import (
    MovementResolver,
    MovementResolutionResult,
    MoveResult,
    TagResolver,
    TagEvent,
)

logger = get_logger(__name__)


@dataclass
class StepInfo:
    """
    Per-step metadata returned at the end of each step.

    Contains the movement results (in apply order) and the tag events
    produced by the single resolve_tags() call of the step.
    """
    movement: MovementResolutionResult
    tags: List[TagEvent] = field(default_factory=list)

    @property
    def tagged(self) -> bool:
        return bool(self.tags)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize step info to a plain dict."""
        return {
            "movement": self.movement.to_dict(),
            "tags": [t.to_dict() for t in self.tags],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StepInfo":
        """Deserialize step info from a dict."""
        return cls(
            movement=MovementResolutionResult.from_dict(data["movement"]),
            tags=[TagEvent.from_dict(t) for t in data.get("tags", [])],
        )


class TagEnv:
    """
    Tag Environment - spatial model and state owner.

    The environment manages:
    - The immutable field
    - Player positions and roles (single source of truth)
    - Move application (clamped to the field edge)
    - Tag resolution (single-it invariant)
    - The turn counter

    Attributes:
        world: Current world state
        verbose: Whether to log tags at INFO level
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the Tag Environment.

        Args:
            verbose: Log every tag at INFO (default: False, DEBUG only)
        """
        self.verbose = verbose

        # World state (will be initialized in reset())
        self.world: Optional[WorldState] = None
        self._scenario: Optional[Scenario] = None

        # Mechanics modules (stateless, can be reused)
        self._movement = MovementResolver()
        self._tagging = TagResolver()

    def reset(
        self,
        scenario: Scenario | Dict[str, Any],
        world: WorldState | Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """
        Reset the environment with a scenario, optionally using an existing world.

        Args:
            scenario: Scenario instance or dict from Scenario.to_dict()
            world: Optional WorldState or dict (from WorldState.to_dict()).
                If provided, the environment resumes from this world instead
                of placing players from the scenario.

        Returns:
            Initial state (same structure as step())

        Raises:
            InvalidConfiguration: If the scenario is invalid, or the provided
                world is malformed or does not fit the scenario
        """
        if isinstance(scenario, Scenario):
            # Clone to avoid sharing mutable players with caller
            scenario_obj = scenario.clone()
        else:
            scenario_obj = Scenario.from_dict(scenario)
        self._scenario = scenario_obj

        if world is None:
            self.world = WorldState(
                field=scenario_obj.field,
                players=scenario_obj.build_players(),
                turn=0,
            )
        else:
            self.world = self._resume_world(world, scenario_obj)

        self.world.check_invariants()
        logger.debug("Reset %r with %r", self.world, scenario_obj)
        return self._build_state()

    # ------------------------------------------------------------------#
    # Queries
    # ------------------------------------------------------------------#
    def position_of(self, player: int) -> GridPos:
        """Current cell of ``player``; raises UnknownPlayer for a bad index."""
        return self._require_world().get_player(player).pos

    def role_of(self, player: int) -> Role:
        """Current role of ``player``; raises UnknownPlayer for a bad index."""
        return self._require_world().get_player(player).role

    @property
    def field(self) -> Field:
        return self._require_world().field

    @property
    def field_bounds(self) -> GridPos:
        return self.field.bounds

    @property
    def player_count(self) -> int:
        return self._require_world().player_count

    @property
    def turn(self) -> int:
        return self._require_world().turn

    @property
    def scenario(self) -> Optional[Scenario]:
        return self._scenario

    def view(self) -> EnvironmentView:
        """Frozen read-only view of the current state for agents."""
        no_tag_backs = self._scenario.no_tag_backs if self._scenario else False
        return EnvironmentView.build(self._require_world(), no_tag_backs=no_tag_backs)

    def snapshot(self) -> Tuple[VisiblePlayer, ...]:
        """Frozen, ordered (player, position, role) records for viewers."""
        return self._require_world().snapshot()

    # ------------------------------------------------------------------#
    # Mutations
    # ------------------------------------------------------------------#
    def apply_move(self, player: int, move: MoveDir) -> MoveResult:
        """
        Move one player, clamping at the field edge. Never changes roles.
        """
        return self._movement.apply_move(self._require_world(), player, move)

    def resolve_tags(self) -> List[TagEvent]:
        """
        Swap IT with the lowest-index runner on its cell, if any.

        Call once per step after every move has been applied.
        """
        world = self._require_world()
        events = self._tagging.resolve_tags(world)
        for event in events:
            if self.verbose:
                logger.info("turn %d: %s", world.turn, event)
            else:
                logger.debug("turn %d: %s", world.turn, event)
        return events

    def step(
        self,
        moves: Mapping[int, MoveDir],
    ) -> Tuple[Dict[str, Any], bool, StepInfo]:
        """
        Execute one full step of the game.

        Step order:
        1. Apply every move in increasing player order
        2. Resolve tags once
        3. Advance the turn counter and re-check invariants

        Args:
            moves: Map of player index -> MoveDir, one per player

        Returns:
            Tuple of (state, done, info):
            - state: Dict - current state
            - done: bool - whether the scenario's step_count is reached
            - info: StepInfo - movement/tag metadata

        Raises:
            RuntimeError: If reset() hasn't been called
        """
        world = self._require_world()

        movement = self._movement.resolve_moves(world, moves)
        tags = self.resolve_tags()
        world.turn += 1
        world.check_invariants()

        logger.debug(
            "turn %d done: it=%d clamped=%s tags=%d",
            world.turn, world.get_it().id, movement.clamped_players, len(tags),
        )

        done = self._scenario is not None and world.turn >= self._scenario.step_count
        return self._build_state(), done, StepInfo(movement=movement, tags=tags)

    # ------------------------------------------------------------------#
    # Helpers
    # ------------------------------------------------------------------#
    def _require_world(self) -> WorldState:
        if self.world is None:
            raise RuntimeError("Must call reset() before using the environment")
        return self.world

    @staticmethod
    def _resume_world(world: WorldState | Dict[str, Any], scenario: Scenario) -> WorldState:
        """
        Copy or parse a saved world and check it fits ``scenario``.

        Raises:
            InvalidConfiguration: If the world is malformed, breaks an
                invariant, or does not match the scenario
        """
        try:
            world_obj = world.clone() if isinstance(world, WorldState) else WorldState.from_dict(world)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"Malformed world: {exc!r}") from exc

        if world_obj.field != scenario.field:
            raise InvalidConfiguration(
                "Provided world field does not match scenario config: "
                f"world=({world_obj.field.width}x{world_obj.field.height}), "
                f"scenario=({scenario.field_width}x{scenario.field_height})"
            )
        if world_obj.player_count != scenario.player_count:
            raise InvalidConfiguration(
                f"Provided world has {world_obj.player_count} players, "
                f"scenario expects {scenario.player_count}"
            )
        if not 0 <= world_obj.turn < scenario.step_count:
            raise InvalidConfiguration(
                f"Provided world is at turn {world_obj.turn}; "
                f"scenario runs turns 0..{scenario.step_count - 1}"
            )
        try:
            world_obj.check_invariants()
        except RuntimeError as exc:
            raise InvalidConfiguration(f"Provided world is invalid: {exc}") from exc
        return world_obj

    def _build_state(self) -> Dict[str, Any]:
        return {
            "world": self.world,
        }

    def close(self) -> None:
        """
        Clean up resources.

        Currently a no-op, but provided for gym compatibility.
        """
        pass
