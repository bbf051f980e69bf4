"""
Scenario system for creating and managing tag games.

Provides type-safe Python definitions for game setups and JSON serialization.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Any, Optional, TYPE_CHECKING
import json
import math
import random
import time

from infra.logger import get_logger
from infra.paths import PROJECT_ROOT, SCENARIO_STORAGE_DIR
from .core.types import Role
from .core.errors import InvalidConfiguration
from .world.field import Field
from .world.world import PlayerState

if TYPE_CHECKING:
    from agents import AgentSpec

logger = get_logger(__name__)

DEFAULT_PLAYER_COUNT = 5
DEFAULT_STEP_COUNT = 100
DEFAULT_SEED = 0
MIN_FIELD_SIZE = 20


def field_size_for(player_count: int) -> int:
    """
    Side length of a square field that comfortably holds ``player_count``.

    At least MIN_FIELD_SIZE, and roughly four cells per player beyond that.
    """
    return max(MIN_FIELD_SIZE, 2 * math.ceil(math.sqrt(max(player_count, 1))))


class Scenario:
    """
    A complete, self-contained tag game definition.

    A scenario includes EVERYTHING needed to initialize an environment:
    - Field dimensions
    - Player and step counts
    - Random seed used for the initial placement
    - Rule switches (no tag-backs)
    - Optional explicit players (positions and roles)
    - The agent spec used for every player

    Player 0 starts as IT unless explicit players say otherwise.

    Example:
        scenario = Scenario(player_count=2, step_count=10, field_width=5, field_height=5,
                            players=[PlayerState(0, (0, 0), Role.IT), PlayerState(1, (1, 0))])
        scenario.save_json("chase.json")
        scenario = Scenario.load_json("chase.json")
    """

    def __init__(
        self,
        player_count: Optional[int] = None,
        step_count: int = DEFAULT_STEP_COUNT,
        field_width: Optional[int] = None,
        field_height: Optional[int] = None,
        seed: Optional[int] = DEFAULT_SEED,
        no_tag_backs: bool = False,
        players: Optional[List[PlayerState]] = None,
        agent: Optional["AgentSpec"] = None,
    ):
        """
        Initialize a scenario with game configuration.

        Args:
            player_count: Number of players (>= 1); defaults to len(players)
                when explicit players are given, else DEFAULT_PLAYER_COUNT
            step_count: Number of steps to run (>= 1)
            field_width: Field width; defaults to a size fitting the players
            field_height: Field height; defaults to a size fitting the players
            seed: Seed for the initial placement (None = fresh randomness)
            no_tag_backs: IT ignores the player who tagged it while others remain
            players: Optional explicit players; overrides seeded placement
            agent: AgentSpec used for every player (default type "tag")

        Raises:
            InvalidConfiguration: If the configuration cannot produce a valid game
        """
        # Local import to avoid circular imports during module load
        from agents import AgentSpec

        if player_count is None:
            player_count = len(players) if players is not None else DEFAULT_PLAYER_COUNT

        side = field_size_for(player_count) if _is_int(player_count) else MIN_FIELD_SIZE
        self.player_count = player_count
        self.step_count = step_count
        self.field_width = side if field_width is None else field_width
        self.field_height = side if field_height is None else field_height
        self.seed = seed
        self.no_tag_backs = no_tag_backs
        self.players: Optional[List[PlayerState]] = list(players) if players is not None else None
        self.agent: AgentSpec = agent if agent is not None else AgentSpec()

        self.validate()

    @classmethod
    def from_counts(
        cls,
        player_count: Optional[int] = None,
        step_count: Optional[int] = None,
        **kwargs: Any,
    ) -> Scenario:
        """Build a default scenario from the two CLI integers (None -> default)."""
        return cls(
            player_count=DEFAULT_PLAYER_COUNT if player_count is None else player_count,
            step_count=DEFAULT_STEP_COUNT if step_count is None else step_count,
            **kwargs,
        )

    # ------------------------------------------------------------------#
    # Validation / placement
    # ------------------------------------------------------------------#
    def validate(self) -> None:
        """
        Reject configurations the simulation must not start with.

        Raises:
            InvalidConfiguration: With a description of the first problem found
        """
        for label, value in (("player_count", self.player_count), ("step_count", self.step_count)):
            if not _is_int(value) or value <= 0:
                raise InvalidConfiguration(f"{label} must be a positive integer, got {value!r}")
        for label, value in (("field_width", self.field_width), ("field_height", self.field_height)):
            if not _is_int(value) or value <= 0:
                raise InvalidConfiguration(f"{label} must be a positive integer, got {value!r}")

        field = self.field
        if self.players is None:
            if field.area < self.player_count:
                raise InvalidConfiguration(
                    f"A {field.width}x{field.height} field cannot hold "
                    f"{self.player_count} players on distinct cells"
                )
            return

        if len(self.players) != self.player_count:
            raise InvalidConfiguration(
                f"player_count={self.player_count} but {len(self.players)} players given"
            )
        ids = [p.id for p in self.players]
        if sorted(ids) != list(range(self.player_count)):
            raise InvalidConfiguration(f"Player ids must be 0..{self.player_count - 1}, got {ids}")
        its = [p.id for p in self.players if p.role is Role.IT]
        if len(its) != 1:
            raise InvalidConfiguration(f"Exactly one player must be it, got {len(its)}")
        for p in self.players:
            if not field.in_bounds(p.pos):
                raise InvalidConfiguration(
                    f"Player {p.id} at {p.pos} is outside the {field.width}x{field.height} field"
                )

    @property
    def field(self) -> Field:
        return Field(self.field_width, self.field_height)

    def build_players(self) -> List[PlayerState]:
        """
        Produce the step-0 players.

        Explicit players are copied as given (sorted by id). Otherwise
        distinct cells are sampled with ``random.Random(seed)`` and player 0
        is made IT.
        """
        if self.players is not None:
            ordered = sorted(self.players, key=lambda p: p.id)
            return [PlayerState(p.id, tuple(p.pos), p.role, p.tagged_by) for p in ordered]

        # row-major cell indexes, decoded to (x, y)
        rng = random.Random(self.seed)
        indexes = rng.sample(range(self.field.area), self.player_count)
        players = []
        for i, index in enumerate(indexes):
            y, x = divmod(index, self.field_width)
            players.append(PlayerState(id=i, pos=(x, y), role=Role.IT if i == 0 else Role.RUNNER))
        return players

    def clone(self) -> Scenario:
        """
        Create a deep copy of this scenario (including explicit players).
        """
        return Scenario.from_dict(self.to_dict())

    # ------------------------------------------------------------------#
    # Serialization
    # ------------------------------------------------------------------#
    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible dictionary.

        Returns:
            Dict with config, optional players and the agent spec
        """
        data: Dict[str, Any] = {
            "config": {
                "player_count": self.player_count,
                "step_count": self.step_count,
                "field_width": self.field_width,
                "field_height": self.field_height,
                "seed": self.seed,
                "no_tag_backs": self.no_tag_backs,
            },
            "agent": self.agent.to_dict(),
        }
        if self.players is not None:
            data["players"] = [p.to_dict() for p in self.players]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Scenario:
        """
        Deserialize from a dictionary produced by to_dict().

        Missing config keys fall back to the defaults.
        """
        # Local import to avoid circular imports during module load
        from agents import AgentSpec

        config = data.get("config", {})
        players_data = data.get("players")
        players = None
        if players_data is not None:
            players = [p if isinstance(p, PlayerState) else PlayerState.from_dict(p) for p in players_data]

        agent_data = data.get("agent")
        if agent_data is None or isinstance(agent_data, AgentSpec):
            agent = agent_data
        elif isinstance(agent_data, dict):
            agent = AgentSpec.from_dict(agent_data)
        else:
            raise TypeError(f"Agent definition must be AgentSpec or dict, got {type(agent_data)}")

        return cls(
            player_count=config.get("player_count"),
            step_count=config.get("step_count", DEFAULT_STEP_COUNT),
            field_width=config.get("field_width"),
            field_height=config.get("field_height"),
            seed=config.get("seed", DEFAULT_SEED),
            no_tag_backs=config.get("no_tag_backs", False),
            players=players,
            agent=agent,
        )

    def save_json(self, filepath: str | Path | None = None, indent: int = 2) -> Path:
        """
        Save scenario to JSON file.

        Args:
            filepath: Path to save to. If None, saves under storage/scenarios with a timestamped name.
            indent: JSON indentation (default: 2)

        Returns:
            The path written
        """
        if filepath is None:
            base_dir = SCENARIO_STORAGE_DIR
            base_dir.mkdir(parents=True, exist_ok=True)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            filepath = base_dir / f"scenario_{timestamp}.json"
        else:
            filepath = Path(filepath)
            if not filepath.is_absolute():
                filepath = PROJECT_ROOT / filepath
            filepath.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Saving scenario JSON to %s", filepath)
        with open(filepath, 'w', encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=indent, ensure_ascii=False)
        return filepath

    @classmethod
    def load_json(cls, filepath: str | Path) -> Scenario:
        """
        Load scenario from JSON file.

        Args:
            filepath: Path to load from

        Returns:
            Loaded Scenario
        """
        with open(filepath, 'r', encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __str__(self) -> str:
        """String representation."""
        return (f"Scenario(players={self.player_count}, steps={self.step_count}, "
                f"field={self.field_width}x{self.field_height})")

    def __repr__(self) -> str:
        """Detailed representation."""
        return (f"Scenario(player_count={self.player_count}, step_count={self.step_count}, "
                f"field_width={self.field_width}, field_height={self.field_height}, "
                f"seed={self.seed}, no_tag_backs={self.no_tag_backs}, agent={self.agent!r})")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# SCENARIO BUILDERS (Examples/Templates)
# =============================================================================

def create_default_scenario(
    player_count: int = DEFAULT_PLAYER_COUNT,
    step_count: int = DEFAULT_STEP_COUNT,
) -> Scenario:
    """
    The stock game: seeded random placement, player 0 starts as IT.
    """
    return Scenario.from_counts(player_count, step_count)


def create_corner_scenario(step_count: int = 10) -> Scenario:
    """
    A runner pinned at the end of a one-row corridor with IT right next to it.
    """
    return Scenario(
        player_count=2,
        step_count=step_count,
        field_width=3,
        field_height=1,
        players=[
            PlayerState(id=0, pos=(1, 0), role=Role.IT),
            PlayerState(id=1, pos=(2, 0), role=Role.RUNNER),
        ],
    )


if __name__ == "__main__":
    # Can be run via python -m env.scenario
    # Configure logging (otherwise logger won't work since main.py is not run)
    from infra.logger import configure_logging
    configure_logging(level="INFO")
    scenario = create_default_scenario()
    scenario.save_json()
