from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from agents import PreparedAgent, create_agents
from env import TagEnv
from env.core.types import MoveDir, SimulationPhase
from env.environment import StepInfo
from env.scenario import Scenario
from env.world import WorldState
from infra.logger import get_logger

from game_frame import Frame

logger = get_logger(__name__)


class Viewer(Protocol):
    """Anything that wants to see each frame (renderers, recorders)."""

    def capture(self, frame: Frame) -> None:
        ...


class Simulation:
    """
    Step-by-step tag simulation that hands a Frame to every viewer.

    Lifecycle: NOT_STARTED -> RUNNING -> FINISHED. The first step() moves the
    run to RUNNING; it becomes FINISHED once the turn counter reaches
    ``step_count``. When resumed from a saved world, numbering continues from
    that world's turn.
    Use get_initial_frame() for the placement before any move, then step()
    until done, or run() to completion.
    """

    def __init__(
        self,
        scenario: Scenario,
        viewers: Sequence[Viewer] = (),
        world: WorldState | Dict[str, Any] | None = None,
        verbose: bool = False,
    ):
        self.scenario = scenario.clone()
        self.verbose = verbose
        self.viewers: List[Viewer] = list(viewers)

        self.env = TagEnv(verbose=verbose)
        self._state = self.env.reset(scenario=self.scenario, world=world)

        self._agents: List[PreparedAgent] = create_agents(
            self.scenario.agent, self.scenario.player_count
        )

        self._phase = SimulationPhase.NOT_STARTED
        # A resumed world keeps counting from its own turn.
        self._step = self.env.turn
        self._last_info: StepInfo | None = None

    # ------------------------------------------------------------------#
    # Properties
    # ------------------------------------------------------------------#
    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    @property
    def phase(self) -> SimulationPhase:
        return self._phase

    @property
    def done(self) -> bool:
        return self._phase is SimulationPhase.FINISHED

    @property
    def step_number(self) -> int:
        """Number of completed steps."""
        return self._step

    @property
    def step_count(self) -> int:
        return self.scenario.step_count

    @property
    def agents(self) -> List[PreparedAgent]:
        return list(self._agents)

    @property
    def last_info(self) -> StepInfo | None:
        return self._last_info

    # ------------------------------------------------------------------#
    # Core API
    # ------------------------------------------------------------------#
    def get_initial_frame(self) -> Frame:
        """Placement before any move (step 0)."""
        return Frame(
            step=self._step,
            area=self.env.field,
            players=self.env.snapshot(),
            done=self.done,
        )

    def step(self) -> Frame:
        """
        Execute one step and return its frame.

        1. Every agent decides, in player order, against one pre-step view
        2. Moves are applied in the same order
        3. Tags are resolved once
        4. The post-resolution frame goes to every viewer
        5. The step counter advances

        Raises:
            RuntimeError: If the simulation already finished
            TypeError: If an agent returned something other than a MoveDir
        """
        if self._phase is SimulationPhase.FINISHED:
            raise RuntimeError("Simulation is already finished")
        if self._phase is SimulationPhase.NOT_STARTED:
            logger.info(
                "Starting simulation at step %d: %d players, %d steps, field %dx%d",
                self._step, self.scenario.player_count, self.scenario.step_count,
                self.scenario.field_width, self.scenario.field_height,
            )
            self._phase = SimulationPhase.RUNNING

        moves = self._collect_moves()
        self._state, _done, self._last_info = self.env.step(moves)
        self._step += 1

        if self._step >= self.scenario.step_count:
            self._phase = SimulationPhase.FINISHED
            logger.info("Simulation finished after %d steps", self._step)

        frame = Frame(
            step=self._step,
            area=self.env.field,
            players=self.env.snapshot(),
            moves=moves,
            tags=list(self._last_info.tags),
            step_info=self._last_info,
            done=self.done,
        )
        for viewer in self.viewers:
            viewer.capture(frame)
        return frame

    def run(self, *, include_history: bool = False) -> Frame | list[Frame]:
        """
        Run the remaining steps to completion.

        Returns the final frame, or every frame produced by this call if
        include_history is True.
        """
        frames: list[Frame] = []
        while not self.done:
            frames.append(self.step())
        if include_history:
            return frames
        return frames[-1] if frames else self.get_initial_frame()

    # Helpers
    def _collect_moves(self) -> Dict[int, MoveDir]:
        # One view for the whole step: later players must not see earlier moves.
        view = self.env.view()
        moves: Dict[int, MoveDir] = {}
        for prepared in self._agents:
            move = prepared.agent.decide(view, prepared.player)
            if not isinstance(move, MoveDir):
                raise TypeError(
                    f"Agent {prepared.agent} returned {move!r} for player {prepared.player}; "
                    "expected a MoveDir"
                )
            moves[prepared.player] = move
        return moves


def run_simulation(
    player_count: Optional[int] = None,
    step_count: Optional[int] = None,
    viewers: Sequence[Viewer] = (),
    **scenario_kwargs: Any,
) -> list[Frame]:
    """Build a scenario from the two counts and return every frame of the run."""
    scenario = Scenario.from_counts(player_count, step_count, **scenario_kwargs)
    simulation = Simulation(scenario, viewers=viewers)
    return simulation.run(include_history=True)  # type: ignore[return-value]
