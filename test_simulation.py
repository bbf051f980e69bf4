"""
Simulation tests: step protocol, lifecycle and whole-run invariants.
"""

import dataclasses
import unittest
from typing import List

from agents import AgentSpec, BaseAgent, register_agent
from env import (
    InvalidConfiguration,
    MoveDir,
    PlayerState,
    Role,
    Scenario,
    SimulationPhase,
    TagEvent,
    create_corner_scenario,
)
from game_frame import Frame
from game_runner import Simulation, run_simulation


@register_agent("test-recording")
class RecordingAgent(BaseAgent):
    """Always moves right and remembers every view it was shown."""

    seen: List[tuple] = []

    def decide(self, view, player):
        RecordingAgent.seen.append((view.turn, player, view, view.position_of(player)))
        return MoveDir.RIGHT


@register_agent("test-broken")
class BrokenAgent(BaseAgent):
    def decide(self, view, player):
        return "right"


class FrameCollector:
    def __init__(self) -> None:
        self.frames: List[Frame] = []

    def capture(self, frame: Frame) -> None:
        self.frames.append(frame)


class MeddlingViewer:
    """Tries to rewrite the first player of every frame it is shown."""

    def __init__(self) -> None:
        self.errors: List[Exception] = []

    def capture(self, frame: Frame) -> None:
        try:
            frame.players[0].pos = (99, 99)
        except dataclasses.FrozenInstanceError as exc:
            self.errors.append(exc)


def assert_invariants(test: unittest.TestCase, frame: Frame) -> None:
    its = [p for p in frame.players if p.role is Role.IT]
    test.assertEqual(len(its), 1, f"step {frame.step}: {len(its)} players are it")
    for player in frame.players:
        x, y = player.pos
        test.assertTrue(0 <= x < frame.area.width, f"step {frame.step}: {player}")
        test.assertTrue(0 <= y < frame.area.height, f"step {frame.step}: {player}")


class TestLifecycle(unittest.TestCase):
    def test_phases(self) -> None:
        sim = Simulation(Scenario.from_counts(3, 2))
        self.assertIs(sim.phase, SimulationPhase.NOT_STARTED)

        sim.step()
        self.assertIs(sim.phase, SimulationPhase.RUNNING)
        self.assertFalse(sim.done)

        frame = sim.step()
        self.assertIs(sim.phase, SimulationPhase.FINISHED)
        self.assertTrue(frame.done)
        self.assertEqual(sim.step_number, 2)

        with self.assertRaises(RuntimeError):
            sim.step()

    def test_run_returns_every_frame(self) -> None:
        frames = Simulation(Scenario.from_counts(4, 7)).run(include_history=True)
        self.assertEqual([f.step for f in frames], list(range(1, 8)))
        self.assertTrue(frames[-1].done)
        self.assertFalse(any(f.done for f in frames[:-1]))

    def test_initial_frame(self) -> None:
        sim = Simulation(Scenario.from_counts(5, 3))
        frame = sim.get_initial_frame()
        self.assertEqual(frame.step, 0)
        self.assertEqual(frame.it_player, 0)
        self.assertEqual(len({p.pos for p in frame.players}), 5)
        self.assertEqual(frame.tags, [])

    def test_viewers_get_each_frame_after_resolution(self) -> None:
        collector = FrameCollector()
        sim = Simulation(create_corner_scenario(step_count=3), viewers=[collector])
        sim.run()
        self.assertEqual([f.step for f in collector.frames], [1, 2, 3])
        first = collector.frames[0]
        self.assertEqual(first.tags, [TagEvent(tagger=0, tagged=1, position=(2, 0))])
        self.assertEqual(first.it_player, 1)

    def test_viewers_cannot_alter_frames_for_each_other(self) -> None:
        meddler = MeddlingViewer()
        collector = FrameCollector()
        sim = Simulation(create_corner_scenario(step_count=2), viewers=[meddler, collector])
        sim.run()
        self.assertEqual(len(meddler.errors), 2)
        self.assertEqual([f.players[0].pos for f in collector.frames], [(2, 0), (1, 0)])
        self.assertEqual(sim.env.position_of(0), (1, 0))

    def test_resumed_run_continues_the_turn_count(self) -> None:
        scenario = Scenario.from_counts(3, 4, field_width=8, field_height=8)
        first = Simulation(scenario)
        for _ in range(3):
            first.step()
        saved = first.env.world.to_dict()

        collector = FrameCollector()
        resumed = Simulation(scenario, viewers=[collector], world=saved)
        self.assertEqual(resumed.step_number, 3)
        self.assertEqual(resumed.get_initial_frame().step, 3)

        resumed.run()
        self.assertEqual([f.step for f in collector.frames], [4])
        self.assertEqual(resumed.env.turn, 4)
        self.assertTrue(resumed.done)

        # both runs end in the same place
        first.step()
        self.assertEqual(resumed.env.snapshot(), first.env.snapshot())

    def test_resume_of_a_finished_world_is_rejected(self) -> None:
        scenario = Scenario.from_counts(3, 2, field_width=8, field_height=8)
        sim = Simulation(scenario)
        sim.run()
        with self.assertRaises(InvalidConfiguration):
            Simulation(scenario, world=sim.env.world.to_dict())


class TestStepProtocol(unittest.TestCase):
    def setUp(self) -> None:
        RecordingAgent.seen = []

    def test_all_decisions_use_the_pre_step_view(self) -> None:
        scenario = Scenario(
            field_width=10,
            field_height=3,
            step_count=2,
            players=[
                PlayerState(0, (0, 0), Role.IT),
                PlayerState(1, (1, 0)),
                PlayerState(2, (2, 0)),
            ],
            agent=AgentSpec(type="test-recording"),
        )
        sim = Simulation(scenario)
        sim.step()

        self.assertEqual([player for _, player, _, _ in RecordingAgent.seen], [0, 1, 2])
        views = {id(view) for _, _, view, _ in RecordingAgent.seen}
        self.assertEqual(len(views), 1)
        # Player 1 decided before anyone moved even though player 0 went first.
        self.assertEqual([pos for _, _, _, pos in RecordingAgent.seen], [(0, 0), (1, 0), (2, 0)])

        self.assertEqual(sim.env.position_of(0), (1, 0))
        self.assertEqual(sim.env.position_of(2), (3, 0))

    def test_invalid_move_is_fatal(self) -> None:
        scenario = Scenario.from_counts(2, 3, agent=AgentSpec(type="test-broken"))
        sim = Simulation(scenario)
        with self.assertRaises(TypeError):
            sim.step()

    def test_two_player_scenario(self) -> None:
        scenario = Scenario(
            field_width=10,
            field_height=10,
            step_count=1,
            players=[PlayerState(0, (0, 0), Role.IT), PlayerState(1, (1, 0))],
        )
        frame = Simulation(scenario).step()
        self.assertEqual(frame.moves, {0: MoveDir.RIGHT, 1: MoveDir.RIGHT})
        self.assertEqual([p.pos for p in frame.players], [(1, 0), (2, 0)])
        self.assertEqual(frame.tags, [])
        self.assertEqual(frame.it_player, 0)

    def test_cornered_runner_is_tagged_within_bounded_steps(self) -> None:
        sim = Simulation(create_corner_scenario(step_count=5))
        tagged_at = None
        for _ in range(5):
            frame = sim.step()
            if frame.tags:
                tagged_at = frame.step
                break
        self.assertIsNotNone(tagged_at)
        self.assertLessEqual(tagged_at, 2)
        self.assertEqual(frame.it_player, 1)

    def test_tagged_runner_is_it_next_step(self) -> None:
        sim = Simulation(create_corner_scenario(step_count=2))
        frame = sim.step()
        self.assertEqual(frame.tagged_players, [1])
        self.assertIs(sim.env.view().role_of(1), Role.IT)


class TestWholeRunProperties(unittest.TestCase):
    CONFIGS = [
        dict(player_count=1, step_count=5),
        dict(player_count=2, step_count=40),
        dict(player_count=5, step_count=100),
        dict(player_count=5, step_count=60, field_width=3, field_height=3),
        dict(player_count=9, step_count=60, field_width=3, field_height=3),
        dict(player_count=12, step_count=50, field_width=4, field_height=6, no_tag_backs=True),
        dict(player_count=4, step_count=50, field_width=1, field_height=4),
    ]

    def test_single_it_and_bounds_every_step(self) -> None:
        for config in self.CONFIGS:
            with self.subTest(**config):
                sim = Simulation(Scenario(**config))
                assert_invariants(self, sim.get_initial_frame())
                for frame in sim.run(include_history=True):
                    assert_invariants(self, frame)
                    self.assertLessEqual(len(frame.tags), 1)

    def test_tags_happen_in_a_corridor(self) -> None:
        frames = run_simulation(4, 40, field_width=1, field_height=4)
        self.assertTrue(any(f.tags for f in frames))

    def test_tag_matches_post_move_positions(self) -> None:
        frames = run_simulation(4, 40, field_width=1, field_height=4)
        for frame in frames:
            for tag in frame.tags:
                self.assertEqual(frame.players[tag.tagged].pos, tag.position)
                self.assertEqual(frame.players[tag.tagger].pos, tag.position)
                self.assertTrue(frame.players[tag.tagged].is_it)
                self.assertFalse(frame.players[tag.tagger].is_it)
                sharing = [p.id for p in frame.players if p.pos == tag.position and p.id != tag.tagger]
                self.assertEqual(tag.tagged, min(sharing))

    def test_determinism(self) -> None:
        for config in self.CONFIGS:
            with self.subTest(**config):
                first = [f.to_dict() for f in Simulation(Scenario(**config)).run(include_history=True)]
                second = [f.to_dict() for f in Simulation(Scenario(**config)).run(include_history=True)]
                self.assertEqual(first, second)

    def test_defaults(self) -> None:
        frames = run_simulation()
        self.assertEqual(len(frames), 100)
        self.assertEqual(len(frames[0].players), 5)


if __name__ == "__main__":
    unittest.main()
