"""
Environment tests: clamped moves, tag resolution and the state invariants.

Run with ``python -m unittest test_environment.py`` (or pytest).
"""

import copy
import dataclasses
import unittest

from env import (
    TagEnv,
    Scenario,
    PlayerState,
    Role,
    MoveDir,
    TagEvent,
    UnknownPlayer,
    InvalidConfiguration,
    Field,
)


def make_env(players, width=10, height=10, **kwargs) -> TagEnv:
    env = TagEnv()
    env.reset(scenario=Scenario(
        field_width=width,
        field_height=height,
        step_count=kwargs.pop("step_count", 10),
        players=players,
        **kwargs,
    ))
    return env


class TestField(unittest.TestCase):
    def test_clamp_keeps_cells_in_bounds(self) -> None:
        field = Field(4, 3)
        self.assertEqual(field.clamp((-1, 1)), (0, 1))
        self.assertEqual(field.clamp((4, 3)), (3, 2))
        self.assertEqual(field.clamp((2, 1)), (2, 1))

    def test_non_positive_dimensions_rejected(self) -> None:
        with self.assertRaises(InvalidConfiguration):
            Field(0, 5)
        with self.assertRaises(InvalidConfiguration):
            Field(5, -1)

    def test_distance_is_squared_euclidean(self) -> None:
        self.assertEqual(Field.distance((0, 0), (3, 4)), 25)
        self.assertEqual(Field.distance((2, 2), (2, 2)), 0)


class TestQueries(unittest.TestCase):
    def setUp(self) -> None:
        self.env = make_env([
            PlayerState(0, (0, 0), Role.IT),
            PlayerState(1, (3, 4)),
        ])

    def test_position_and_role(self) -> None:
        self.assertEqual(self.env.position_of(1), (3, 4))
        self.assertIs(self.env.role_of(0), Role.IT)
        self.assertIs(self.env.role_of(1), Role.RUNNER)
        self.assertEqual(self.env.field_bounds, (10, 10))

    def test_unknown_player(self) -> None:
        for bad in (-1, 2, 99, True, "0"):
            with self.assertRaises(UnknownPlayer):
                self.env.position_of(bad)
            with self.assertRaises(UnknownPlayer):
                self.env.role_of(bad)

    def test_requires_reset(self) -> None:
        with self.assertRaises(RuntimeError):
            TagEnv().position_of(0)

    def test_snapshot_is_read_only(self) -> None:
        snapshot = self.env.snapshot()
        self.assertEqual([p.id for p in snapshot], [0, 1])
        self.assertEqual(snapshot[1].pos, (3, 4))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            snapshot[1].pos = (9, 9)  # type: ignore[misc]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            snapshot[0].role = Role.RUNNER  # type: ignore[misc]
        self.assertEqual(self.env.position_of(1), (3, 4))
        self.assertIs(self.env.role_of(0), Role.IT)

    def test_snapshot_does_not_follow_later_moves(self) -> None:
        snapshot = self.env.snapshot()
        self.env.apply_move(1, MoveDir.UP)
        self.assertEqual(snapshot[1].pos, (3, 4))

    def test_view_is_read_only(self) -> None:
        view = self.env.view()
        self.assertEqual(view.position_of(1), (3, 4))
        self.assertIs(view.role_of(0), Role.IT)
        self.assertEqual(view.field_bounds, (10, 10))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            view.turn = 5  # type: ignore[misc]
        with self.assertRaises(dataclasses.FrozenInstanceError):
            view.players[0].pos = (5, 5)  # type: ignore[misc]
        with self.assertRaises(UnknownPlayer):
            view.position_of(2)

    def test_view_does_not_follow_later_moves(self) -> None:
        view = self.env.view()
        self.env.apply_move(1, MoveDir.RIGHT)
        self.assertEqual(view.position_of(1), (3, 4))
        self.assertEqual(self.env.position_of(1), (4, 4))


class TestApplyMove(unittest.TestCase):
    def setUp(self) -> None:
        self.env = make_env([
            PlayerState(0, (5, 5), Role.IT),
            PlayerState(1, (0, 0)),
            PlayerState(2, (9, 9)),
        ])

    def test_each_direction(self) -> None:
        expected = {
            MoveDir.UP: (5, 4),
            MoveDir.DOWN: (5, 6),
            MoveDir.LEFT: (4, 5),
            MoveDir.RIGHT: (6, 5),
            MoveDir.STAY: (5, 5),
        }
        for move, target in expected.items():
            env = make_env([PlayerState(0, (5, 5), Role.IT)])
            result = env.apply_move(0, move)
            self.assertEqual(env.position_of(0), target, move)
            self.assertFalse(result.clamped)

    def test_left_at_left_edge_is_clamped(self) -> None:
        result = self.env.apply_move(1, MoveDir.LEFT)
        self.assertEqual(self.env.position_of(1), (0, 0))
        self.assertTrue(result.clamped)
        self.assertFalse(result.moved)

    def test_up_at_top_edge_is_clamped(self) -> None:
        self.env.apply_move(1, MoveDir.UP)
        self.assertEqual(self.env.position_of(1), (0, 0))

    def test_far_edges_are_clamped(self) -> None:
        self.env.apply_move(2, MoveDir.RIGHT)
        self.env.apply_move(2, MoveDir.DOWN)
        self.assertEqual(self.env.position_of(2), (9, 9))

    def test_move_never_changes_roles(self) -> None:
        self.env.apply_move(1, MoveDir.RIGHT)
        self.assertIs(self.env.role_of(0), Role.IT)
        self.assertIs(self.env.role_of(1), Role.RUNNER)

    def test_invalid_move_is_fatal(self) -> None:
        with self.assertRaises(TypeError):
            self.env.apply_move(0, "up")  # type: ignore[arg-type]

    def test_unknown_player(self) -> None:
        with self.assertRaises(UnknownPlayer):
            self.env.apply_move(3, MoveDir.UP)


class TestResolveTags(unittest.TestCase):
    def test_no_tag_when_apart(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (1, 0))])
        self.assertEqual(env.resolve_tags(), [])
        self.assertIs(env.role_of(0), Role.IT)

    def test_runner_on_it_cell_becomes_it(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (1, 0))])
        env.apply_move(1, MoveDir.LEFT)
        events = env.resolve_tags()
        self.assertEqual(events, [TagEvent(tagger=0, tagged=1, position=(0, 0))])
        self.assertIs(env.role_of(1), Role.IT)
        self.assertIs(env.role_of(0), Role.RUNNER)
        self.assertEqual(env.world.get_player(1).tagged_by, 0)

    def test_lowest_index_wins_when_several_runners_coincide(self) -> None:
        env = make_env([
            PlayerState(0, (2, 2), Role.IT),
            PlayerState(1, (3, 3)),
            PlayerState(2, (2, 1)),
            PlayerState(3, (1, 2)),
        ])
        env.apply_move(2, MoveDir.DOWN)
        env.apply_move(3, MoveDir.RIGHT)
        events = env.resolve_tags()

        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].tagged, 2)
        roles = [env.role_of(p) for p in range(4)]
        self.assertEqual(roles, [Role.RUNNER, Role.RUNNER, Role.IT, Role.RUNNER])

    def test_swapping_cells_is_not_a_tag(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (1, 0))])
        _, _, info = env.step({0: MoveDir.RIGHT, 1: MoveDir.LEFT})
        self.assertEqual(info.tags, [])
        self.assertIs(env.role_of(0), Role.IT)


class TestStep(unittest.TestCase):
    def test_step_applies_moves_then_tags_once(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (2, 0))], step_count=2)
        _, done, info = env.step({0: MoveDir.RIGHT, 1: MoveDir.LEFT})
        self.assertEqual(env.turn, 1)
        self.assertFalse(done)
        self.assertEqual([r.to_pos for r in info.movement.results], [(1, 0), (1, 0)])
        self.assertEqual(info.tags, [TagEvent(0, 1, (1, 0))])

        _, done, _ = env.step({0: MoveDir.STAY, 1: MoveDir.STAY})
        self.assertTrue(done)

    def test_step_requires_every_player(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (2, 0))])
        with self.assertRaises(ValueError):
            env.step({0: MoveDir.UP})

    def test_step_info_round_trip(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (1, 0))])
        _, _, info = env.step({0: MoveDir.RIGHT, 1: MoveDir.STAY})
        restored = type(info).from_dict(info.to_dict())
        self.assertEqual(restored.tags, info.tags)
        self.assertEqual(restored.movement.results[0].to_pos, (1, 0))


class TestReset(unittest.TestCase):
    def test_resume_from_world(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (4, 4))])
        env.step({0: MoveDir.RIGHT, 1: MoveDir.DOWN})
        saved = env.world.to_dict()

        other = TagEnv()
        other.reset(scenario=env.scenario, world=saved)
        self.assertEqual(other.position_of(0), (1, 0))
        self.assertEqual(other.turn, 1)

    def test_resume_rejects_mismatched_field(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (4, 4))])
        other_scenario = Scenario(
            field_width=6, field_height=6,
            players=[PlayerState(0, (0, 0), Role.IT), PlayerState(1, (4, 4))],
        )
        with self.assertRaises(InvalidConfiguration):
            TagEnv().reset(scenario=other_scenario, world=env.world)

    def test_resume_rejects_broken_worlds(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (4, 4))], step_count=5)
        saved = env.world.to_dict()
        broken = {
            "two its": lambda w: w["players"][1].update(role="it"),
            "no it": lambda w: w["players"][0].update(role="runner"),
            "out of bounds": lambda w: w["players"][1].update(pos=[10, 0]),
            "unknown role": lambda w: w["players"][1].update(role="seeker"),
            "missing field": lambda w: w.pop("field"),
            "finished turn": lambda w: w.update(turn=5),
            "negative turn": lambda w: w.update(turn=-1),
        }
        for label, breaker in broken.items():
            with self.subTest(label):
                world = copy.deepcopy(saved)
                breaker(world)
                with self.assertRaises(InvalidConfiguration):
                    TagEnv().reset(scenario=env.scenario, world=world)

    def test_resume_rejects_world_object_with_two_its(self) -> None:
        env = make_env([PlayerState(0, (0, 0), Role.IT), PlayerState(1, (4, 4))])
        world = env.world.clone()
        world.players[1].role = Role.IT
        with self.assertRaises(InvalidConfiguration):
            TagEnv().reset(scenario=env.scenario, world=world)

    def test_reset_does_not_share_players_with_scenario(self) -> None:
        players = [PlayerState(0, (0, 0), Role.IT), PlayerState(1, (4, 4))]
        scenario = Scenario(field_width=10, field_height=10, players=players)
        env = TagEnv()
        env.reset(scenario=scenario)
        env.apply_move(1, MoveDir.UP)
        self.assertEqual(players[1].pos, (4, 4))


if __name__ == "__main__":
    unittest.main()
