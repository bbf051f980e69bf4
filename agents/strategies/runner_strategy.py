from __future__ import annotations

from env.core.types import MoveDir
from env.world.field import Field
from env.world.view import EnvironmentView
from .base import Strategy


class RunnerStrategy(Strategy):
    """
    Run away from the IT player.

    Picks the move whose landing cell is farthest (squared Euclidean) from
    the IT player. A runner that cannot strictly improve on its current
    distance (e.g. cornered) stays put.
    """

    def decide(self, view: EnvironmentView, player: int) -> MoveDir:
        me = view.get_player(player)
        it = view.it_player
        if it.id == player:
            return MoveDir.STAY

        current = Field.distance(me.pos, it.pos)
        move, landing = max(
            self.candidates(view, me.pos),
            key=lambda c: Field.distance(c[1], it.pos),
        )
        if Field.distance(landing, it.pos) <= current:
            return MoveDir.STAY
        return move
