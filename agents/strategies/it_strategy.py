from __future__ import annotations

from env.core.types import MoveDir
from env.world.field import Field
from env.world.view import EnvironmentView
from .base import Strategy


class ItStrategy(Strategy):
    """
    Chase the nearest runner.

    Picks the move whose landing cell is closest (squared Euclidean) to the
    nearest runner. Ties go to the earliest move in preference order. With
    the no-tag-backs rule on, the player who just tagged us is ignored
    unless it is the only runner left.
    """

    def decide(self, view: EnvironmentView, player: int) -> MoveDir:
        me = view.get_player(player)
        targets = view.runners(exclude=player)
        if view.no_tag_backs and me.tagged_by is not None:
            others = [r for r in targets if r.id != me.tagged_by]
            if others:
                targets = others
        if not targets:
            return MoveDir.STAY

        def nearest(pos):
            return min(Field.distance(pos, runner.pos) for runner in targets)

        move, _ = min(self.candidates(view, me.pos), key=lambda c: nearest(c[1]))
        return move
