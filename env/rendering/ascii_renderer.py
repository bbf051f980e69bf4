"""
Plain-text viewer.

Draws each frame on a fixed-size character canvas scaled from the field:
``*`` for IT, ``.`` for runners and ``*-You're It!`` where a tag just
happened. When several players land in the same canvas cell the most
important marker wins.
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import List, Optional, TextIO, TYPE_CHECKING

from ..core.types import GridPos
from ..world.field import Field

if TYPE_CHECKING:
    from game_frame import Frame

FRAME_RULE = "=================================="

# Upper bound on the default canvas; larger fields are scaled down.
MAX_CANVAS_WIDTH = 80
MAX_CANVAS_HEIGHT = 40


class DrawCell(IntEnum):
    """What should be drawn in a cell. Higher values overwrite lower ones."""

    NONE = 0
    RUNNER = 1
    IT = 2
    YOURE_IT = 3

    @property
    def text(self) -> str:
        return _CELL_TEXT[self]


_CELL_TEXT = {
    DrawCell.NONE: " ",
    DrawCell.RUNNER: ".",
    DrawCell.IT: "*",
    DrawCell.YOURE_IT: "*-You're It!",
}


class TagCanvas:
    """ASCII canvas for one frame of a tag game."""

    def __init__(self, area: Field, width: Optional[int] = None, height: Optional[int] = None):
        self.area = area
        self.width = width or min(area.width, MAX_CANVAS_WIDTH)
        self.height = height or min(area.height, MAX_CANVAS_HEIGHT)
        self.grid: List[List[DrawCell]] = [
            [DrawCell.NONE] * self.width for _ in range(self.height)
        ]

    def set(self, position: GridPos, cell: DrawCell) -> None:
        """Set a cell, only overwriting less important markers."""
        x = self._scale(position[0], self.area.width, self.width)
        y = self._scale(position[1], self.area.height, self.height)
        if cell > self.grid[y][x]:
            self.grid[y][x] = cell

    @staticmethod
    def _scale(value: int, source: int, target: int) -> int:
        if source <= 1:
            return 0
        return min(target - 1, value * (target - 1) // (source - 1))

    def __str__(self) -> str:
        lines = [FRAME_RULE]
        for row in self.grid:
            line = ""
            x = 0
            while x < len(row):
                text = row[x].text
                line += text
                # long labels cover the cells to their right
                x += len(text)
            lines.append(line.rstrip())
        return "\n".join(lines)


class AsciiRenderer:
    """
    Viewer that turns frames into text and writes them to a stream.

    Args:
        width: Canvas columns (default: field width, at most MAX_CANVAS_WIDTH)
        height: Canvas rows (default: field height, at most MAX_CANVAS_HEIGHT)
        stream: Where capture() writes (default: stdout)
        show_header: Prefix each frame with a step/it/tag summary line
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        stream: Optional[TextIO] = None,
        show_header: bool = True,
    ):
        self.width = width
        self.height = height
        self.stream = stream
        self.show_header = show_header
        self.frames_rendered = 0

    def render(self, frame: "Frame") -> str:
        """Return the text for one frame."""
        canvas = TagCanvas(frame.area, self.width, self.height)
        tagged = set(frame.tagged_players)
        for player in frame.players:
            if player.id in tagged:
                cell = DrawCell.YOURE_IT
            elif player.is_it:
                cell = DrawCell.IT
            else:
                cell = DrawCell.RUNNER
            canvas.set(player.pos, cell)

        text = str(canvas)
        if self.show_header:
            header = f"step {frame.step}: it={frame.it_player}"
            if frame.tags:
                header += " " + ", ".join(str(t) for t in frame.tags)
            text = header + "\n" + text
        return text

    def capture(self, frame: "Frame") -> None:
        stream = self.stream or sys.stdout
        stream.write(self.render(frame) + "\n")
        stream.flush()
        self.frames_rendered += 1
