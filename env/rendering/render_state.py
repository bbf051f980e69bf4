"""
Helper utilities for converting frames into render-friendly payloads.

The browser client and API expect plain JSON data. The builder in this
module translates a Frame into a serializable dict that can be streamed
over REST/WebSocket.
"""

from __future__ import annotations

from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from game_frame import Frame


class RenderStateBuilder:
    """Build JSON-serializable render state snapshots."""

    @staticmethod
    def build(frame: "Frame") -> Dict[str, Any]:
        """
        Convert a frame into a JSON-friendly dict.

        Args:
            frame: Frame produced by the simulation

        Returns:
            Dictionary ready to send to the browser
        """
        return {
            "step": frame.step,
            "grid": {
                "width": frame.area.width,
                "height": frame.area.height,
            },
            "done": frame.done,
            "it": frame.it_player,
            "players": RenderStateBuilder._serialize_players(frame),
            "moves": RenderStateBuilder._serialize_moves(frame),
            "tags": [t.to_dict() for t in frame.tags],
        }

    @staticmethod
    def _serialize_players(frame: "Frame") -> List[Dict[str, Any]]:
        """Serialize every player with the marker the viewer should draw."""
        tagged = set(frame.tagged_players)
        serialized: List[Dict[str, Any]] = []
        for player in frame.players:
            serialized.append(
                {
                    "id": player.id,
                    "position": list(player.pos),
                    "role": player.role.value,
                    "is_it": player.is_it,
                    "just_tagged": player.id in tagged,
                    "marker": "*" if player.is_it else ".",
                }
            )
        return serialized

    @staticmethod
    def _serialize_moves(frame: "Frame") -> List[Dict[str, Any]]:
        """Serialize move map to a list for easy iteration client-side."""
        moves = frame.moves or {}
        return [
            {"player": player, "move": moves[player].value}
            for player in sorted(moves)
        ]
