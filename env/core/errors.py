"""
Error taxonomy for the tag environment.

Moving off the field is NOT an error (moves are clamped to the edge), so
the only recoverable failures are bad player lookups and bad configuration.
"""

from __future__ import annotations


class UnknownPlayer(LookupError):
    """Raised when a player index is outside ``0..player_count``."""

    def __init__(self, player: object, player_count: int):
        self.player = player
        self.player_count = player_count
        super().__init__(
            f"Unknown player {player!r}: expected an index in 0..{player_count - 1}"
        )


class InvalidConfiguration(ValueError):
    """Raised when a scenario (or CLI input) cannot produce a valid game."""
