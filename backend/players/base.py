"""
Base player interface for the game engine.
"""

from typing import Optional

from domain.game_state import BoardSnapshot
from .commands import Command


class Player:
    """
    Base class/interface for input sources.

    Before every move tick the game asks its player for a command given the
    current board. Returning None keeps the current direction.
    """

    name = "player"

    def get_move(self, snapshot: BoardSnapshot) -> Optional[Command]:
        """
        Return a command given the current board snapshot.

        Args:
            snapshot: Current state of the board

        Returns:
            A DirectionCommand, PauseCommand, ResumeCommand, or None
        """
        raise NotImplementedError
