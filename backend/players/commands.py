"""
Commands an input source can send to a running game.
"""

from dataclasses import dataclass
from typing import Union

from domain.constants import Direction


@dataclass(frozen=True)
class DirectionCommand:
    """Change the pending direction; applied on the next move tick."""

    direction: Direction


@dataclass(frozen=True)
class PauseCommand:
    """Suspend the game until a ResumeCommand arrives."""


@dataclass(frozen=True)
class ResumeCommand:
    """Acknowledge a pause and let the game continue."""


Command = Union[DirectionCommand, PauseCommand, ResumeCommand]
