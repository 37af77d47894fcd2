"""
Scripted player - replays a fixed sequence of commands, one per move tick.
"""

from collections import deque
from typing import Iterable, Optional, Union

from domain.board import parse_direction
from domain.constants import Direction
from domain.game_state import BoardSnapshot
from .base import Player
from .commands import Command, DirectionCommand, PauseCommand, ResumeCommand


def parse_command(value) -> Optional[Command]:
    """
    Accept a Command, None, or a word: a direction name, "pause", "resume",
    or "-" / "" to keep going straight.
    """
    if value is None or isinstance(value, (DirectionCommand, PauseCommand, ResumeCommand)):
        return value
    if isinstance(value, Direction):
        return DirectionCommand(value)
    word = str(value).strip().lower()
    if word in ("", "-"):
        return None
    if word == "pause":
        return PauseCommand()
    if word == "resume":
        return ResumeCommand()
    return DirectionCommand(parse_direction(word))


class ScriptedPlayer(Player):
    """
    Sends the given commands in order; once they run out, keeps the current
    direction. An empty script gives a snake that only goes straight.
    """

    name = "scripted"

    def __init__(self, commands: Iterable[Union[Command, str, None]] = ()):
        self.commands = deque(parse_command(c) for c in commands)

    def get_move(self, snapshot: BoardSnapshot) -> Optional[Command]:
        if not self.commands:
            return None
        return self.commands.popleft()
