"""
Player implementations for the snake engine.

A player is an input source: it is asked for a command before every move
tick and may change direction, pause, or do nothing.
"""

from .base import Player
from .commands import Command, DirectionCommand, PauseCommand, ResumeCommand
from .random_player import RandomPlayer
from .scripted_player import ScriptedPlayer, parse_command

AVAILABLE_PLAYERS = {player.name: player for player in (RandomPlayer, ScriptedPlayer)}

__all__ = [
    'Player',
    'Command',
    'DirectionCommand',
    'PauseCommand',
    'ResumeCommand',
    'RandomPlayer',
    'ScriptedPlayer',
    'parse_command',
    'AVAILABLE_PLAYERS',
]
