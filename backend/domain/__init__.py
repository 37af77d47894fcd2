"""
Domain entities for the snake engine.

This module contains the core game entities that are independent of
timing and presentation concerns (timers, renderers, input devices).
"""

from .constants import Direction, SquareKind
from .board import Board, Cell, DIRECTION_FUNCTIONS, left, right, up, down, next_cell, parse_direction
from .snake import Snake, OccupiedSquare, Collision, GrewOntoFood, MovedOntoEmpty
from .food import FoodRegistry, FoodItem
from .game_state import GameState, BoardSnapshot

__all__ = [
    'Direction', 'SquareKind',
    'Board', 'Cell', 'DIRECTION_FUNCTIONS', 'left', 'right', 'up', 'down',
    'next_cell', 'parse_direction',
    'Snake', 'OccupiedSquare', 'Collision', 'GrewOntoFood', 'MovedOntoEmpty',
    'FoodRegistry', 'FoodItem',
    'GameState', 'BoardSnapshot',
]
