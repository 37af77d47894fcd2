"""
Game constants for the snake engine.
"""

from enum import Enum


class Direction(Enum):
    """Movement directions a snake can travel in."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class SquareKind(Enum):
    """What occupies a square on the board."""

    SNAKE = "SNAKE"
    FOOD = "FOOD"


# Board settings
DEFAULT_ROWS = 15
DEFAULT_COLS = 11

# Timing settings (milliseconds)
DEFAULT_TURN_INTERVAL_MS = 1000
DEFAULT_SPEEDUP_PER_SEGMENT_MS = 40
DEFAULT_MIN_INTERVAL_MS = 50
DEFAULT_FOOD_LIFETIME_MS = (5000, 10000)
DEFAULT_STARTUP_DELAY_MS = (1000, 4000)

# Food settings
DEFAULT_MAX_FOOD = 5

# The snake starts out moving left
DEFAULT_DIRECTION = Direction.LEFT
