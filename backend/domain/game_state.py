"""
GameState entity and a read-only snapshot of the board.
"""

from typing import Any, Dict, List, Optional

from .board import Cell
from .constants import DEFAULT_DIRECTION, Direction


class GameState:
    """
    The mutable control state of one game.

    Attributes:
        direction: direction applied on the next move tick
        is_over: terminal flag, flips from False to True exactly once
        end_reason: 'wall', 'self', or 'ended' once the game is over
        started: whether start() has run
        paused: whether the scheduler is suspended
        turns: number of move ticks that have completed
    """

    def __init__(self, direction: Direction = DEFAULT_DIRECTION):
        self.direction = direction
        self.is_over = False
        self.end_reason: Optional[str] = None
        self.started = False
        self.paused = False
        self.turns = 0

    def mark_over(self, reason: str) -> bool:
        """Flip to the terminal state. Returns False if already over."""
        if self.is_over:
            return False
        self.is_over = True
        self.end_reason = reason
        self.paused = False
        return True

    def __repr__(self):
        return (
            f"<GameState turns={self.turns}, direction={self.direction.value}, "
            f"over={self.is_over}, paused={self.paused}>"
        )


class BoardSnapshot:
    """
    A snapshot of the board at a specific point in time.

    Attributes:
        rows, cols: board dimensions
        snake: list of cells, head first
        food: list of food cells
        direction: the pending direction
        is_over: whether the game has ended
        end_reason: why it ended, if it has
        turns: completed move ticks
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        snake: List[Cell],
        food: List[Cell],
        direction: Direction,
        is_over: bool,
        end_reason: Optional[str] = None,
        turns: int = 0,
    ):
        self.rows = rows
        self.cols = cols
        self.snake = snake
        self.food = food
        self.direction = direction
        self.is_over = is_over
        self.end_reason = end_reason
        self.turns = turns

    @property
    def length(self) -> int:
        return len(self.snake)

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        S = snake body
        H = snake head
        Row 0 is printed first, column labels along the bottom.
        """
        board = [['.' for _ in range(self.cols)] for _ in range(self.rows)]

        for row, col in self.food:
            board[row][col] = 'F'

        for idx, (row, col) in enumerate(self.snake):
            board[row][col] = 'H' if idx == 0 else 'S'

        result = [f"{row:2d} {' '.join(board[row])}" for row in range(self.rows)]
        # Column labels wrap at 10 to keep the grid aligned
        result.append("   " + " ".join(str(col % 10) for col in range(self.cols)))
        return "\n".join(result)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "snake": [list(cell) for cell in self.snake],
            "food": [list(cell) for cell in self.food],
            "direction": self.direction.value,
            "is_over": self.is_over,
            "end_reason": self.end_reason,
            "turns": self.turns,
            "length": self.length,
        }

    def __repr__(self):
        return (
            f"<BoardSnapshot turns={self.turns}, length={self.length}, "
            f"food={self.food}, over={self.is_over}>"
        )
