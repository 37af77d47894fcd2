"""
Board and coordinate model, plus the direction policy.

Cells are (row, col) pairs with row 0 at the top of the board. The direction
functions are pure: they look at a cell and return the neighbouring cell, or
None when that neighbour would be off the board.
"""

import random
from typing import Callable, Dict, Iterator, NamedTuple, Optional

from .constants import Direction


class Cell(NamedTuple):
    """An immutable (row, col) board position."""

    row: int
    col: int

    def __repr__(self):
        return f"({self.row},{self.col})"


class Board:
    """
    A fixed-size rectangular board of rows x cols cells.

    The board only knows its dimensions; it does not track what is on it.
    """

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Board dimensions must be positive, got {rows}x{cols}.")
        self.rows = rows
        self.cols = cols

    @property
    def center(self) -> Cell:
        """Return the starting cell for a new snake."""
        return Cell(self.rows // 2, self.cols // 2)

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.row < self.rows and 0 <= cell.col < self.cols

    def key(self, cell: Cell) -> int:
        """Pack a cell into a single integer key, row * cols + col."""
        return cell.row * self.cols + cell.col

    def cell_for_key(self, key: int) -> Cell:
        return Cell(*divmod(key, self.cols))

    def random_cell(self, rng: Optional[random.Random] = None) -> Cell:
        """Pick a cell uniformly at random over the whole board."""
        rng = rng or random
        return Cell(rng.randint(0, self.rows - 1), rng.randint(0, self.cols - 1))

    def cells(self) -> Iterator[Cell]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield Cell(row, col)

    def __repr__(self):
        return f"<Board {self.rows}x{self.cols}>"


# -------------------------------
# Direction policy
# -------------------------------

def left(board: Board, cell: Cell) -> Optional[Cell]:
    """Return the cell to the left of the given one, or None at column 0."""
    return Cell(cell.row, cell.col - 1) if cell.col > 0 else None


def right(board: Board, cell: Cell) -> Optional[Cell]:
    """Return the cell to the right of the given one, or None at the last column."""
    return Cell(cell.row, cell.col + 1) if cell.col < board.cols - 1 else None


def up(board: Board, cell: Cell) -> Optional[Cell]:
    """Return the cell above the given one, or None at row 0."""
    return Cell(cell.row - 1, cell.col) if cell.row > 0 else None


def down(board: Board, cell: Cell) -> Optional[Cell]:
    """Return the cell below the given one, or None at the last row."""
    return Cell(cell.row + 1, cell.col) if cell.row < board.rows - 1 else None


DirectionFn = Callable[[Board, Cell], Optional[Cell]]

DIRECTION_FUNCTIONS: Dict[Direction, DirectionFn] = {
    Direction.LEFT: left,
    Direction.RIGHT: right,
    Direction.UP: up,
    Direction.DOWN: down,
}


def next_cell(board: Board, cell: Cell, direction: Direction) -> Optional[Cell]:
    """Apply the direction function for `direction` to `cell`."""
    return DIRECTION_FUNCTIONS[direction](board, cell)


def parse_direction(value) -> Direction:
    """
    Convert a Direction or a direction name ("left", "UP", ...) into a Direction.

    Raises:
        ValueError: if the name is not one of UP, DOWN, LEFT, RIGHT
    """
    if isinstance(value, Direction):
        return value
    try:
        return Direction(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Unknown direction {value!r}. Options: UP, DOWN, LEFT, RIGHT") from None
