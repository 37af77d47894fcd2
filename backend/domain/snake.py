"""
Snake entity for the game engine.
"""

from collections import deque
from typing import Deque, Dict, Iterable, List, NamedTuple, Optional, Union

from .board import Cell
from .constants import SquareKind


class OccupiedSquare(NamedTuple):
    """A board cell covered by either the snake or a piece of food."""

    cell: Cell
    kind: SquareKind


class Collision(NamedTuple):
    """The snake tried to move onto a cell it already covers."""

    cell: Cell


class GrewOntoFood(NamedTuple):
    """The snake's new head landed on food; the tail stays this turn."""

    food_square: OccupiedSquare
    new_square: OccupiedSquare


class MovedOntoEmpty(NamedTuple):
    """The snake's new head landed on an empty cell; the caller drops the tail."""

    new_square: OccupiedSquare


ExtendResult = Union[Collision, GrewOntoFood, MovedOntoEmpty]


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        squares: deque of OccupiedSquare from head at index 0 to tail at the end
        occupied: dict of cell -> OccupiedSquare for O(1) membership checks
        food: optional lookup (anything with .get(cell)) consulted by extend()

    The deque and the dict always hold exactly the same cells.
    """

    def __init__(self, positions: Iterable[Cell], food=None):
        self.squares: Deque[OccupiedSquare] = deque()
        self.occupied: Dict[Cell, OccupiedSquare] = {}
        self.food = food

        # Positions are given head first, so append rather than extend()
        for position in positions:
            cell = Cell(*position)
            if cell in self.occupied:
                raise ValueError(f"Snake cannot cover {cell} twice.")
            square = OccupiedSquare(cell, SquareKind.SNAKE)
            self.squares.append(square)
            self.occupied[cell] = square

        if not self.squares:
            raise ValueError("Snake needs at least one position.")

    @property
    def head(self) -> Cell:
        """Return the head position (first element)."""
        return self.squares[0].cell

    @property
    def tail(self) -> Cell:
        return self.squares[-1].cell

    def extend(self, cell: Cell) -> ExtendResult:
        """
        Add a square at the head of the snake.

        Self-occupancy is checked before food, so a cell the snake already
        covers is always a Collision.

        Returns:
            Collision if the snake already covers `cell`, otherwise
            GrewOntoFood if food is pending there, otherwise MovedOntoEmpty.
        """
        cell = Cell(*cell)
        if cell in self.occupied:
            return Collision(cell)

        square = OccupiedSquare(cell, SquareKind.SNAKE)
        self.squares.appendleft(square)
        self.occupied[cell] = square

        food_square = self.food.get(cell) if self.food is not None else None
        if food_square is not None:
            return GrewOntoFood(food_square, square)
        return MovedOntoEmpty(square)

    def shrink(self) -> OccupiedSquare:
        """Remove and return the tail square."""
        if len(self.squares) <= 1:
            raise ValueError("Cannot shrink a snake of length 1.")
        tail = self.squares.pop()
        del self.occupied[tail.cell]
        return tail

    def length(self) -> int:
        return len(self.squares)

    def cells(self) -> List[Cell]:
        """Return the covered cells, head first."""
        return [square.cell for square in self.squares]

    def __len__(self):
        return len(self.squares)

    def __contains__(self, cell) -> bool:
        return Cell(*cell) in self.occupied

    def __repr__(self):
        return f"<Snake length={len(self)} head={self.head}>"
