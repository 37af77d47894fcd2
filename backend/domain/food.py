"""
FoodRegistry - the transient food items on the board.

Food is placed best-effort: a spawn onto an occupied cell, or beyond the
maximum number of concurrent items, quietly does nothing. Every item that is
placed gets its own expiry timer, and expiry is keyed by item id so that an
item eaten earlier (or replaced by a newer one on the same cell) is left alone.
"""

import itertools
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .board import Board, Cell
from .constants import DEFAULT_FOOD_LIFETIME_MS, DEFAULT_MAX_FOOD, SquareKind
from .snake import OccupiedSquare

logger = logging.getLogger(__name__)


@dataclass
class FoodItem:
    item_id: int
    square: OccupiedSquare
    spawned_at: float
    expires_at: float
    timer: object = None

    @property
    def cell(self) -> Cell:
        return self.square.cell


class FoodRegistry:
    """
    Maps cells to food items, never holding more than `max_food` of them.

    Attributes:
        board: the board food is placed on
        timers: a TimerQueue used to schedule each item's expiry
        renderer: notified when food appears, starts expiring, and disappears
        occupancy: anything supporting `cell in occupancy` (normally the Snake)
    """

    def __init__(
        self,
        board: Board,
        timers,
        renderer=None,
        max_food: int = DEFAULT_MAX_FOOD,
        lifetime_ms: Tuple[int, int] = DEFAULT_FOOD_LIFETIME_MS,
        rng: Optional[random.Random] = None,
        occupancy=None,
    ):
        self.board = board
        self.timers = timers
        self.renderer = renderer
        self.max_food = max_food
        self.lifetime_ms = lifetime_ms
        self.rng = rng or random.Random()
        self.occupancy = occupancy if occupancy is not None else ()
        self.items: Dict[Cell, FoodItem] = {}
        self._ids = itertools.count(1)

    def try_spawn(self, requested_cell: Optional[Cell] = None, lifetime_ms: Optional[int] = None) -> Optional[OccupiedSquare]:
        """
        Place food on `requested_cell`, or on a random board cell if None.

        Returns:
            The new food square, or None if the cell is off the board, covered
            by the snake, already holds food, or the registry is full.
        """
        if requested_cell is None:
            cell = self.board.random_cell(self.rng)
        else:
            cell = Cell(*requested_cell)

        if not self.board.in_bounds(cell):
            logger.debug("Food spawn at %s rejected: off the board", cell)
            return None
        if cell in self.occupancy or cell in self.items:
            logger.debug("Food spawn at %s rejected: cell occupied", cell)
            return None
        if len(self.items) >= self.max_food:
            logger.debug("Food spawn at %s rejected: %s items already on the board", cell, len(self.items))
            return None

        if lifetime_ms is None:
            lifetime_ms = self.rng.randint(*self.lifetime_ms)

        now = self.timers.now()
        square = OccupiedSquare(cell, SquareKind.FOOD)
        item = FoodItem(
            item_id=next(self._ids),
            square=square,
            spawned_at=now,
            expires_at=now + lifetime_ms,
        )
        item.timer = self.timers.call_later(lifetime_ms, self._expire, cell, item.item_id)
        self.items[cell] = item

        logger.debug("Spawned food #%s at %s (lifetime %sms)", item.item_id, cell, lifetime_ms)
        if self.renderer is not None:
            self.renderer.on_square_added(cell, SquareKind.FOOD)
        return square

    def consume(self, cell: Cell) -> bool:
        """Remove the food at `cell`; return whether there was any."""
        item = self.items.pop(Cell(*cell), None)
        if item is None:
            return False
        logger.debug("Food #%s at %s consumed", item.item_id, item.cell)
        return True

    def _expire(self, cell: Cell, item_id: int) -> None:
        item = self.items.get(cell)
        if item is None or item.item_id != item_id:
            # Already eaten, or a newer item now sits on this cell
            return

        del self.items[cell]
        logger.debug("Food #%s at %s expired", item_id, cell)
        if self.renderer is not None:
            self.renderer.on_food_expiring(cell)
            self.renderer.on_square_removed(cell)

    def get(self, cell: Cell) -> Optional[OccupiedSquare]:
        item = self.items.get(Cell(*cell))
        return item.square if item is not None else None

    def cells(self) -> List[Cell]:
        return list(self.items)

    def clear(self) -> None:
        """Drop every item and cancel its expiry timer."""
        for item in self.items.values():
            if item.timer is not None:
                self.timers.cancel(item.timer)
        self.items.clear()

    def __len__(self):
        return len(self.items)

    def __contains__(self, cell) -> bool:
        return Cell(*cell) in self.items

    def __repr__(self):
        return f"<FoodRegistry {len(self.items)}/{self.max_food} cells={self.cells()}>"
