"""
Renderer collaborators.

The engine reports board changes through three calls and never waits on
them:
 - on_square_added(cell, kind): a snake or food square appeared
 - on_square_removed(cell): a square disappeared
 - on_food_expiring(cell): food is about to vanish (start a fade)

A square added on a cell replaces whatever the renderer was showing there,
which is how a snake head covers the food it eats.
"""

import logging
from typing import List, Optional, Tuple

from domain.board import Cell
from domain.constants import SquareKind

logger = logging.getLogger(__name__)


class Renderer:
    """Base class/interface for renderers. Every hook is a no-op."""

    def on_square_added(self, cell: Cell, kind: SquareKind) -> None:
        pass

    def on_square_removed(self, cell: Cell) -> None:
        pass

    def on_food_expiring(self, cell: Cell) -> None:
        pass


class LoggingRenderer(Renderer):
    """Writes every board change to the log at debug level."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def on_square_added(self, cell, kind):
        self.log.debug("+ %s %s", kind.value, cell)

    def on_square_removed(self, cell):
        self.log.debug("- %s", cell)

    def on_food_expiring(self, cell):
        self.log.debug("~ FOOD %s expiring", cell)


class EventRecorder(Renderer):
    """
    Keeps every event in order, and tracks what is currently drawn.

    events: list of (event_name, cell, kind_or_None)
    squares: dict of cell -> SquareKind as the renderer would show it
    """

    def __init__(self):
        self.events: List[Tuple[str, Cell, Optional[SquareKind]]] = []
        self.squares = {}

    def on_square_added(self, cell, kind):
        self.events.append(("added", cell, kind))
        self.squares[cell] = kind

    def on_square_removed(self, cell):
        self.events.append(("removed", cell, None))
        self.squares.pop(cell, None)

    def on_food_expiring(self, cell):
        self.events.append(("expiring", cell, SquareKind.FOOD))

    def named(self, name: str) -> List[Tuple[str, Cell, Optional[SquareKind]]]:
        return [event for event in self.events if event[0] == name]


class GuardedRenderer(Renderer):
    """
    Wraps another renderer so that an exception inside a hook is logged
    instead of escaping into the game loop.
    """

    def __init__(self, inner: Renderer):
        self.inner = inner

    def _call(self, name: str, *args) -> None:
        try:
            getattr(self.inner, name)(*args)
        except Exception:
            logger.exception("Renderer %s failed in %s%s", type(self.inner).__name__, name, args)

    def on_square_added(self, cell, kind):
        self._call("on_square_added", cell, kind)

    def on_square_removed(self, cell):
        self._call("on_square_removed", cell)

    def on_food_expiring(self, cell):
        self._call("on_food_expiring", cell)
