"""
Tests for domain/game_state.py and the renderer helpers.
"""

import logging
import sys
import os
from unittest.mock import Mock

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.board import Cell
from domain.constants import Direction, SquareKind
from domain.game_state import BoardSnapshot, GameState
from services.renderer import EventRecorder, GuardedRenderer, LoggingRenderer


class TestGameState:
    """Tests for the GameState class."""

    def test_initial_state(self):
        """A new game is live, unpaused and heading left."""
        state = GameState()
        assert state.direction == Direction.LEFT
        assert state.is_over is False
        assert state.paused is False
        assert state.end_reason is None

    def test_mark_over_is_one_way(self):
        """The first reason sticks; later calls report False."""
        state = GameState()
        assert state.mark_over("wall") is True
        assert state.mark_over("self") is False
        assert state.is_over is True
        assert state.end_reason == "wall"

    def test_repr(self):
        """GameState has a useful string representation."""
        assert "direction=LEFT" in repr(GameState())


class TestBoardSnapshot:
    """Tests for the BoardSnapshot class."""

    def test_print_board_returns_string(self):
        """print_board() shows head, body and food."""
        snapshot = BoardSnapshot(
            rows=3, cols=4,
            snake=[Cell(1, 1), Cell(1, 2)],
            food=[Cell(0, 3)],
            direction=Direction.LEFT,
            is_over=False,
        )
        assert snapshot.print_board() == "\n".join([
            " 0 . . . F",
            " 1 . H S .",
            " 2 . . . .",
            "   0 1 2 3",
        ])

    def test_to_dict(self):
        """to_dict() uses plain lists and strings."""
        snapshot = BoardSnapshot(
            rows=3, cols=4, snake=[Cell(1, 1)], food=[], direction=Direction.UP,
            is_over=True, end_reason="wall", turns=4,
        )
        assert snapshot.to_dict() == {
            "rows": 3, "cols": 4, "snake": [[1, 1]], "food": [],
            "direction": "UP", "is_over": True, "end_reason": "wall",
            "turns": 4, "length": 1,
        }


class TestRenderers:
    """Tests for the renderer helpers."""

    def test_event_recorder_tracks_squares(self):
        """Adding over a cell replaces it; removing clears it."""
        recorder = EventRecorder()
        recorder.on_square_added(Cell(1, 1), SquareKind.FOOD)
        recorder.on_square_added(Cell(1, 1), SquareKind.SNAKE)
        assert recorder.squares == {Cell(1, 1): SquareKind.SNAKE}

        recorder.on_square_removed(Cell(1, 1))
        assert recorder.squares == {}
        assert len(recorder.named("added")) == 2

    def test_logging_renderer(self, caplog):
        """LoggingRenderer writes every event at debug level."""
        renderer = LoggingRenderer()
        with caplog.at_level(logging.DEBUG, logger="services.renderer"):
            renderer.on_square_added(Cell(2, 2), SquareKind.SNAKE)
            renderer.on_food_expiring(Cell(3, 3))
        assert "SNAKE" in caplog.text
        assert "expiring" in caplog.text

    def test_guarded_renderer_swallows_and_logs(self, caplog):
        """Exceptions inside a wrapped renderer are logged, not raised."""
        inner = Mock()
        inner.on_square_removed.side_effect = RuntimeError("boom")
        guarded = GuardedRenderer(inner)

        with caplog.at_level(logging.ERROR, logger="services.renderer"):
            guarded.on_square_removed(Cell(0, 0))
        assert "on_square_removed" in caplog.text
        guarded.on_food_expiring(Cell(0, 0))
        inner.on_food_expiring.assert_called_once_with(Cell(0, 0))
