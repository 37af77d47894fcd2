"""
Tests for domain/food.py - food placement, the cap, consumption and expiry.
"""

import random
import sys
import os

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.board import Board, Cell
from domain.constants import SquareKind
from domain.food import FoodRegistry
from domain.snake import Snake
from services.renderer import EventRecorder
from services.timers import ManualTimers


@pytest.fixture
def timers():
    return ManualTimers()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def registry(timers, recorder):
    board = Board(15, 11)
    registry = FoodRegistry(board, timers, renderer=recorder, rng=random.Random(42))
    registry.occupancy = Snake([board.center], food=registry)
    return registry


class TestTrySpawn:
    """Tests for FoodRegistry.try_spawn()."""

    def test_spawn_on_requested_cell(self, registry, recorder):
        """A free requested cell gets food and the renderer hears about it."""
        square = registry.try_spawn(Cell(7, 7))

        assert square.cell == Cell(7, 7)
        assert square.kind == SquareKind.FOOD
        assert Cell(7, 7) in registry
        assert len(registry) == 1
        assert recorder.events == [("added", Cell(7, 7), SquareKind.FOOD)]

    def test_spawn_on_row_and_col_zero(self, registry):
        """(0, 0) is a real request, not a missing one."""
        square = registry.try_spawn(Cell(0, 0))
        assert square.cell == Cell(0, 0)

    def test_rejects_snake_cell(self, registry):
        """Food never lands on the snake."""
        assert registry.try_spawn(Cell(7, 5)) is None
        assert len(registry) == 0

    def test_rejects_existing_food(self, registry):
        """A cell holds at most one piece of food."""
        assert registry.try_spawn(Cell(1, 1)) is not None
        assert registry.try_spawn(Cell(1, 1)) is None
        assert len(registry) == 1

    def test_rejects_off_board_cell(self, registry):
        """Requests outside the board are ignored."""
        assert registry.try_spawn(Cell(15, 0)) is None
        assert registry.try_spawn(Cell(0, -1)) is None

    def test_cap_is_never_exceeded(self, registry):
        """With max_food entries on the board, further spawns fail."""
        for col in range(5):
            assert registry.try_spawn(Cell(0, col)) is not None
        assert registry.try_spawn(Cell(1, 0)) is None
        assert len(registry) == registry.max_food == 5

    def test_random_spawns_avoid_snake_and_food(self, timers):
        """Random placement never returns an occupied cell, and respects the cap."""
        board = Board(4, 3)
        registry = FoodRegistry(board, timers, max_food=3, rng=random.Random(1))
        snake = Snake([(0, 0), (0, 1), (0, 2), (1, 2), (1, 1), (1, 0)], food=registry)
        registry.occupancy = snake

        placed = []
        for _ in range(300):
            square = registry.try_spawn()
            if square is not None:
                assert square.cell not in snake
                assert square.cell not in placed
                placed.append(square.cell)
            assert len(registry) <= 3

        assert len(placed) == 3

    def test_lifetime_is_within_range(self, registry):
        """Each item expires between 5 and 10 seconds after it appears."""
        for col in range(5):
            registry.try_spawn(Cell(2, col))
        for item in registry.items.values():
            assert 5000 <= item.expires_at - item.spawned_at <= 10000

    def test_item_ids_are_unique(self, registry):
        """Every spawned item gets its own id."""
        registry.try_spawn(Cell(2, 0))
        registry.try_spawn(Cell(2, 1))
        ids = [item.item_id for item in registry.items.values()]
        assert len(set(ids)) == 2


class TestConsume:
    """Tests for FoodRegistry.consume()."""

    def test_consume_existing_food(self, registry):
        """consume() removes the entry and reports True."""
        registry.try_spawn(Cell(7, 7))
        assert registry.consume(Cell(7, 7)) is True
        assert Cell(7, 7) not in registry

    def test_consume_missing_food_is_noop(self, registry):
        """Consuming an empty cell (or twice) is a silent False."""
        assert registry.consume(Cell(3, 3)) is False
        registry.try_spawn(Cell(3, 3))
        registry.consume(Cell(3, 3))
        assert registry.consume(Cell(3, 3)) is False


class TestExpiry:
    """Tests for food expiry."""

    def test_expiry_removes_and_notifies(self, registry, timers, recorder):
        """At its deadline food is removed: expiring, then removed events."""
        registry.try_spawn(Cell(3, 3), lifetime_ms=500)

        timers.advance(499)
        assert Cell(3, 3) in registry

        timers.advance(1)
        assert Cell(3, 3) not in registry
        assert recorder.events[-2:] == [
            ("expiring", Cell(3, 3), SquareKind.FOOD),
            ("removed", Cell(3, 3), None),
        ]

    def test_expiry_after_consumption_is_noop(self, registry, timers, recorder):
        """Eaten food expiring later does nothing."""
        registry.try_spawn(Cell(3, 3), lifetime_ms=500)
        registry.consume(Cell(3, 3))

        timers.advance(1000)
        assert recorder.named("expiring") == []
        assert recorder.named("removed") == []

    def test_stale_expiry_leaves_newer_item(self, registry, timers):
        """An old item's expiry does not remove a newer item on the same cell."""
        registry.try_spawn(Cell(3, 3), lifetime_ms=500)
        registry.consume(Cell(3, 3))
        registry.try_spawn(Cell(3, 3), lifetime_ms=2000)

        timers.advance(600)
        assert Cell(3, 3) in registry

        timers.advance(1400)
        assert Cell(3, 3) not in registry

    def test_expiry_frees_a_slot_under_the_cap(self, registry, timers):
        """Once an item expires, a new one can be placed."""
        for col in range(5):
            registry.try_spawn(Cell(0, col), lifetime_ms=100 * (col + 1))
        assert registry.try_spawn(Cell(1, 0)) is None

        timers.advance(100)
        assert len(registry) == 4
        assert registry.try_spawn(Cell(1, 0)) is not None

    def test_clear_cancels_expiry(self, registry, timers, recorder):
        """clear() drops everything and no expiry fires afterwards."""
        registry.try_spawn(Cell(3, 3), lifetime_ms=500)
        registry.clear()

        assert len(registry) == 0
        timers.advance(1000)
        assert recorder.named("expiring") == []
