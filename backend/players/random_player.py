"""
Random player implementation - picks random safe moves.
"""

import random
from typing import List, Optional

from domain.board import Board, next_cell
from domain.constants import Direction
from domain.game_state import BoardSnapshot
from .base import Player
from .commands import DirectionCommand


class RandomPlayer(Player):
    """
    A random autopilot that picks a direction avoiding walls and self-collisions.
    """

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def get_move(self, snapshot: BoardSnapshot) -> DirectionCommand:
        board = Board(snapshot.rows, snapshot.cols)
        head = snapshot.snake[0]
        # The tail moves away this turn, unless we happen to eat
        body = set(snapshot.snake[:-1])

        # Filter out moves that:
        # 1. Hit walls
        # 2. Hit own body (except tail)
        valid_moves: List[Direction] = []
        for direction in Direction:
            target = next_cell(board, head, direction)
            if target is None or target in body:
                continue
            valid_moves.append(direction)

        # Prefer food when it is right next to the head
        food = set(snapshot.food)
        eating = [d for d in valid_moves if next_cell(board, head, d) in food]
        if eating:
            return DirectionCommand(self.rng.choice(eating))

        # If no valid moves, just return a random move (we'll die anyway)
        if not valid_moves:
            return DirectionCommand(self.rng.choice(list(Direction)))

        return DirectionCommand(self.rng.choice(valid_moves))
