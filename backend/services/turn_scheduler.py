"""
TurnScheduler - the two periodic activities of a live game.

 - Move ticks, re-scheduled after every move with a delay that shrinks as
   the snake grows (down to a floor).
 - Food-spawn ticks, every turn interval, beginning after a random startup
   delay so the first food does not appear the instant the game starts.

The scheduler only handles timing. What a tick does is supplied by the
caller as `on_move` / `on_spawn` callbacks.
"""

import logging
import random
from typing import Callable, Optional, Tuple

from domain.constants import (
    DEFAULT_MIN_INTERVAL_MS,
    DEFAULT_SPEEDUP_PER_SEGMENT_MS,
    DEFAULT_STARTUP_DELAY_MS,
    DEFAULT_TURN_INTERVAL_MS,
)
from services.timers import TimerHandle, TimerQueue

logger = logging.getLogger(__name__)


def move_delay(
    length: int,
    turn_interval_ms: int = DEFAULT_TURN_INTERVAL_MS,
    speedup_per_segment_ms: int = DEFAULT_SPEEDUP_PER_SEGMENT_MS,
    min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
) -> int:
    """Delay before the next move tick for a snake of the given length."""
    return max(min_interval_ms, turn_interval_ms - speedup_per_segment_ms * (length - 1))


class TurnScheduler:
    """
    Drives move ticks and food-spawn ticks on a TimerQueue.

    Args:
        timers: the queue to schedule on
        on_move: called on every move tick; returns False once the game is over
        on_spawn: called on every food-spawn tick
        length_fn: returns the current snake length, used for the move delay
    """

    def __init__(
        self,
        timers: TimerQueue,
        on_move: Callable[[], bool],
        on_spawn: Callable[[], None],
        length_fn: Callable[[], int],
        turn_interval_ms: int = DEFAULT_TURN_INTERVAL_MS,
        speedup_per_segment_ms: int = DEFAULT_SPEEDUP_PER_SEGMENT_MS,
        min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
        startup_delay_ms: Tuple[int, int] = DEFAULT_STARTUP_DELAY_MS,
        rng: Optional[random.Random] = None,
    ):
        self.timers = timers
        self.on_move = on_move
        self.on_spawn = on_spawn
        self.length_fn = length_fn
        self.turn_interval_ms = turn_interval_ms
        self.speedup_per_segment_ms = speedup_per_segment_ms
        self.min_interval_ms = min_interval_ms
        self.startup_delay_ms = startup_delay_ms
        self.rng = rng or random.Random()

        self.move_timer: Optional[TimerHandle] = None
        self.spawn_timer: Optional[TimerHandle] = None
        self.running = False
        self.stopped = False

    def start(self) -> None:
        """
        Run the first move tick right away and schedule the food-spawn
        activity after a random startup delay.
        """
        if self.running or self.stopped:
            return
        self.running = True

        startup_delay = self.rng.randint(*self.startup_delay_ms)
        # Spawning begins one full interval after the startup delay
        self.spawn_timer = self.timers.call_later(startup_delay + self.turn_interval_ms, self._spawn_tick)
        logger.debug("Food spawning begins in %sms", startup_delay + self.turn_interval_ms)

        self._move_tick()

    def stop(self) -> None:
        """Cancel both periodic activities. Safe to call more than once."""
        self.stopped = True
        self.running = False
        self.timers.cancel(self.move_timer)
        self.timers.cancel(self.spawn_timer)
        self.move_timer = None
        self.spawn_timer = None

    def suspend(self) -> None:
        self.timers.suspend()

    def resume(self) -> None:
        self.timers.resume()

    @property
    def suspended(self) -> bool:
        return self.timers.suspended

    def next_move_delay(self) -> int:
        return move_delay(
            self.length_fn(),
            self.turn_interval_ms,
            self.speedup_per_segment_ms,
            self.min_interval_ms,
        )

    def _move_tick(self) -> None:
        self.move_timer = None
        if self.stopped:
            return
        if not self.on_move():
            self.stop()
            return
        # on_move may have stopped us (e.g. end_game() from an input command)
        if self.stopped:
            return
        delay = self.next_move_delay()
        self.move_timer = self.timers.call_later(delay, self._move_tick)
        logger.debug("Next move in %sms (length %s)", delay, self.length_fn())

    def _spawn_tick(self) -> None:
        self.spawn_timer = None
        if self.stopped:
            return
        self.on_spawn()
        if not self.stopped:
            self.spawn_timer = self.timers.call_later(self.turn_interval_ms, self._spawn_tick)
