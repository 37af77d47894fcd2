import argparse
import json
import logging
import random
import uuid
from typing import Any, Dict, Optional

from config import ConfigurationError, GameConfig, log_level
from domain.board import Board, next_cell, parse_direction
from domain.constants import Direction, SquareKind
from domain.food import FoodRegistry
from domain.game_state import BoardSnapshot, GameState
from domain.snake import Collision, GrewOntoFood, Snake
from players import AVAILABLE_PLAYERS, Player, RandomPlayer, ScriptedPlayer
from players.commands import Command, DirectionCommand, PauseCommand, ResumeCommand
from services.renderer import GuardedRenderer, LoggingRenderer, Renderer
from services.timers import ManualTimers, ScheduleTimers, TimerQueue
from services.turn_scheduler import TurnScheduler

logger = logging.getLogger(__name__)

# Keyboard names -> commands. "p" toggles pause.
KEY_BINDINGS: Dict[str, Command] = {
    "left": DirectionCommand(Direction.LEFT),
    "arrowleft": DirectionCommand(Direction.LEFT),
    "up": DirectionCommand(Direction.UP),
    "arrowup": DirectionCommand(Direction.UP),
    "right": DirectionCommand(Direction.RIGHT),
    "arrowright": DirectionCommand(Direction.RIGHT),
    "down": DirectionCommand(Direction.DOWN),
    "arrowdown": DirectionCommand(Direction.DOWN),
    "p": PauseCommand(),
}

# end_reason values
WALL = "wall"
SELF = "self"
ENDED = "ended"
MAX_TURNS = "max_turns"


class SnakeGame:
    """
    One game session. Owns:
      - Board
      - Snake
      - Food registry
      - Game state (direction, over, paused)
      - Turn scheduler and its timer queue

    All mutation happens inside timer callbacks or public calls made from the
    thread driving the timer queue, so there is a single writer. Sessions
    share nothing and can run side by side.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        renderer: Optional[Renderer] = None,
        timers: Optional[TimerQueue] = None,
        player: Optional[Player] = None,
        rng: Optional[random.Random] = None,
        game_id: Optional[str] = None,
    ):
        self.config = (config or GameConfig()).validate()
        self.game_id = game_id or str(uuid.uuid4())
        self.rng = rng or random.Random(self.config.seed)
        self.timers = timers if timers is not None else ScheduleTimers()
        self.renderer = GuardedRenderer(renderer or Renderer())
        self.player = player

        self.board = Board(self.config.rows, self.config.cols)
        self.state = GameState()
        self.food = FoodRegistry(
            self.board,
            self.timers,
            renderer=self.renderer,
            max_food=self.config.max_food,
            lifetime_ms=self.config.food_lifetime_ms,
            rng=self.rng,
        )
        self.snake = Snake([self.board.center], food=self.food)
        self.food.occupancy = self.snake
        self.foods_eaten = 0

        self.scheduler = TurnScheduler(
            self.timers,
            on_move=self._move_tick,
            on_spawn=self._spawn_tick,
            length_fn=self.snake.length,
            turn_interval_ms=self.config.turn_interval_ms,
            speedup_per_segment_ms=self.config.speedup_per_segment_ms,
            min_interval_ms=self.config.min_interval_ms,
            startup_delay_ms=self.config.startup_delay_ms,
            rng=self.rng,
        )

        self.renderer.on_square_added(self.snake.head, SquareKind.SNAKE)
        logger.debug("Created game %s on %r, snake at %s", self.game_id, self.board, self.snake.head)

    # -------------------------------
    # Public control surface
    # -------------------------------

    def start(self) -> bool:
        """Begin the move-tick loop and the delayed food spawning."""
        if self.state.is_over:
            logger.warning("Game %s is already over; not starting.", self.game_id)
            return False
        if self.state.started:
            logger.warning("Game %s already started.", self.game_id)
            return False

        self.state.started = True
        logger.info("Game %s started on a %sx%s board", self.game_id, self.board.rows, self.board.cols)
        self.scheduler.start()
        return True

    def end_game(self, reason: str = ENDED) -> bool:
        """
        Force the terminal state and cancel the move and spawn timers.

        Returns True only for the call that actually ended the game.
        """
        ended = self.state.mark_over(reason)
        self.scheduler.stop()
        if ended:
            if self.timers.suspended:
                self.timers.resume()
            logger.info(
                "Game Over (%s): game %s, length %s after %s turns",
                reason, self.game_id, self.snake.length(), self.state.turns,
            )
        return ended

    def pause(self) -> bool:
        """Suspend the scheduler until resume() is called."""
        if self.state.is_over or not self.state.started or self.state.paused:
            return False
        self.state.paused = True
        self.scheduler.suspend()
        logger.info("Game %s paused", self.game_id)
        return True

    def resume(self) -> bool:
        if not self.state.paused:
            return False
        self.state.paused = False
        self.scheduler.resume()
        logger.info("Game %s resumed", self.game_id)
        return True

    def set_direction(self, direction) -> None:
        """Set the pending direction. It takes effect on the next move tick."""
        self.state.direction = parse_direction(direction)

    def handle_command(self, command: Optional[Command]) -> None:
        if command is None:
            return
        if isinstance(command, DirectionCommand):
            self.set_direction(command.direction)
        elif isinstance(command, PauseCommand):
            self.pause()
        elif isinstance(command, ResumeCommand):
            self.resume()
        else:
            raise ValueError(f"Unknown command {command!r}.")

    def handle_key(self, key: str) -> bool:
        """
        Map a key name to a command and apply it.

        Returns False for keys with no binding.
        """
        command = KEY_BINDINGS.get(key.strip().lower())
        if command is None:
            return False
        if isinstance(command, PauseCommand) and self.state.paused:
            command = ResumeCommand()
        self.handle_command(command)
        return True

    # -------------------------------
    # Ticks
    # -------------------------------

    def _move_tick(self) -> bool:
        """
        Execute one move:
          1) Ask the player (if any) for a command
          2) Compute the new head from the pending direction
          3) Off the board or onto the snake itself ends the game
          4) Food at the new head is eaten and the tail stays
          5) Otherwise the tail is dropped

        Returns False once the game is over.
        """
        if self.state.is_over:
            return False

        if self.player is not None:
            self.handle_command(self.player.get_move(self.get_current_state()))
            if self.state.is_over:
                return False

        new_head = next_cell(self.board, self.snake.head, self.state.direction)
        if new_head is None:
            self.end_game(WALL)
            return False

        result = self.snake.extend(new_head)
        if isinstance(result, Collision):
            self.end_game(SELF)
            return False

        self.renderer.on_square_added(new_head, SquareKind.SNAKE)
        if isinstance(result, GrewOntoFood):
            self.food.consume(new_head)
            self.foods_eaten += 1
            logger.info("Ate food at %s, length now %s", new_head, self.snake.length())
        else:
            tail = self.snake.shrink()
            self.renderer.on_square_removed(tail.cell)

        self.state.turns += 1
        logger.debug("Turn %s: head %s moving %s", self.state.turns, new_head, self.state.direction.value)
        return True

    def _spawn_tick(self) -> None:
        if self.state.is_over:
            return
        self.food.try_spawn()

    # -------------------------------
    # Snapshots
    # -------------------------------

    def get_current_state(self) -> BoardSnapshot:
        """
        Return a snapshot of the current board.
        """
        return BoardSnapshot(
            rows=self.board.rows,
            cols=self.board.cols,
            snake=self.snake.cells(),
            food=self.food.cells(),
            direction=self.state.direction,
            is_over=self.state.is_over,
            end_reason=self.state.end_reason,
            turns=self.state.turns,
        )

    def print_board(self):
        """
        Prints a visual representation of the current board state.
        """
        print("\n" + self.get_current_state().print_board() + "\n")

    def summary(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "length": self.snake.length(),
            "turns": self.state.turns,
            "foods_eaten": self.foods_eaten,
            "end_reason": self.state.end_reason,
            "elapsed_ms": int(self.timers.now()),
        }


# -------------------------------
# Simulation Functions
# -------------------------------

def _result(game: SnakeGame) -> Dict[str, Any]:
    """Summary of a finished game plus the final board, for printing."""
    result = game.summary()
    result["board_state"] = game.get_current_state().print_board()
    return result


def run_simulation(
    config: Optional[GameConfig] = None,
    player: Optional[Player] = None,
    max_turns: Optional[int] = None,
    renderer: Optional[Renderer] = None,
) -> Dict[str, Any]:
    """
    Run a whole game on a virtual clock, as fast as the CPU allows.

    Args:
        config: game settings (defaults if None)
        player: input source asked for a command before every move
        max_turns: end the game after this many moves if it is still going

    Returns:
        A dictionary summarizing the game (game_id, length, turns, ...).
    """
    timers = ManualTimers()
    game = SnakeGame(config, renderer=renderer, timers=timers, player=player)
    game.start()

    while not game.state.is_over:
        if max_turns is not None and game.state.turns >= max_turns:
            game.end_game(MAX_TURNS)
            break
        # Nobody is around to acknowledge a pause in a headless run
        if game.state.paused:
            game.resume()
        if not timers.run_next():
            break

    return _result(game)


def run_realtime(
    config: Optional[GameConfig] = None,
    player: Optional[Player] = None,
    max_turns: Optional[int] = None,
    renderer: Optional[Renderer] = None,
) -> Dict[str, Any]:
    """Run a whole game against the wall clock."""
    timers = ScheduleTimers()
    game = SnakeGame(config, renderer=renderer, timers=timers, player=player)

    def should_stop() -> bool:
        if max_turns is not None and game.state.turns >= max_turns:
            game.end_game(MAX_TURNS)
        return game.state.is_over

    game.start()
    timers.run(should_stop)
    return _result(game)


def build_player(name: str, seed: Optional[int] = None, script: Optional[str] = None) -> Player:
    if name not in AVAILABLE_PLAYERS:
        raise ValueError(f"Unknown player '{name}'. Options: {', '.join(AVAILABLE_PLAYERS)}")
    if name == "random":
        return RandomPlayer(random.Random(seed))
    return ScriptedPlayer((script or "").split(",") if script else ())


# -------------------------------
# Main Entry Point
# -------------------------------
def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run a headless snake game and print the final board and summary."
    )
    parser.add_argument("--rows", type=int, default=None, help="Number of board rows")
    parser.add_argument("--cols", type=int, default=None, help="Number of board columns")
    parser.add_argument("--turn-interval", type=int, default=None,
                        help="Base move interval in milliseconds")
    parser.add_argument("--max-food", type=int, default=None,
                        help="Maximum pieces of food on the board at once")
    parser.add_argument("--min-interval", type=int, default=None,
                        help="Floor for the move interval in milliseconds")
    parser.add_argument("--max-turns", type=int, default=1000,
                        help="Stop the game after this many moves")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--player", choices=sorted(AVAILABLE_PLAYERS), default="random",
                        help="Input source driving the snake")
    parser.add_argument("--script", type=str, default=None,
                        help="Comma-separated commands for the scripted player (e.g. 'up,-,left')")
    parser.add_argument("--realtime", action="store_true",
                        help="Run against the wall clock instead of a virtual one")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=(args.log_level or log_level()).upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        config = GameConfig.from_env().with_overrides(
            rows=args.rows,
            cols=args.cols,
            turn_interval_ms=args.turn_interval,
            max_food=args.max_food,
            min_interval_ms=args.min_interval,
            seed=args.seed,
        ).validate()
    except ConfigurationError as e:
        parser.error(str(e))

    player = build_player(args.player, seed=config.seed, script=args.script)
    runner = run_realtime if args.realtime else run_simulation
    result = runner(config, player=player, max_turns=args.max_turns, renderer=LoggingRenderer())

    print("\n" + result.pop("board_state") + "\n")

    print("Simulation Result Summary:")
    print(json.dumps(result, indent=2))
    return result


if __name__ == "__main__":
    main()
