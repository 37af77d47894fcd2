"""
Host configuration for a game.

Values are fixed for a game's lifetime. Defaults can be overridden from the
environment (a .env file is loaded first), and the CLI overrides both.

Environment variables:
    SNAKE_ROWS, SNAKE_COLS            board size (default 15 x 11)
    SNAKE_TURN_INTERVAL_MS            base move/spawn interval (default 1000)
    SNAKE_MAX_FOOD                    concurrent food cap (default 5)
    SNAKE_FOOD_LIFETIME_MS            "lo,hi" food lifetime range (default 5000,10000)
    SNAKE_STARTUP_DELAY_MS            "lo,hi" delay before food spawning (default 1000,4000)
    SNAKE_SPEEDUP_MS                  move delay reduction per segment (default 40)
    SNAKE_MIN_INTERVAL_MS             floor for the move delay (default 50)
    SNAKE_SEED                        random seed (unset for a fresh game each time)
    SNAKE_LOG_LEVEL                   logging level for the CLI (default INFO)
"""

import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from dotenv import load_dotenv

from domain.constants import (
    DEFAULT_COLS,
    DEFAULT_FOOD_LIFETIME_MS,
    DEFAULT_MAX_FOOD,
    DEFAULT_MIN_INTERVAL_MS,
    DEFAULT_ROWS,
    DEFAULT_SPEEDUP_PER_SEGMENT_MS,
    DEFAULT_STARTUP_DELAY_MS,
    DEFAULT_TURN_INTERVAL_MS,
)

LOG_LEVEL = "INFO"


class ConfigurationError(ValueError):
    """Raised when a game cannot be built from the given settings."""


@dataclass(frozen=True)
class GameConfig:
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    turn_interval_ms: int = DEFAULT_TURN_INTERVAL_MS
    max_food: int = DEFAULT_MAX_FOOD
    food_lifetime_ms: Tuple[int, int] = DEFAULT_FOOD_LIFETIME_MS
    startup_delay_ms: Tuple[int, int] = DEFAULT_STARTUP_DELAY_MS
    speedup_per_segment_ms: int = DEFAULT_SPEEDUP_PER_SEGMENT_MS
    min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS
    # (width_px, height_px) of the drawing surface, if the host has one
    canvas_size: Optional[Tuple[float, float]] = None
    seed: Optional[int] = None

    def validate(self) -> "GameConfig":
        """Check every setting; return self so calls can be chained."""
        if self.rows <= 0 or self.cols <= 0:
            raise ConfigurationError(f"Board must have positive dimensions, got {self.rows}x{self.cols}.")
        if self.turn_interval_ms <= 0:
            raise ConfigurationError(f"turn_interval_ms must be positive, got {self.turn_interval_ms}.")
        if self.min_interval_ms <= 0:
            raise ConfigurationError(f"min_interval_ms must be positive, got {self.min_interval_ms}.")
        if self.speedup_per_segment_ms < 0:
            raise ConfigurationError(
                f"speedup_per_segment_ms cannot be negative, got {self.speedup_per_segment_ms}."
            )
        if self.max_food < 0:
            raise ConfigurationError(f"max_food cannot be negative, got {self.max_food}.")
        _check_range("food_lifetime_ms", self.food_lifetime_ms)
        _check_range("startup_delay_ms", self.startup_delay_ms)

        if self.canvas_size is not None:
            width, height = self.canvas_size
            if width <= 0 or height <= 0:
                raise ConfigurationError(f"Canvas must have positive size, got {width}x{height}.")
            # Squares must come out square: height / rows == width / cols
            if height * self.cols != width * self.rows:
                raise ConfigurationError(
                    f"Canvas width/height ratio ({width}x{height}) must match "
                    f"cols/rows ratio ({self.cols}x{self.rows})."
                )
        return self

    def square_size(self) -> Optional[float]:
        """Side length of one board square on the canvas, if there is one."""
        if self.canvas_size is None:
            return None
        return self.canvas_size[1] / self.rows

    def with_overrides(self, **overrides) -> "GameConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "GameConfig":
        """Build a config from SNAKE_* environment variables."""
        if dotenv:
            load_dotenv()

        defaults = cls()
        return cls(
            rows=_env_int("SNAKE_ROWS", defaults.rows),
            cols=_env_int("SNAKE_COLS", defaults.cols),
            turn_interval_ms=_env_int("SNAKE_TURN_INTERVAL_MS", defaults.turn_interval_ms),
            max_food=_env_int("SNAKE_MAX_FOOD", defaults.max_food),
            food_lifetime_ms=_env_range("SNAKE_FOOD_LIFETIME_MS", defaults.food_lifetime_ms),
            startup_delay_ms=_env_range("SNAKE_STARTUP_DELAY_MS", defaults.startup_delay_ms),
            speedup_per_segment_ms=_env_int("SNAKE_SPEEDUP_MS", defaults.speedup_per_segment_ms),
            min_interval_ms=_env_int("SNAKE_MIN_INTERVAL_MS", defaults.min_interval_ms),
            seed=_env_int("SNAKE_SEED", None),
        )


def _check_range(name: str, value: Tuple[int, int]) -> None:
    try:
        lo, hi = value
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a (min, max) pair, got {value!r}.") from None
    if lo < 0 or hi < lo:
        raise ConfigurationError(f"{name} must satisfy 0 <= min <= max, got {value!r}.")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from None


def _env_range(name: str, default: Tuple[int, int]) -> Tuple[int, int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return parse_range(raw, name)


def parse_range(raw: str, name: str = "range") -> Tuple[int, int]:
    """Parse "lo,hi" (or a single "n" meaning n,n) into a pair of ints."""
    parts = [p.strip() for p in raw.split(",")]
    try:
        if len(parts) == 1:
            value = int(parts[0])
            return value, value
        if len(parts) == 2:
            return int(parts[0]), int(parts[1])
    except ValueError:
        pass
    raise ConfigurationError(f"{name} must look like 'min,max', got {raw!r}.")


def log_level() -> str:
    load_dotenv()
    return os.getenv("SNAKE_LOG_LEVEL", LOG_LEVEL).upper()
