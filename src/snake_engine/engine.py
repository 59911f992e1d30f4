"""Tick-based game engine composing board, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable

import numpy as np

from snake_engine.board import Board
from snake_engine.config import EngineConfig
from snake_engine.food import FoodSpawner, PlacementStrategy
from snake_engine.snake import Direction, Snake, parse_direction

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    """Lifecycle of a single game. ``OVER`` is left only via reset."""

    RUNNING = "running"
    OVER = "over"


class GameEngine:
    """Single-snake, tick-based game engine.

    The engine owns the board, snake, food and score. Each call to
    :meth:`tick` advances the game by one cell and returns the updated
    state dictionary. Food is not respawned inside :meth:`tick`; the host
    calls :meth:`ensure_food` whenever it wants the board restocked,
    normally right after each tick and after :meth:`reset`.

    The engine is not thread-safe. Hosts that tick from a timer while
    receiving input elsewhere must serialise the calls behind one lock.
    """

    def __init__(
        self,
        width: int | None = None,
        height: int | None = None,
        seed: int | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        base = config if config is not None else EngineConfig()
        self.config = base.with_overrides(width=width, height=height, seed=seed)

        self.board = Board(self.config.width, self.config.height)
        start_direction = parse_direction(self.config.start_direction)
        if start_direction is None:
            raise ValueError(
                f"Unknown start direction {self.config.start_direction!r}.",
            )
        self._start_direction = start_direction
        self._validate_start()

        self.rng = np.random.default_rng(self.config.seed)
        self.food_spawner = FoodSpawner(
            self.board,
            rng=self.rng,
            strategy=PlacementStrategy(self.config.food_strategy),
        )

        self._snake = self._starting_snake()
        self._direction = self._start_direction
        self._pending_direction: Direction | None = None
        self._food: tuple[int, int] | None = None
        self.score = 0
        self.ticks = 0
        self.status = GameStatus.RUNNING

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _starting_snake(self) -> Snake:
        return Snake(
            self.config.start_x,
            self.config.start_y,
            self._start_direction,
            length=self.config.start_length,
        )

    def _validate_start(self) -> None:
        """Reject boards that cannot host the starting snake plus food."""
        if self.config.start_length < 1:
            raise ValueError("Starting snake length must be at least 1.")
        if self.config.start_length >= self.board.area:
            raise ValueError(
                f"Board {self.board.width}×{self.board.height} is too small "
                f"for a snake of length {self.config.start_length}.",
            )
        snake = self._starting_snake()
        if not all(self.board.in_bounds(x, y) for x, y in snake.body):
            raise ValueError("Starting snake does not fit inside the board.")

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def snake(self) -> tuple[tuple[int, int], ...]:
        """Head-first body segments."""
        return self._snake.segments()

    @property
    def food(self) -> tuple[int, int] | None:
        return self._food

    @property
    def current_direction(self) -> Direction:
        """Direction of travel, inferred from the head and neck."""
        return self._snake.heading(self._direction)

    @property
    def pending_direction(self) -> Direction | None:
        return self._pending_direction

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.OVER

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def queue_direction(self, direction: Direction | str) -> None:
        """Buffer a turn for the next tick; the latest call wins.

        Reversal is judged in :meth:`tick` against the heading at that
        moment, not here. Unknown tokens and calls after game over are
        ignored.
        """
        if self.status is GameStatus.OVER:
            return
        parsed = parse_direction(direction)
        if parsed is None:
            logger.debug("Ignoring unknown direction token %r.", direction)
            return
        self._pending_direction = parsed

    def tick(self) -> dict:
        """Advance the game by one cell.

        Returns the full game state as a serializable dict.
        """
        if self.status is GameStatus.OVER:
            return self.get_state()

        # Re-derive the heading from the body every tick.
        effective = self.current_direction
        move = effective
        pending = self._pending_direction
        if pending is not None and not pending.is_reversal_of(effective):
            move = pending
            self._pending_direction = None
        # A rejected reversal stays buffered; it can only be replaced by a
        # later key press since the heading keeps pointing the same way.
        self._direction = move

        new_head = self._snake.next_head(move)
        x, y = new_head

        # --- collision check, against the pre-move body including the tail ---
        if not self.board.in_bounds(x, y) or self._snake.occupies(x, y):
            self._end_game(new_head)
            return self.get_state()

        # --- move ---
        ate = self._food is not None and new_head == self._food
        self._snake.advance(new_head, grow=ate)
        if ate:
            self.score += 1
            self._food = None

        self.ticks += 1
        return self.get_state()

    def ensure_food(self) -> tuple[int, int] | None:
        """Place food on a free cell if none is present.

        Does nothing once the game is over. Raises ``RuntimeError`` if the
        snake fills the whole board.
        """
        if self._food is None and self.status is GameStatus.RUNNING:
            self._food = self.food_spawner.place(self._snake.body)
        return self._food

    def reset(self) -> dict:
        """Restore the canonical starting position and clear the score."""
        self._snake = self._starting_snake()
        self._direction = self._start_direction
        self._pending_direction = None
        self._food = None
        self.score = 0
        self.ticks = 0
        self.status = GameStatus.RUNNING
        logger.debug("Engine reset to starting position.")
        return self.get_state()

    def load_position(
        self,
        segments: Iterable[tuple[int, int]],
        direction: Direction | None = None,
        food: tuple[int, int] | None = None,
    ) -> None:
        """Replace the snake, stored direction and food with a given setup.

        Meant for scenario setup (puzzles, replays, tests). Score and tick
        count are left as they are and the game is set running.
        """
        snake = Snake.from_segments(segments)
        body = list(snake.body)
        if not all(self.board.in_bounds(x, y) for x, y in body):
            raise ValueError("Snake segments must lie inside the board.")
        if len(set(body)) != len(body):
            raise ValueError("Snake segments must be distinct.")
        if len(body) >= self.board.area:
            raise ValueError("Snake must leave at least one free cell.")
        if food is not None:
            food = (int(food[0]), int(food[1]))
            if not self.board.in_bounds(*food) or food in body:
                raise ValueError("Food must be on a free cell inside the board.")

        self._snake = snake
        if direction is not None:
            self._direction = direction
        self._pending_direction = None
        self._food = food
        self.status = GameStatus.RUNNING

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.ticks,
            "score": self.score,
            "status": self.status.value,
            "board": self.board.to_dict(),
            "snake": self._snake.to_list(),
            "direction": self.current_direction.name.lower(),
            "food": list(self._food) if self._food is not None else None,
        }

    def _end_game(self, blocked_at: tuple[int, int]) -> None:
        """Mark the game as over without touching the snake."""
        self.status = GameStatus.OVER
        self.ticks += 1
        logger.info(
            "Game over at tick %d with score %d (blocked at %s).",
            self.ticks, self.score, blocked_at,
        )
