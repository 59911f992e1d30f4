"""Food placement logic."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_engine.board import Board

logger = logging.getLogger(__name__)


class PlacementStrategy(enum.Enum):
    """How a free cell is chosen for new food."""

    REJECTION = "rejection"
    FREE_CELLS = "free_cells"


class FoodSpawner:
    """Picks food positions that never land on the snake.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    The default strategy is rejection sampling: draw a uniform cell and
    redraw while it is occupied. Expected draws are ``A / (A - L)`` for
    board area ``A`` and ``L`` occupied cells, so the caller must keep
    ``L < A``; a completely full board raises ``RuntimeError`` instead of
    looping forever. ``FREE_CELLS`` samples the complement set directly,
    which stays cheap when the board is nearly full.
    """

    def __init__(
        self,
        board: Board,
        rng: np.random.Generator | None = None,
        strategy: PlacementStrategy = PlacementStrategy.REJECTION,
    ) -> None:
        self.board = board
        self.rng = rng if rng is not None else np.random.default_rng()
        self.strategy = PlacementStrategy(strategy)

    def place(self, occupied: Iterable[tuple[int, int]]) -> tuple[int, int]:
        """Return a uniformly random coordinate not in *occupied*."""
        taken = set(occupied)
        if len(taken) >= self.board.area:
            raise RuntimeError("No free cell left on the board for food.")
        if self.strategy is PlacementStrategy.FREE_CELLS:
            return self._place_free_cells(taken)
        return self._place_rejection(taken)

    def _place_rejection(self, taken: set[tuple[int, int]]) -> tuple[int, int]:
        draws = 0
        while True:
            draws += 1
            x = int(self.rng.integers(self.board.width))
            y = int(self.rng.integers(self.board.height))
            if (x, y) not in taken:
                if draws > 1:
                    logger.debug("Food placed at (%d, %d) after %d draws.", x, y, draws)
                return x, y

    def _place_free_cells(self, taken: set[tuple[int, int]]) -> tuple[int, int]:
        mask = np.ones(self.board.shape, dtype=bool)
        for x, y in taken:
            if self.board.in_bounds(x, y):
                mask[y, x] = False
        ys, xs = np.nonzero(mask)
        idx = int(self.rng.integers(len(xs)))
        return int(xs[idx]), int(ys[idx])
