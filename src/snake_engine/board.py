"""Board dimensions and cell codes for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass


class CellType(enum.IntEnum):
    """Integer codes used when a board is rasterised into an array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


@dataclass(frozen=True)
class Board:
    """Immutable playable area.

    Coordinates are ``(x, y)`` pairs with ``x`` growing to the right and
    ``y`` growing downward, so an array view is indexed ``cells[y, x]``.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be at least 1×1.")

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def shape(self) -> tuple[int, int]:
        """NumPy shape ``(rows, cols)`` of the board."""
        return self.height, self.width

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the board."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cells(self) -> Iterator[tuple[int, int]]:
        """Yield every coordinate in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}
