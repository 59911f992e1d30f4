"""Snake body and direction handling."""

from __future__ import annotations

import enum
from collections import deque


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def is_reversal_of(self, other: Direction) -> bool:
        """Return True if moving this way would turn 180° from *other*."""
        return _OPPOSITES[other] is self


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_TOKENS: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "arrowup": Direction.UP,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    "arrowright": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}


def parse_direction(token: object) -> Direction | None:
    """Map a raw input token to a direction.

    Accepts ``Direction`` members, ``"up"``-style names, browser key names
    such as ``"ArrowUp"`` and WASD letters, case-insensitively. Anything
    else yields ``None``.
    """
    if isinstance(token, Direction):
        return token
    if not isinstance(token, str):
        return None
    return _TOKENS.get(token.strip().lower())


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(
        self,
        head_x: int,
        head_y: int,
        direction: Direction = Direction.RIGHT,
        length: int = 3,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dx, dy = direction.value
        self.body: deque[tuple[int, int]] = deque(
            (head_x - dx * i, head_y - dy * i) for i in range(length)
        )

    @classmethod
    def from_segments(cls, segments) -> Snake:
        """Build a snake from an explicit head-first segment sequence."""
        body = [tuple(seg) for seg in segments]
        if not body:
            raise ValueError("Snake length must be at least 1.")
        snake = cls.__new__(cls)
        snake.body = deque(body)
        return snake

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> tuple[int, int]:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def neck(self) -> tuple[int, int] | None:
        """Return the segment right behind the head, if any."""
        return self.body[1] if len(self.body) > 1 else None

    def heading(self, default: Direction) -> Direction:
        """Infer the direction of travel from the head and neck.

        Falls back to *default* for a single-segment snake or when the two
        front segments are not orthogonal neighbours.
        """
        neck = self.neck
        if neck is None:
            return default
        hx, hy = self.head
        nx, ny = neck
        if hx > nx:
            return Direction.RIGHT
        if hx < nx:
            return Direction.LEFT
        if hy > ny:
            return Direction.DOWN
        if hy < ny:
            return Direction.UP
        return default

    def next_head(self, direction: Direction) -> tuple[int, int]:
        """Compute the next head position without moving."""
        dx, dy = direction.value
        x, y = self.head
        return x + dx, y + dy

    def advance(
        self, new_head: tuple[int, int], grow: bool = False,
    ) -> tuple[int, int] | None:
        """Prepend *new_head*, dropping the tail unless growing.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(new_head)
        if grow:
            return None
        return self.body.pop()

    def occupies(self, x: int, y: int) -> bool:
        """Check whether the snake occupies a given cell."""
        return (x, y) in self.body

    def segments(self) -> tuple[tuple[int, int], ...]:
        """Return an immutable head-first copy of the body."""
        return tuple(self.body)

    def to_list(self) -> list[list[int]]:
        return [list(seg) for seg in self.body]
