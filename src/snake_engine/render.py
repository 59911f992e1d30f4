"""Map engine snapshots to drawable cells."""

from __future__ import annotations

import numpy as np

from snake_engine.board import CellType

_GLYPHS = {
    CellType.EMPTY: ".",
    CellType.SNAKE: "#",
    CellType.FOOD: "*",
}
_HEAD_GLYPH = "@"


def classify_cells(state: dict) -> np.ndarray:
    """Return an ``(height, width)`` int8 array of :class:`CellType` codes.

    *state* is the dict produced by ``GameEngine.get_state()``. Snake
    segments take precedence over food.
    """
    width = state["board"]["width"]
    height = state["board"]["height"]
    cells = np.full((height, width), CellType.EMPTY, dtype=np.int8)
    food = state.get("food")
    if food is not None:
        cells[food[1], food[0]] = CellType.FOOD
    for x, y in state["snake"]:
        cells[y, x] = CellType.SNAKE
    return cells


def render_text(state: dict) -> str:
    """Render a snapshot as text rows followed by a status line."""
    cells = classify_cells(state)
    rows = [[_GLYPHS[CellType(code)] for code in row] for row in cells.tolist()]
    if state["snake"]:
        hx, hy = state["snake"][0]
        rows[hy][hx] = _HEAD_GLYPH
    lines = ["".join(row) for row in rows]
    lines.append(f"score={state['score']} status={state['status']}")
    return "\n".join(lines)
