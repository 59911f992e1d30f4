"""Tests for snapshot rendering."""

from snake_engine.board import CellType
from snake_engine.engine import GameEngine
from snake_engine.render import classify_cells, render_text


def _state():
    return {
        "tick": 3,
        "score": 1,
        "status": "running",
        "board": {"width": 4, "height": 3},
        "snake": [[2, 1], [1, 1], [0, 1]],
        "direction": "right",
        "food": [3, 2],
    }


class TestClassifyCells:
    def test_shape_and_codes(self):
        cells = classify_cells(_state())
        assert cells.shape == (3, 4)
        assert cells[1, 0] == CellType.SNAKE
        assert cells[1, 2] == CellType.SNAKE
        assert cells[2, 3] == CellType.FOOD
        assert cells[0, 0] == CellType.EMPTY
        assert (cells == CellType.EMPTY).sum() == 8

    def test_without_food(self):
        state = _state()
        state["food"] = None
        cells = classify_cells(state)
        assert (cells == CellType.FOOD).sum() == 0

    def test_matches_engine_snapshot(self):
        engine = GameEngine(width=10, height=10, seed=0)
        engine.ensure_food()
        cells = classify_cells(engine.get_state())
        assert (cells == CellType.SNAKE).sum() == 3
        assert (cells == CellType.FOOD).sum() == 1


class TestRenderText:
    def test_rows_and_status(self):
        text = render_text(_state())
        assert text.splitlines() == [
            "....",
            "##@.",
            "...*",
            "score=1 status=running",
        ]
