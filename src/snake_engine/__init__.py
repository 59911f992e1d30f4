"""Snake engine — grid snake game core."""

from snake_engine.board import Board, CellType
from snake_engine.config import EngineConfig
from snake_engine.engine import GameEngine, GameStatus
from snake_engine.food import FoodSpawner, PlacementStrategy
from snake_engine.snake import Direction, Snake, parse_direction

__all__ = [
    "Board",
    "CellType",
    "Direction",
    "EngineConfig",
    "FoodSpawner",
    "GameEngine",
    "GameStatus",
    "PlacementStrategy",
    "Snake",
    "parse_direction",
]
