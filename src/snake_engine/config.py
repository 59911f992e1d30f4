"""Engine and session configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Board geometry, starting snake and timing for one game.

    Supports JSON serialization so a setup can be replayed exactly.
    """

    # Board
    width: int = 26
    height: int = 26

    # Starting snake
    start_x: int = 5
    start_y: int = 3
    start_length: int = 3
    start_direction: str = "right"

    # Food
    food_strategy: str = "rejection"
    seed: int | None = None

    # Timing driver
    tick_interval_ms: int = 200

    def with_overrides(self, **overrides) -> EngineConfig:
        """Return a copy with the non-``None`` overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> EngineConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
