"""Tests for engine configuration."""

from snake_engine.config import EngineConfig


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert (config.width, config.height) == (26, 26)
        assert (config.start_x, config.start_y) == (5, 3)
        assert config.start_length == 3
        assert config.tick_interval_ms == 200
        assert config.seed is None

    def test_overrides_skip_none(self):
        config = EngineConfig().with_overrides(width=12, height=None, seed=4)
        assert config.width == 12
        assert config.height == 26
        assert config.seed == 4

    def test_no_overrides_returns_same(self):
        config = EngineConfig()
        assert config.with_overrides(width=None) is config

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "engine.json"
        config = EngineConfig(width=12, height=9, seed=7, food_strategy="free_cells")
        config.save(path)
        assert EngineConfig.load(path) == config
