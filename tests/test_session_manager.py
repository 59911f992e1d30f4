"""Tests for the session registry and its tick loops."""

from __future__ import annotations

import asyncio

import pytest

from snake_engine.config import EngineConfig
from snake_engine.engine import GameStatus
from snake_engine.server.session_manager import SessionManager


async def _wait_for(predicate, timeout: float = 2.0) -> bool:
    for _ in range(int(timeout / 0.01)):
        if predicate():
            return True
        await asyncio.sleep(0.01)
    return predicate()


class TestSessionLifecycle:
    def test_invalid_max_sessions(self):
        with pytest.raises(ValueError, match="max_sessions"):
            SessionManager(max_sessions=0)

    def test_create_without_loop(self):
        manager = SessionManager()
        session = manager.create_session(width=10, height=10, autostart=False)
        assert session.engine.food is not None
        assert not session.ticking
        assert manager.get_session(session.session_id) is session

    def test_session_limit(self):
        manager = SessionManager(max_sessions=1)
        manager.create_session(autostart=False)
        with pytest.raises(ValueError, match="limit"):
            manager.create_session(autostart=False)

    def test_defaults_come_from_manager_config(self):
        manager = SessionManager(EngineConfig(width=12, height=9, tick_interval_ms=50))
        session = manager.create_session(autostart=False)
        assert session.engine.board.width == 12
        assert session.tick_interval_ms == 50

    def test_require_unknown_session(self):
        with pytest.raises(KeyError):
            SessionManager().require_session("missing")

    @pytest.mark.asyncio
    async def test_remove(self):
        manager = SessionManager()
        session = manager.create_session(tick_interval_ms=20)
        await manager.remove_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert not session.ticking
        with pytest.raises(KeyError):
            await manager.remove_session(session.session_id)


class TestManualStepping:
    @pytest.mark.asyncio
    async def test_step_restocks_food(self):
        manager = SessionManager()
        session = manager.create_session(
            width=10, height=10, seed=0, autostart=False,
        )
        engine = session.engine
        engine.load_position([(5, 5), (4, 5), (3, 5)], food=(6, 5))

        state = await manager.step(session.session_id)
        assert state["score"] == 1
        assert state["food"] is not None
        assert state["food"] not in state["snake"]

    @pytest.mark.asyncio
    async def test_queue_direction(self):
        manager = SessionManager()
        session = manager.create_session(width=10, height=10, autostart=False)
        await manager.queue_direction(session.session_id, "s")
        state = await manager.step(session.session_id)
        assert state["snake"][0] == [5, 4]


class TestTickLoop:
    @pytest.mark.asyncio
    async def test_loop_stops_on_game_over(self):
        manager = SessionManager()
        session = manager.create_session(
            width=8, height=8, seed=0, tick_interval_ms=20,
        )
        assert session.ticking
        assert await _wait_for(lambda: session.engine.game_over)
        assert await _wait_for(lambda: not session.ticking)
        ticks = session.engine.ticks
        await asyncio.sleep(0.1)
        assert session.engine.ticks == ticks
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_reset_rearms_loop(self):
        manager = SessionManager()
        session = manager.create_session(
            width=8, height=8, seed=0, tick_interval_ms=20,
        )
        assert await _wait_for(lambda: not session.ticking)

        state = await manager.reset(session.session_id)
        assert state["status"] == GameStatus.RUNNING.value
        assert state["tick"] == 0
        assert session.ticking
        await manager.cleanup()
        assert not session.ticking

    @pytest.mark.asyncio
    async def test_reset_without_autostart_stays_manual(self):
        manager = SessionManager()
        session = manager.create_session(autostart=False)
        await manager.reset(session.session_id)
        assert not session.ticking


class TestFullBoard:
    @pytest.mark.asyncio
    async def test_eating_last_free_cell_keeps_session_consistent(self):
        manager = SessionManager(EngineConfig(width=3, height=3, start_x=2, start_y=1))
        session = manager.create_session(seed=0, autostart=False)
        session.engine.load_position(
            [(1, 2), (0, 2), (0, 1), (1, 1), (2, 1), (2, 0), (1, 0), (0, 0)],
            food=(2, 2),
        )

        state = await manager.step(session.session_id)
        assert state["score"] == 1
        assert state["food"] is None
        assert state["status"] == GameStatus.RUNNING.value
        assert len(state["snake"]) == 9

        state = await manager.step(session.session_id)
        assert state["status"] == GameStatus.OVER.value
        assert len(state["snake"]) == 9
