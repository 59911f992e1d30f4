"""In-memory session registry and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from snake_engine.config import EngineConfig
from snake_engine.engine import GameEngine
from snake_engine.server.models import SessionSummary

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100


@dataclass
class GameSession:
    """One engine plus the timer and sockets driving it.

    Every access to ``engine`` goes through ``lock`` so that ticks, key
    presses and resets never interleave.
    """

    session_id: str
    engine: GameEngine
    tick_interval_ms: int
    autostart: bool = True
    sockets: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def ticking(self) -> bool:
        return self._task is not None and not self._task.done()

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            status=self.engine.status,
            score=self.engine.score,
            tick=self.engine.ticks,
            tick_interval_ms=self.tick_interval_ms,
            ticking=self.ticking,
        )


class SessionManager:
    """Registry of single-player sessions."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        max_sessions: int = _MAX_SESSIONS,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1.")
        self.config = config if config is not None else EngineConfig()
        self._sessions: dict[str, GameSession] = {}
        self._max_sessions = max_sessions

    def create_session(
        self,
        width: int | None = None,
        height: int | None = None,
        tick_interval_ms: int | None = None,
        seed: int | None = None,
        autostart: bool = True,
    ) -> GameSession:
        """Create a session with food already placed.

        With *autostart* the tick loop is armed immediately, which requires
        a running event loop.
        """
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached. Delete a session first.")

        config = self.config.with_overrides(
            width=width,
            height=height,
            seed=seed,
            tick_interval_ms=tick_interval_ms,
        )
        engine = GameEngine(config=config)
        engine.ensure_food()

        session = GameSession(
            session_id=uuid.uuid4().hex[:12],
            engine=engine,
            tick_interval_ms=config.tick_interval_ms,
            autostart=autostart,
        )
        self._sessions[session.session_id] = session
        logger.info(
            "Session %s created (%dx%d, every %d ms).",
            session.session_id, config.width, config.height,
            config.tick_interval_ms,
        )
        if autostart:
            self.start_loop(session)
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    def start_loop(self, session: GameSession) -> None:
        """Arm the tick loop unless it is already running or the game ended."""
        if session.ticking or session.engine.game_over:
            return
        session._task = asyncio.create_task(self._tick_loop(session))

    async def queue_direction(self, session_id: str, token: str) -> None:
        session = self.require_session(session_id)
        async with session.lock:
            session.engine.queue_direction(token)

    async def step(self, session_id: str) -> dict:
        """Advance one tick by hand, restock food and broadcast."""
        session = self.require_session(session_id)
        async with session.lock:
            state = self._advance(session)
        await self._broadcast(session, state)
        return state

    async def reset(self, session_id: str) -> dict:
        """Reset the game and re-arm the tick loop if the session autostarts."""
        session = self.require_session(session_id)
        async with session.lock:
            session.engine.reset()
            session.engine.ensure_food()
            state = session.engine.get_state()
        logger.info("Session %s reset.", session_id)
        if session.autostart:
            self.start_loop(session)
        await self._broadcast(session, state)
        return state

    async def remove_session(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await self._stop_loop(session)
        await self._close_connections(session)
        logger.info("Session %s removed.", session_id)

    @staticmethod
    def _advance(session: GameSession) -> dict:
        engine = session.engine
        engine.tick()
        try:
            engine.ensure_food()
        except RuntimeError:
            # Board is full; every move from here collides, so the next
            # tick ends the game.
            logger.warning(
                "Session %s has no free cell left for food.", session.session_id,
            )
        return engine.get_state()

    async def _tick_loop(self, session: GameSession) -> None:
        """Tick at a fixed cadence until the game is over."""
        tick_interval = session.tick_interval_ms / 1000.0
        try:
            while not session.engine.game_over:
                await asyncio.sleep(tick_interval)
                async with session.lock:
                    state = self._advance(session)
                await self._broadcast(session, state)
            logger.info(
                "Session %s finished with score %d.",
                session.session_id, session.engine.score,
            )
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)

    async def _stop_loop(self, session: GameSession) -> None:
        task = session._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        session._task = None

    async def _broadcast(self, session: GameSession, state: dict) -> None:
        """Send game state to every connected socket."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in session.sockets:
                session.sockets.remove(ws)

    async def _close_connections(self, session: GameSession) -> None:
        for ws in list(session.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session closed.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", session.session_id,
                )
        session.sockets.clear()

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        for session in list(self._sessions.values()):
            await self._stop_loop(session)
        logger.info("SessionManager cleanup complete.")
