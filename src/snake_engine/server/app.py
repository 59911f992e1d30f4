"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from snake_engine.config import EngineConfig
from snake_engine.server.routes import router
from snake_engine.server.session_manager import SessionManager
from snake_engine.server.websocket import ws_router


def create_app(config: EngineConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.session_manager = SessionManager(config)
        yield
        await app.state.session_manager.cleanup()

    app = FastAPI(
        title="Snake Engine API", version="0.1.0", lifespan=_lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
