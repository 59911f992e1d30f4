"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from snake_engine.engine import GameStatus


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    width: int | None = Field(default=None, ge=1, le=200)
    height: int | None = Field(default=None, ge=1, le=200)
    tick_interval_ms: int | None = Field(default=None, ge=20, le=2000)
    seed: int | None = None
    autostart: bool = True


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction.

    Any string is accepted; unknown tokens are ignored by the engine.
    """

    direction: str = Field(min_length=1, max_length=32)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    status: GameStatus
    score: int
    tick: int
    tick_interval_ms: int
    ticking: bool
