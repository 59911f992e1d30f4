"""REST API route handlers for session lifecycle and input."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from snake_engine.server.models import (
    CreateSessionRequest,
    DirectionRequest,
    SessionSummary,
)
from snake_engine.server.session_manager import SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new game and optionally start its tick loop."""
    manager = _get_manager(request)
    try:
        session = manager.create_session(
            width=body.width,
            height=body.height,
            tick_interval_ms=body.tick_interval_ms,
            seed=body.seed,
            autostart=body.autostart,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the current game snapshot."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    async with session.lock:
        state = session.engine.get_state()
    result = session.summary().model_dump(mode="json")
    result["state"] = state
    return result


@router.post("/{session_id}/direction", status_code=202)
async def queue_direction(
    session_id: str, body: DirectionRequest, request: Request,
) -> dict:
    """Buffer a direction change for the next tick."""
    try:
        await _get_manager(request).queue_direction(session_id, body.direction)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "queued"}


@router.post("/{session_id}/tick")
async def tick_session(session_id: str, request: Request) -> dict:
    """Advance the game one step by hand."""
    try:
        return await _get_manager(request).step(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{session_id}/reset")
async def reset_session(session_id: str, request: Request) -> dict:
    try:
        return await _get_manager(request).reset(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    try:
        await _get_manager(request).remove_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
