"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_engine.server.session_manager import SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send key presses, receive game state each tick.

    Text messages are JSON objects, either ``{"direction": "ArrowUp"}`` or
    ``{"action": "reset"}``. Anything else, binary frames included, is
    ignored.
    """
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    session.sockets.append(websocket)
    logger.info("Player connected to session %s.", session_id)

    # Send initial state snapshot so the client can draw immediately.
    async with session.lock:
        state = session.engine.get_state()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                # Binary frames carry no key presses.
                continue
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            if msg.get("action") == "reset":
                await manager.reset(session_id)
                continue

            token = msg.get("direction")
            if isinstance(token, str):
                await manager.queue_direction(session_id, token)
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    except KeyError:
        # Session was deleted while the socket was open.
        logger.info("Session %s went away under an open socket.", session_id)
    finally:
        if websocket in session.sockets:
            session.sockets.remove(websocket)
