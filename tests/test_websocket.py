"""WebSocket integration tests for real-time play."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from snake_engine.server.app import create_app
from snake_engine.server.session_manager import SessionManager
from snake_engine.snake import Direction


@pytest.fixture()
def tc():
    """Starlette sync TestClient for REST calls and WebSocket connections."""
    application = create_app()
    application.state.session_manager = SessionManager()
    return TestClient(application)


def _create_session(tc) -> str:
    resp = tc.post(
        "/sessions",
        json={"width": 10, "height": 10, "seed": 0, "autostart": False},
    )
    assert resp.status_code == 201
    return resp.json()["session_id"]


class TestPlayWebSocket:
    def test_connect_and_receive_initial_state(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            state = json.loads(ws.receive_text())
            assert state["tick"] == 0
            assert state["status"] == "running"
            assert state["snake"] == [[5, 3], [4, 3], [3, 3]]
            assert state["food"] is not None

    def test_direction_is_buffered(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"direction": "ArrowDown"}))

        session = tc.app.state.session_manager.get_session(session_id)
        assert session.engine.pending_direction == Direction.DOWN

    def test_reset_action_pushes_state(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"action": "reset"}))
            state = json.loads(ws.receive_text())
            assert state["tick"] == 0
            assert state["score"] == 0
            assert state["status"] == "running"

    def test_nonexistent_session_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/sessions/nonexistent/play",
        ):
            pass


class TestDisconnectHandling:
    def test_invalid_messages_ignored(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text("not-json")
            ws.send_text("[]")
            ws.send_text("123")
            ws.send_text(json.dumps({"direction": "invalid_dir"}))
            ws.send_text(json.dumps({"direction": 5}))
            ws.send_text(json.dumps({"no_direction_key": True}))

        session = tc.app.state.session_manager.get_session(session_id)
        assert session.engine.pending_direction is None

    def test_binary_frames_ignored(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_bytes(b"\x00\x01")
            ws.send_text(json.dumps({"direction": "ArrowUp"}))

        session = tc.app.state.session_manager.get_session(session_id)
        assert session.engine.pending_direction == Direction.UP
        assert session.sockets == []

    def test_socket_removed_after_disconnect(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()

        session = tc.app.state.session_manager.get_session(session_id)
        assert session.sockets == []
