import pytest
from fastapi.testclient import TestClient

from main import app
from signaling import ERROR_MESSAGES


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _open(ws):
    """Consume the greeting and return the connection id"""
    frame = ws.receive_json()
    assert frame["event"] == "connected"
    return frame["data"]["socketId"]


def _emit(ws, event, data):
    ws.send_json({"event": event, "data": data})


def _barrier(ws):
    """Round trip proving every earlier frame from this socket was handled"""
    _emit(ws, "ping", {})
    assert ws.receive_json() == {"event": "error", "data": {"message": ERROR_MESSAGES["unknown_event"]}}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_status_counts_connections(client):
    with client.websocket_connect("/stream") as ws:
        _open(ws)
        _emit(ws, "subscribe", {"room": "status-room", "socketId": "status-peer"})
        _barrier(ws)

        body = client.get("/api/status").json()

        assert body["status"] == "operational"
        assert body["active_connections"] >= 1
        assert body["rooms"] >= 2


def test_newcomer_is_announced_to_existing_member(client):
    with client.websocket_connect("/stream") as ws_a, client.websocket_connect("/stream") as ws_b:
        _open(ws_a)
        _open(ws_b)

        _emit(ws_a, "subscribe", {"room": "main-r1", "socketId": "main-A"})
        _barrier(ws_a)
        _emit(ws_b, "subscribe", {"room": "main-r1", "socketId": "main-B"})

        frame = ws_a.receive_json()
        assert frame["event"] == "new user"
        assert frame["data"]["socketId"] == "main-B"
        assert isinstance(frame["data"]["timestamp"], int)


def test_offer_and_null_candidate_reach_target(client):
    with client.websocket_connect("/stream") as ws_a, client.websocket_connect("/stream") as ws_b:
        _open(ws_a)
        _open(ws_b)
        _emit(ws_b, "subscribe", {"room": "main-r2", "socketId": "main-B2"})
        _barrier(ws_b)

        description = {"type": "offer", "sdp": "v=0\r\ns=-\r\n"}
        _emit(ws_a, "sdp", {"to": "main-B2", "sender": "main-A2", "description": description})
        _emit(ws_a, "ice candidates", {"to": "main-B2", "sender": "main-A2", "candidate": None})

        sdp = ws_b.receive_json()
        assert sdp["event"] == "sdp"
        assert sdp["data"]["description"] == description
        assert sdp["data"]["sender"] == "main-A2"

        ice = ws_b.receive_json()
        assert ice["event"] == "ice candidates"
        assert "candidate" in ice["data"]
        assert ice["data"]["candidate"] is None


def test_script_chat_is_rejected_and_not_broadcast(client):
    with client.websocket_connect("/stream") as ws_a, client.websocket_connect("/stream") as ws_b:
        _open(ws_a)
        _open(ws_b)
        _emit(ws_a, "subscribe", {"room": "main-r3", "socketId": "main-A3"})
        _barrier(ws_a)
        _emit(ws_b, "subscribe", {"room": "main-r3", "socketId": "main-B3"})
        _barrier(ws_b)
        assert ws_a.receive_json()["event"] == "new user"

        _emit(ws_a, "chat", {"room": "main-r3", "sender": "main-A3", "msg": "<script>alert(1)</script>"})
        assert ws_a.receive_json() == {"event": "error", "data": {"message": ERROR_MESSAGES["invalid_chat"]}}

        _emit(ws_a, "chat", {"room": "main-r3", "sender": "main-A3", "msg": "plain hello"})
        frame = ws_b.receive_json()
        assert frame["event"] == "chat"
        assert frame["data"]["msg"] == "plain hello"


def test_malformed_frame_keeps_connection_open(client):
    with client.websocket_connect("/stream") as ws:
        _open(ws)

        ws.send_text("{broken")
        assert ws.receive_json() == {"event": "error", "data": {"message": ERROR_MESSAGES["invalid_frame"]}}

        _barrier(ws)


def test_disconnect_notifies_room(client):
    with client.websocket_connect("/stream") as ws_a:
        _open(ws_a)
        _emit(ws_a, "subscribe", {"room": "main-r4", "socketId": "main-A4"})
        _barrier(ws_a)

        with client.websocket_connect("/stream") as ws_b:
            b_id = _open(ws_b)
            _emit(ws_b, "subscribe", {"room": "main-r4", "socketId": "main-B4"})
            assert ws_a.receive_json()["event"] == "new user"

        frame = ws_a.receive_json()
        assert frame["event"] == "userLeft"
        assert frame["data"]["socketId"] == b_id
