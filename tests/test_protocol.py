import json

from signaling import encode_frame, decode_frame, ERROR_MESSAGES


def test_encode_wraps_event_and_data():
    assert json.loads(encode_frame("chat", {"msg": "hi"})) == {"event": "chat", "data": {"msg": "hi"}}


def test_decode_valid_frame():
    raw = json.dumps({"event": "ice candidates", "data": {"to": "B", "sender": "A", "candidate": None}})

    is_valid, event, data, error_msg = decode_frame(raw)

    assert is_valid
    assert event == "ice candidates"
    assert data == {"to": "B", "sender": "A", "candidate": None}
    assert error_msg == ""


def test_decode_rejects_broken_json():
    assert decode_frame("{not json") == (False, "", None, ERROR_MESSAGES["invalid_frame"])


def test_decode_rejects_frames_without_event():
    assert not decode_frame(json.dumps(["subscribe", {}]))[0]
    assert not decode_frame(json.dumps({"data": {}}))[0]
    assert not decode_frame(json.dumps({"event": 7}))[0]


def test_decode_rejects_oversized_frame():
    raw = json.dumps({"event": "chat", "data": {"msg": "x" * 200}})

    assert decode_frame(raw, max_size=100) == (False, "", None, ERROR_MESSAGES["frame_too_large"])


def test_missing_data_decodes_as_none():
    is_valid, event, data, _ = decode_frame(json.dumps({"event": "leaveRoom"}))

    assert is_valid
    assert event == "leaveRoom"
    assert data is None
