"""
JSON framing for events carried over the WebSocket transport

Every frame is a JSON object: {"event": <name>, "data": <payload>}
"""

import json
from typing import Any, Dict, Tuple
from .constants import ERROR_MESSAGES, SOCKET_MAX_BUFFER_SIZE


def encode_frame(event: str, data: Dict[str, Any]) -> str:
    return json.dumps({"event": event, "data": data})


def decode_frame(raw: str, max_size: int = SOCKET_MAX_BUFFER_SIZE) -> Tuple[bool, str, Any, str]:
    """
    Decode one inbound text frame

    Args:
        raw: Frame text as received
        max_size: Largest accepted frame in bytes

    Returns:
        Tuple of (is_valid, event, data, error_message)
    """
    if len(raw.encode("utf-8")) > max_size:
        return False, "", None, ERROR_MESSAGES["frame_too_large"]

    try:
        frame = json.loads(raw)
    except json.JSONDecodeError:
        return False, "", None, ERROR_MESSAGES["invalid_frame"]

    if not isinstance(frame, dict):
        return False, "", None, ERROR_MESSAGES["invalid_frame"]

    event = frame.get("event")
    if not isinstance(event, str) or not event:
        return False, "", None, ERROR_MESSAGES["invalid_frame"]

    return True, event, frame.get("data"), ""
