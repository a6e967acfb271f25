"""
Input validation for inbound signaling events

Every validator is a pure predicate: it returns (is_valid, error_message)
and never raises or logs. Callers decide whether to tell the sender.
"""

import re
from typing import Any, Tuple
from .constants import (
    ROOM_PATTERN,
    MAX_ROOM_NAME_LENGTH,
    MIN_CHAT_LENGTH,
    MAX_CHAT_LENGTH,
    CHAT_INJECTION_PATTERN,
    SDP_TYPES,
    ERROR_MESSAGES
)

_ROOM_RE = re.compile(ROOM_PATTERN)
_INJECTION_RE = re.compile(CHAT_INJECTION_PATTERN, re.IGNORECASE)


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def _utf16_length(text: str) -> int:
    """Length in UTF-16 code units, as browsers count it"""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def validate_room_data(data: Any) -> Tuple[bool, str]:
    """
    Validate a `subscribe` payload

    Args:
        data: Decoded event payload

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(data, dict):
        return False, ERROR_MESSAGES["invalid_room"]

    room = data.get("room")
    if not _is_non_empty_str(room):
        return False, ERROR_MESSAGES["invalid_room"]

    if not _is_non_empty_str(data.get("socketId")):
        return False, ERROR_MESSAGES["invalid_room"]

    if len(room) > MAX_ROOM_NAME_LENGTH or not _ROOM_RE.fullmatch(room):
        return False, ERROR_MESSAGES["invalid_room"]

    return True, ""


def validate_new_user_start(data: Any) -> Tuple[bool, str]:
    """Check the minimal addressing fields of a `newUserStart` payload"""
    if not isinstance(data, dict):
        return False, "Invalid newUserStart data"

    if not _is_non_empty_str(data.get("to")) or not _is_non_empty_str(data.get("sender")):
        return False, "Invalid newUserStart data"

    return True, ""


def validate_sdp_data(data: Any) -> Tuple[bool, str]:
    """
    Validate an `sdp` payload

    Args:
        data: Decoded event payload

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(data, dict):
        return False, "Invalid SDP data"

    if not _is_non_empty_str(data.get("to")) or not _is_non_empty_str(data.get("sender")):
        return False, "Invalid SDP data"

    description = data.get("description")
    if not isinstance(description, dict):
        return False, "Invalid SDP data"

    if description.get("type") not in SDP_TYPES:
        return False, "Invalid SDP type"

    if not _is_non_empty_str(description.get("sdp")):
        return False, "Invalid SDP payload"

    return True, ""


def validate_ice_data(data: Any) -> Tuple[bool, str]:
    """
    Validate an `ice candidates` payload

    A candidate must be present: either an object or an explicit null
    (end-of-candidates). A missing key is not the same as null.

    Args:
        data: Decoded event payload

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(data, dict):
        return False, "Invalid ICE candidate data"

    if not _is_non_empty_str(data.get("to")) or not _is_non_empty_str(data.get("sender")):
        return False, "Invalid ICE candidate data"

    if "candidate" not in data:
        return False, "Missing ICE candidate"

    candidate = data["candidate"]
    if candidate is not None and not isinstance(candidate, dict):
        return False, "Invalid ICE candidate"

    return True, ""


def validate_chat_data(data: Any) -> Tuple[bool, str]:
    """
    Validate a `chat` payload with length and injection checks

    Args:
        data: Decoded event payload

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(data, dict):
        return False, ERROR_MESSAGES["invalid_chat"]

    if not _is_non_empty_str(data.get("room")) or not _is_non_empty_str(data.get("sender")):
        return False, ERROR_MESSAGES["invalid_chat"]

    msg = data.get("msg")
    if not isinstance(msg, str):
        return False, ERROR_MESSAGES["invalid_chat"]

    length = _utf16_length(msg)
    if length < MIN_CHAT_LENGTH or length > MAX_CHAT_LENGTH:
        return False, ERROR_MESSAGES["invalid_chat"]

    # Basic XSS protection
    if _INJECTION_RE.search(msg):
        return False, ERROR_MESSAGES["invalid_chat"]

    return True, ""


def validate_leave_data(data: Any) -> Tuple[bool, str]:
    """Check that a `leaveRoom` payload names a room"""
    if not isinstance(data, dict) or not _is_non_empty_str(data.get("room")):
        return False, "Invalid leaveRoom data"

    return True, ""
