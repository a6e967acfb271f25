"""
Configuration and fixed limits for the signaling relay
"""

import os

# Server settings
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGIN", "*").split(",") if origin.strip()]
SERVICE_NAME = "WebRTC Signaling Relay"
VERSION = "1.0.0"

# Room settings
MAX_ROOM_SIZE = int(os.getenv("MAX_ROOM_SIZE", 10))
MIN_ROOM_SIZE_LIMIT = 2
MAX_ROOM_SIZE_LIMIT = 50

# Per-connection event throttle
RATE_LIMIT_WINDOW_MS = int(os.getenv("RATE_LIMIT_WINDOW_MS", 1000))
RATE_LIMIT_MAX_EVENTS = int(os.getenv("RATE_LIMIT_MAX_EVENTS", 10))

# WebSocket settings (seconds / bytes)
SOCKET_PING_INTERVAL = float(os.getenv("SOCKET_PING_INTERVAL", 25))
SOCKET_PING_TIMEOUT = float(os.getenv("SOCKET_PING_TIMEOUT", 60))
SOCKET_MAX_BUFFER_SIZE = int(os.getenv("SOCKET_MAX_BUFFER_SIZE", 1_000_000))

# Payload limits
MAX_ROOM_NAME_LENGTH = 100
MIN_CHAT_LENGTH = 1
MAX_CHAT_LENGTH = 1000
ROOM_PATTERN = r'^[a-zA-Z0-9_-]+$'
CHAT_INJECTION_PATTERN = r'<script|javascript:|on\w+='
SDP_TYPES = ("offer", "answer")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE")
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 3

# Inbound event names
EVENT_SUBSCRIBE = "subscribe"
EVENT_NEW_USER_START = "newUserStart"
EVENT_SDP = "sdp"
EVENT_ICE_CANDIDATES = "ice candidates"
EVENT_CHAT = "chat"
EVENT_LEAVE_ROOM = "leaveRoom"

# Outbound-only event names
EVENT_CONNECTED = "connected"
EVENT_NEW_USER = "new user"
EVENT_USER_LEFT = "userLeft"
EVENT_ERROR = "error"

# Error messages
ERROR_MESSAGES = {
    "invalid_room": "Invalid room data",
    "room_full": "Room is full. Maximum capacity reached.",
    "rate_limited": "Too many requests. Please slow down.",
    "chat_rate_limited": "Too many messages. Please slow down.",
    "invalid_chat": "Invalid message format",
    "internal": "Internal server error",
    "chat_failed": "Failed to send message",
    "invalid_frame": "Invalid JSON format",
    "frame_too_large": "Message too large",
    "unknown_event": "Unknown event",
}


def validate_config():
    """
    Check configuration values, raising ValueError on the first bad one
    """
    if PORT < 1 or PORT > 65535:
        raise ValueError(f"Invalid port number: {PORT}. Must be between 1 and 65535.")

    if MAX_ROOM_SIZE < MIN_ROOM_SIZE_LIMIT or MAX_ROOM_SIZE > MAX_ROOM_SIZE_LIMIT:
        raise ValueError(
            f"MAX_ROOM_SIZE must be between {MIN_ROOM_SIZE_LIMIT} and {MAX_ROOM_SIZE_LIMIT}, got {MAX_ROOM_SIZE}"
        )

    if RATE_LIMIT_WINDOW_MS < 1:
        raise ValueError("RATE_LIMIT_WINDOW_MS must be greater than 0")

    if RATE_LIMIT_MAX_EVENTS < 1:
        raise ValueError("RATE_LIMIT_MAX_EVENTS must be greater than 0")

    if SOCKET_MAX_BUFFER_SIZE < 1:
        raise ValueError("SOCKET_MAX_BUFFER_SIZE must be greater than 0")

    return True
