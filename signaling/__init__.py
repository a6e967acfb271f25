"""
WebRTC Signaling Relay Module
Room membership, per-connection throttling and signaling message relay
"""

from .models import ConnectionSession, RoomJoin, NewUserStart, SdpSignal, IceCandidateSignal, ChatMessage
from .validators import (
    validate_room_data,
    validate_new_user_start,
    validate_sdp_data,
    validate_ice_data,
    validate_chat_data,
    validate_leave_data
)
from .rate_limiter import RateLimiter
from .room_manager import RoomManager
from .dispatcher import RelayDispatcher
from .channel import QueueChannel
from .protocol import encode_frame, decode_frame
from .stream_handler import StreamHandler
from .constants import *
from .logger import (
    get_logger,
    log_security_event,
    log_connection_event,
    log_signaling_event,
    log_system_event
)

__all__ = [
    'ConnectionSession',
    'RoomJoin',
    'NewUserStart',
    'SdpSignal',
    'IceCandidateSignal',
    'ChatMessage',
    'validate_room_data',
    'validate_new_user_start',
    'validate_sdp_data',
    'validate_ice_data',
    'validate_chat_data',
    'validate_leave_data',
    'RateLimiter',
    'RoomManager',
    'RelayDispatcher',
    'QueueChannel',
    'encode_frame',
    'decode_frame',
    'StreamHandler',
    'get_logger',
    'log_security_event',
    'log_connection_event',
    'log_signaling_event',
    'log_system_event'
]
