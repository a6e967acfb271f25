"""
Per-connection event handling for the signaling relay

Each inbound event passes rate limiting and validation before touching the
room registry or being relayed. Any unexpected fault inside a handler is
logged and contained so the connection keeps processing later events.
"""

from typing import Any, Awaitable, Callable, Dict, Optional
from .constants import (
    ERROR_MESSAGES,
    EVENT_SUBSCRIBE,
    EVENT_NEW_USER_START,
    EVENT_SDP,
    EVENT_ICE_CANDIDATES,
    EVENT_CHAT,
    EVENT_LEAVE_ROOM,
    EVENT_CONNECTED,
    EVENT_NEW_USER,
    EVENT_USER_LEFT,
    EVENT_ERROR
)
from .models import (
    ConnectionSession,
    RoomJoin,
    NewUserStart,
    SdpSignal,
    IceCandidateSignal,
    ChatMessage
)
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
from .logger import get_logger, log_security_event, log_connection_event, log_signaling_event

logger = get_logger()

# Error sent to the caller when a handler fails unexpectedly; handlers not
# listed here fail silently towards the client
FAULT_MESSAGES = {
    EVENT_SUBSCRIBE: ERROR_MESSAGES["internal"],
    EVENT_CHAT: ERROR_MESSAGES["chat_failed"],
}


class StreamHandler:
    """Event handlers bound to one connection"""

    def __init__(self, connection_id: str, room_manager: RoomManager,
                 rate_limiter: RateLimiter, dispatcher: RelayDispatcher):
        self.session = ConnectionSession(connection_id=connection_id)
        self._rooms = room_manager
        self._limiter = rate_limiter
        self._dispatcher = dispatcher
        self._handlers: Dict[str, Callable[[Any], Awaitable[None]]] = {
            EVENT_SUBSCRIBE: self.on_subscribe,
            EVENT_NEW_USER_START: self.on_new_user_start,
            EVENT_SDP: self.on_sdp,
            EVENT_ICE_CANDIDATES: self.on_ice_candidates,
            EVENT_CHAT: self.on_chat,
            EVENT_LEAVE_ROOM: self.on_leave_room,
        }

    @property
    def connection_id(self) -> str:
        return self.session.connection_id

    def connect(self):
        """Announce the connection identifier to the client"""
        log_connection_event(self.connection_id, "connect")
        self._emit(EVENT_CONNECTED, {
            "socketId": self.connection_id,
            "timestamp": self.session.connected_at
        })

    def _emit(self, event: str, data: Dict[str, Any]):
        self._dispatcher.send_to_connection(self.connection_id, event, data)

    def _emit_error(self, message: str):
        self._emit(EVENT_ERROR, {"message": message})

    async def handle(self, event: str, data: Any):
        """
        Run the handler for one inbound event

        Args:
            event: Inbound event name
            data: Decoded event payload
        """
        if self.session.disconnected:
            return

        handler = self._handlers.get(event)
        if handler is None:
            log_security_event("unknown_event", {"conn": self.connection_id, "event": event})
            self._emit_error(ERROR_MESSAGES["unknown_event"])
            return

        try:
            await handler(data)
        except Exception as e:
            logger.error(
                f"Error in {event} handler | conn={self.connection_id} | error={e}",
                exc_info=True
            )
            fault_message = FAULT_MESSAGES.get(event)
            if fault_message:
                self._emit_error(fault_message)

    async def on_subscribe(self, data: Any):
        if not await self._limiter.admit(self.connection_id, EVENT_SUBSCRIBE):
            log_security_event("rate_limited", {"conn": self.connection_id, "event": EVENT_SUBSCRIBE})
            self._emit_error(ERROR_MESSAGES["rate_limited"])
            return

        is_valid, error_msg = validate_room_data(data)
        if not is_valid:
            log_security_event("invalid_room_data", {"conn": self.connection_id, "data": data})
            self._emit_error(error_msg)
            return

        join = RoomJoin.from_dict(data)

        # Reachable for direct signaling under the participant identifier
        success, room_size, error_msg = await self._rooms.join(self.connection_id, join.room,
                                                               alias=join.socket_id)
        if not success:
            self._emit_error(error_msg)
            return
        self.session.joined(join.room)

        if join.socket_id != join.room:
            self.session.joined(join.socket_id, alias=True)

        log_connection_event(self.connection_id, "join", {
            "room": join.room,
            "participant": join.socket_id,
            "room_size": room_size
        })

        await self._dispatcher.to_room(join.room, EVENT_NEW_USER, {"socketId": join.socket_id},
                                       self.connection_id)

    async def on_new_user_start(self, data: Any):
        if not await self._limiter.admit(self.connection_id, EVENT_NEW_USER_START):
            log_security_event("rate_limited", {"conn": self.connection_id, "event": EVENT_NEW_USER_START})
            return

        is_valid, _ = validate_new_user_start(data)
        if not is_valid:
            log_security_event("invalid_new_user_start", {"conn": self.connection_id, "data": data})
            return

        signal = NewUserStart.from_dict(data)
        log_signaling_event(EVENT_NEW_USER_START, self.connection_id, {
            "target": signal.to,
            "sender": signal.sender
        })
        await self._dispatcher.to_peer(signal.to, EVENT_NEW_USER_START, signal.to_dict())

    async def on_sdp(self, data: Any):
        if not await self._limiter.admit(self.connection_id, EVENT_SDP):
            log_security_event("rate_limited", {"conn": self.connection_id, "event": EVENT_SDP})
            return

        is_valid, error_msg = validate_sdp_data(data)
        if not is_valid:
            log_security_event("invalid_sdp_data", {"conn": self.connection_id, "reason": error_msg})
            return

        signal = SdpSignal.from_dict(data)
        log_signaling_event(EVENT_SDP, self.connection_id, {
            "type": signal.kind,
            "target": signal.to,
            "sender": signal.sender
        })
        await self._dispatcher.to_peer(signal.to, EVENT_SDP, signal.to_dict())

    async def on_ice_candidates(self, data: Any):
        if not await self._limiter.admit(self.connection_id, EVENT_ICE_CANDIDATES):
            log_security_event("rate_limited", {"conn": self.connection_id, "event": EVENT_ICE_CANDIDATES})
            return

        is_valid, error_msg = validate_ice_data(data)
        if not is_valid:
            log_security_event("invalid_ice_data", {"conn": self.connection_id, "reason": error_msg})
            return

        signal = IceCandidateSignal.from_dict(data)
        log_signaling_event(EVENT_ICE_CANDIDATES, self.connection_id, {
            "target": signal.to,
            "sender": signal.sender,
            "end_of_candidates": signal.end_of_candidates
        })
        await self._dispatcher.to_peer(signal.to, EVENT_ICE_CANDIDATES, signal.to_dict())

    async def on_chat(self, data: Any):
        if not await self._limiter.admit(self.connection_id, EVENT_CHAT):
            log_security_event("rate_limited", {"conn": self.connection_id, "event": EVENT_CHAT})
            self._emit_error(ERROR_MESSAGES["chat_rate_limited"])
            return

        is_valid, error_msg = validate_chat_data(data)
        if not is_valid:
            log_security_event("invalid_chat_data", {"conn": self.connection_id})
            self._emit_error(error_msg)
            return

        message = ChatMessage.from_dict(data)
        log_signaling_event(EVENT_CHAT, self.connection_id, {
            "room": message.room,
            "sender": message.sender,
            "length": len(message.msg)
        })
        await self._dispatcher.to_room(message.room, EVENT_CHAT, message.to_dict(), self.connection_id)

    async def on_leave_room(self, data: Any):
        is_valid, _ = validate_leave_data(data)
        if not is_valid:
            logger.debug(f"Ignoring leaveRoom without room | conn={self.connection_id}")
            return

        room = data["room"]
        await self._rooms.leave(self.connection_id, room)
        self.session.left(room)

        await self._dispatcher.to_room(room, EVENT_USER_LEFT, {"socketId": self.connection_id},
                                       self.connection_id)
        log_connection_event(self.connection_id, "leave", {"room": room})

    async def disconnect(self, reason: Optional[str] = None):
        """
        Release everything held for this connection and tell its rooms

        Safe to call more than once; only the first call has an effect.
        """
        if self.session.disconnected:
            return
        self.session.disconnected = True

        try:
            await self._limiter.sweep(self.connection_id)

            notify = self.session.shared_rooms()
            # An alias shared with other connections is a regular room
            for alias in self.session.aliases:
                if await self._rooms.members_except(alias, self.connection_id):
                    notify.add(alias)

            await self._rooms.leave_all(self.connection_id)
            self.session.rooms.clear()
            self.session.aliases.clear()

            for room in sorted(notify):
                await self._dispatcher.to_room(room, EVENT_USER_LEFT, {"socketId": self.connection_id},
                                               self.connection_id)
        except Exception as e:
            logger.error(
                f"Error in disconnect handler | conn={self.connection_id} | error={e}",
                exc_info=True
            )

        log_connection_event(self.connection_id, "disconnect", {
            "reason": reason or "unknown",
            "duration_ms": self.session.duration_ms()
        })
