"""
Relay dispatcher: resolves targets to connections and hands off outbound events
"""

from typing import Any, Dict, Protocol
from .models import now_ms
from .room_manager import RoomManager
from .logger import get_logger

logger = get_logger()


class Channel(Protocol):
    """Outbound send primitive for one connection; must not block"""

    def send(self, event: str, data: Dict[str, Any]) -> bool:
        ...


class RelayDispatcher:
    """Routes relayed events to a room or to a participant alias"""

    def __init__(self, room_manager: RoomManager):
        self._rooms = room_manager
        # connection_id -> Channel
        self._channels: Dict[str, Channel] = {}

    def register(self, connection_id: str, channel: Channel):
        self._channels[connection_id] = channel

    def unregister(self, connection_id: str):
        self._channels.pop(connection_id, None)

    def connection_count(self) -> int:
        return len(self._channels)

    def send_to_connection(self, connection_id: str, event: str, data: Dict[str, Any]) -> bool:
        """
        Send an event to exactly one connection

        Returns:
            True if the frame was handed to a live channel
        """
        channel = self._channels.get(connection_id)
        if channel is None:
            logger.debug(f"No channel for {connection_id}, dropping {event}")
            return False
        return channel.send(event, data)

    async def to_room(self, room: str, event: str, data: Dict[str, Any], sender_id: str) -> int:
        """
        Broadcast to every member of a room except the sending connection

        Returns:
            Number of connections the event was handed to
        """
        recipients = await self._rooms.members_except(room, sender_id)
        return self._deliver(recipients, event, data)

    async def to_peer(self, target: str, event: str, data: Dict[str, Any]) -> int:
        """
        Send to every connection reachable under a participant identifier

        Returns:
            Number of connections the event was handed to
        """
        recipients = await self._rooms.members(target)
        return self._deliver(recipients, event, data)

    def _deliver(self, recipients, event: str, data: Dict[str, Any]) -> int:
        # Resolution and hand-off run without yielding, so concurrent
        # join/leave cannot slip between them
        stamped = dict(data, timestamp=now_ms())
        delivered = 0
        for connection_id in recipients:
            if self.send_to_connection(connection_id, event, stamped):
                delivered += 1
        return delivered
