"""
Room membership registry with capacity limits
"""

import asyncio
from typing import Dict, List, Optional, Set, Tuple
from .constants import MAX_ROOM_SIZE, ERROR_MESSAGES
from .logger import get_logger, log_security_event

logger = get_logger()


class RoomManager:
    """
    Authoritative room -> member connection mapping

    A room exists only while it has members; the entry is discarded as soon
    as its last member leaves. The registry holds connection identifiers
    only and never owns connection state.
    """

    def __init__(self, max_room_size: int = MAX_ROOM_SIZE):
        self.max_room_size = max_room_size
        # Room -> {connection_id}
        self._rooms: Dict[str, Set[str]] = {}
        self._lock = asyncio.Lock()

    async def join(self, connection_id: str, room: str, alias: Optional[str] = None) -> Tuple[bool, int, str]:
        """
        Add a connection to a room, and optionally to its participant alias

        Both memberships are capacity checked before either is added, so a
        full alias rejects the whole join. A full room rejects even a
        connection that is already a member.

        Args:
            connection_id: Connection identifier
            room: Room name
            alias: Participant identifier the connection becomes reachable under

        Returns:
            Tuple of (success, room_size, error_message)
        """
        async with self._lock:
            targets = [room] if alias is None or alias == room else [room, alias]

            for target in targets:
                current_size = len(self._rooms.get(target, ()))
                if current_size >= self.max_room_size:
                    log_security_event("room_full", {
                        "conn": connection_id,
                        "room": target,
                        "current_size": current_size,
                        "max_room_size": self.max_room_size
                    })
                    return False, len(self._rooms.get(room, ())), ERROR_MESSAGES["room_full"]

            for target in targets:
                self._rooms.setdefault(target, set()).add(connection_id)

            return True, len(self._rooms[room]), ""

    async def leave(self, connection_id: str, room: str) -> bool:
        """
        Remove a connection from a room

        Returns:
            True if the connection was a member, False otherwise
        """
        async with self._lock:
            return self._discard(connection_id, room)

    async def leave_all(self, connection_id: str) -> List[str]:
        """
        Remove a connection from every room it belongs to

        Returns:
            Rooms the connection was removed from
        """
        async with self._lock:
            rooms = [room for room, members in self._rooms.items() if connection_id in members]
            for room in rooms:
                self._discard(connection_id, room)
            return rooms

    def _discard(self, connection_id: str, room: str) -> bool:
        members = self._rooms.get(room)
        if not members or connection_id not in members:
            return False

        members.discard(connection_id)
        if not members:
            del self._rooms[room]
            logger.debug(f"Room discarded: {room} (empty)")
        return True

    async def members_except(self, room: str, connection_id: str) -> List[str]:
        """Members of a room other than the given connection"""
        async with self._lock:
            return [member for member in self._rooms.get(room, ()) if member != connection_id]

    async def members(self, room: str) -> List[str]:
        async with self._lock:
            return list(self._rooms.get(room, ()))

    async def size(self, room: str) -> int:
        """Member count, 0 for unknown rooms"""
        async with self._lock:
            return len(self._rooms.get(room, ()))

    async def is_member(self, connection_id: str, room: str) -> bool:
        async with self._lock:
            return connection_id in self._rooms.get(room, ())

    async def rooms_of(self, connection_id: str) -> List[str]:
        async with self._lock:
            return [room for room, members in self._rooms.items() if connection_id in members]

    async def room_count(self) -> int:
        async with self._lock:
            return len(self._rooms)
