"""
Data models for the signaling relay
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set


def now_ms() -> int:
    """Server clock in milliseconds since epoch"""
    return int(time.time() * 1000)


@dataclass
class RateLimitWindow:
    """Event counter for one (connection, event) key"""
    count: int
    reset_time: float


@dataclass
class ConnectionSession:
    """Per-connection state owned by its stream handler"""
    connection_id: str
    connected_at: int = field(default_factory=now_ms)
    # Every room this connection is a member of, aliases included
    rooms: Set[str] = field(default_factory=set)
    # Participant identifiers this connection is reachable under
    aliases: Set[str] = field(default_factory=set)
    disconnected: bool = False

    def joined(self, room: str, alias: bool = False):
        self.rooms.add(room)
        if alias:
            self.aliases.add(room)
        else:
            self.aliases.discard(room)

    def left(self, room: str):
        self.rooms.discard(room)
        self.aliases.discard(room)

    def shared_rooms(self) -> Set[str]:
        """Rooms whose other members should hear about this connection leaving"""
        return self.rooms - self.aliases

    def duration_ms(self) -> int:
        return now_ms() - self.connected_at


@dataclass(frozen=True)
class RoomJoin:
    """Validated `subscribe` payload"""
    room: str
    socket_id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoomJoin":
        return cls(room=data["room"], socket_id=data["socketId"])


@dataclass(frozen=True)
class NewUserStart:
    """Validated `newUserStart` payload"""
    to: str
    sender: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewUserStart":
        return cls(to=data["to"], sender=data["sender"])

    def to_dict(self) -> Dict[str, Any]:
        return {"sender": self.sender}


@dataclass(frozen=True)
class SdpSignal:
    """Validated `sdp` payload; description is forwarded untouched"""
    to: str
    sender: str
    description: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SdpSignal":
        return cls(to=data["to"], sender=data["sender"], description=data["description"])

    @property
    def kind(self) -> str:
        return self.description["type"]

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "sender": self.sender}


@dataclass(frozen=True)
class IceCandidateSignal:
    """Validated `ice candidates` payload; a None candidate marks end-of-candidates"""
    to: str
    sender: str
    candidate: Optional[Dict[str, Any]]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IceCandidateSignal":
        return cls(to=data["to"], sender=data["sender"], candidate=data["candidate"])

    @property
    def end_of_candidates(self) -> bool:
        return self.candidate is None

    def to_dict(self) -> Dict[str, Any]:
        return {"candidate": self.candidate, "sender": self.sender}


@dataclass(frozen=True)
class ChatMessage:
    """Validated `chat` payload"""
    room: str
    sender: str
    msg: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        return cls(room=data["room"], sender=data["sender"], msg=data["msg"])

    def to_dict(self) -> Dict[str, Any]:
        return {"sender": self.sender, "msg": self.msg}
