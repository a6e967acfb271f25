"""
WebRTC Signaling Client Example for Testing
Joins a room, prints relayed events and can send chat or scripted signaling
"""

import asyncio
import json
import websockets
import time
from typing import Any, Dict, Optional
import argparse
import sys

from signaling.protocol import encode_frame


class SignalingClient:
    """Minimal signaling client speaking the relay's event protocol"""

    def __init__(self, room: str, peer_id: str, server_url: str = "ws://localhost:3000/stream"):
        self.room = room
        self.peer_id = peer_id
        self.server_url = server_url
        self.websocket: Optional[Any] = None
        self.connection_id: Optional[str] = None
        self.running = False

    async def connect(self) -> bool:
        """Connect and wait for the server to announce our connection id"""
        try:
            self.websocket = await websockets.connect(self.server_url)
            frame = json.loads(await self.websocket.recv())
            if frame.get("event") == "connected":
                self.connection_id = frame["data"]["socketId"]
            print(f"✅ Connected to {self.server_url} as {self.connection_id}")
            return True
        except Exception as e:
            print(f"❌ Connection failed: {e}")
            return False

    async def emit(self, event: str, data: Dict[str, Any]) -> bool:
        """Send one event frame"""
        if not self.websocket:
            return False

        try:
            await self.websocket.send(encode_frame(event, data))
            return True
        except Exception as e:
            print(f"❌ Send failed: {e}")
            return False

    async def subscribe(self) -> bool:
        print(f"📤 Joining room {self.room} as {self.peer_id}")
        return await self.emit("subscribe", {"room": self.room, "socketId": self.peer_id})

    async def send_chat(self, msg: str) -> bool:
        return await self.emit("chat", {"room": self.room, "sender": self.peer_id, "msg": msg})

    async def start_negotiation(self, target: str) -> bool:
        return await self.emit("newUserStart", {"to": target, "sender": self.peer_id})

    async def send_sdp(self, target: str, description: Dict[str, str]) -> bool:
        return await self.emit("sdp", {"to": target, "sender": self.peer_id, "description": description})

    async def send_candidate(self, target: str, candidate: Optional[Dict[str, Any]]) -> bool:
        return await self.emit("ice candidates", {"to": target, "sender": self.peer_id, "candidate": candidate})

    async def leave_room(self) -> bool:
        return await self.emit("leaveRoom", {"room": self.room})

    def describe(self, frame: Dict[str, Any]) -> str:
        """Render a received frame as one console line"""
        event = frame.get("event")
        data = frame.get("data") or {}
        stamp = data.get("timestamp")
        clock = time.strftime('%H:%M:%S', time.localtime(stamp / 1000)) if stamp else "--:--:--"

        if event == "chat":
            return f"📨 [{clock}] {data.get('sender')}: {data.get('msg')}"
        if event == "new user":
            return f"👋 [{clock}] {data.get('socketId')} joined"
        if event == "userLeft":
            return f"🚪 [{clock}] {data.get('socketId')} left"
        if event == "newUserStart":
            return f"🤝 [{clock}] {data.get('sender')} wants to negotiate"
        if event == "sdp":
            description = data.get("description") or {}
            return f"📡 [{clock}] {description.get('type')} from {data.get('sender')}"
        if event == "ice candidates":
            if data.get("candidate") is None:
                return f"🧊 [{clock}] end of candidates from {data.get('sender')}"
            return f"🧊 [{clock}] candidate from {data.get('sender')}"
        if event == "error":
            return f"❌ Server error: {data.get('message', 'Unknown error')}"
        return f"❓ Unknown event: {event}"

    async def listen(self):
        """Print incoming events until stopped"""
        if not self.websocket:
            return

        while self.running:
            try:
                raw = await asyncio.wait_for(self.websocket.recv(), timeout=1.0)
                print(self.describe(json.loads(raw)))
            except asyncio.TimeoutError:
                continue
            except websockets.exceptions.ConnectionClosed:
                print("🔌 Connection closed by server")
                break

    async def disconnect(self):
        """Disconnect from server"""
        self.running = False
        if self.websocket:
            await self.websocket.close()
            print("🔌 Disconnected from server")

    async def run_interactive(self):
        """Interactive chat session"""
        if not await self.connect():
            return

        await self.subscribe()
        self.running = True
        listen_task = asyncio.create_task(self.listen())

        try:
            print("\n🎮 Interactive mode started!")
            print("Commands: /leave, /quit, or just type your message")
            print("-" * 50)

            while self.running:
                try:
                    user_input = (await asyncio.to_thread(input, f"{self.peer_id}> ")).strip()
                except (KeyboardInterrupt, EOFError):
                    break

                if not user_input:
                    continue
                if user_input == "/quit":
                    break
                elif user_input == "/leave":
                    await self.leave_room()
                else:
                    await self.send_chat(user_input)

        finally:
            self.running = False
            listen_task.cancel()
            await self.disconnect()


async def negotiation_scenario(server_url: str, room: str):
    """Two peers join a room and walk through offer, answer and candidates"""
    print("\n🧪 Scenario: offer/answer negotiation")
    print("=" * 60)

    alice = SignalingClient(room, "alice", server_url)
    bob = SignalingClient(room, "bob", server_url)

    if not (await alice.connect() and await bob.connect()):
        return

    alice.running = bob.running = True
    listeners = [asyncio.create_task(alice.listen()), asyncio.create_task(bob.listen())]

    await alice.subscribe()
    await asyncio.sleep(0.2)
    await bob.subscribe()
    await asyncio.sleep(0.2)

    await alice.start_negotiation("bob")
    await alice.send_sdp("bob", {"type": "offer", "sdp": "v=0\r\no=alice 1 1 IN IP4 0.0.0.0\r\n"})
    await bob.send_sdp("alice", {"type": "answer", "sdp": "v=0\r\no=bob 1 1 IN IP4 0.0.0.0\r\n"})
    await alice.send_candidate("bob", {"candidate": "candidate:1 1 udp 2122260223 10.0.0.1 9 typ host"})
    await alice.send_candidate("bob", None)
    await bob.send_chat("Hi Alice!")

    await asyncio.sleep(1)
    for task in listeners:
        task.cancel()
    await alice.disconnect()
    await bob.disconnect()
    print("✅ Scenario completed")


async def main():
    """Main function with command line interface"""
    parser = argparse.ArgumentParser(description="WebRTC Signaling Client")
    parser.add_argument("--room", default="general", help="Room to join")
    parser.add_argument("--peer-id", default="testuser", help="Participant identifier")
    parser.add_argument("--server", default="ws://localhost:3000/stream", help="Server URL")
    parser.add_argument("--scenario", action="store_true", help="Run the scripted negotiation scenario")

    args = parser.parse_args()

    if args.scenario:
        await negotiation_scenario(args.server, args.room)
    else:
        client = SignalingClient(args.room, args.peer_id, args.server)
        await client.run_interactive()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Client error: {e}")
        sys.exit(1)
