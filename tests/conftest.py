import pytest

from signaling import RateLimiter, RoomManager, RelayDispatcher, StreamHandler


class RecordingChannel:
    """Channel double that keeps every frame handed to it"""

    def __init__(self):
        self.frames = []

    def send(self, event, data):
        self.frames.append((event, data))
        return True

    def events(self, name=None):
        return [data for event, data in self.frames if name is None or event == name]


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class Relay:
    """Wires the relay components together with recording channels"""

    def __init__(self, max_room_size=10, clock=None):
        self.clock = clock or FakeClock()
        self.rooms = RoomManager(max_room_size=max_room_size)
        self.limiter = RateLimiter(window_ms=1000, max_events=10, clock=self.clock)
        self.dispatcher = RelayDispatcher(self.rooms)
        self.channels = {}

    def connect(self, connection_id):
        channel = RecordingChannel()
        self.channels[connection_id] = channel
        self.dispatcher.register(connection_id, channel)
        handler = StreamHandler(connection_id, self.rooms, self.limiter, self.dispatcher)
        handler.connect()
        return handler


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def relay():
    return Relay()


@pytest.fixture
def make_channel():
    return RecordingChannel


@pytest.fixture
def make_relay():
    return Relay
