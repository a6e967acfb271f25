"""
Per-connection, per-event fixed-window rate limiting
"""

import asyncio
from typing import Callable, Dict, Tuple
from .models import RateLimitWindow, now_ms
from .constants import RATE_LIMIT_WINDOW_MS, RATE_LIMIT_MAX_EVENTS


class RateLimiter:
    """Counts events per (connection_id, event) key inside a fixed window"""

    def __init__(self, window_ms: int = RATE_LIMIT_WINDOW_MS, max_events: int = RATE_LIMIT_MAX_EVENTS,
                 clock: Callable[[], float] = now_ms):
        self.window_ms = window_ms
        self.max_events = max_events
        self._clock = clock
        # (connection_id, event) -> RateLimitWindow
        self._windows: Dict[Tuple[str, str], RateLimitWindow] = {}
        self._lock = asyncio.Lock()

    async def admit(self, connection_id: str, event: str) -> bool:
        """
        Record one event and decide whether it may proceed

        Args:
            connection_id: Connection identifier
            event: Inbound event name

        Returns:
            True if admitted, False if the window is exhausted
        """
        async with self._lock:
            key = (connection_id, event)
            now = self._clock()
            window = self._windows.get(key)

            if window is None:
                self._windows[key] = RateLimitWindow(count=1, reset_time=now + self.window_ms)
                return True

            if now > window.reset_time:
                window.count = 1
                window.reset_time = now + self.window_ms
                return True

            # Rejected events do not count
            if window.count >= self.max_events:
                return False

            window.count += 1
            return True

    async def sweep(self, connection_id: str) -> int:
        """
        Drop every window belonging to a connection

        Returns:
            Number of windows removed
        """
        async with self._lock:
            stale = [key for key in self._windows if key[0] == connection_id]
            for key in stale:
                del self._windows[key]
            return len(stale)

    async def window_count(self, connection_id: str = None) -> int:
        async with self._lock:
            if connection_id is None:
                return len(self._windows)
            return sum(1 for key in self._windows if key[0] == connection_id)
