"""
Outbound per-connection channel backed by a queue and a writer task
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional
from .protocol import encode_frame
from .logger import get_logger

logger = get_logger()


class QueueChannel:
    """
    Non-blocking send primitive for one connection

    `send` only enqueues, so a sender never waits on a slow recipient and
    every recipient sees frames in the order they were enqueued. A writer
    task drains the queue into the transport.
    """

    def __init__(self, connection_id: str, send_text: Callable[[str], Awaitable[Any]]):
        self.connection_id = connection_id
        self._send_text = send_text
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self._writer: Optional[asyncio.Task] = None
        self.closed = False

    def start(self):
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain())

    def send(self, event: str, data: Dict[str, Any]) -> bool:
        if self.closed:
            return False
        self._queue.put_nowait(encode_frame(event, data))
        return True

    async def _drain(self):
        while True:
            frame = await self._queue.get()
            if frame is None:
                break
            try:
                await self._send_text(frame)
            except Exception as e:
                logger.error(f"Failed to send frame to {self.connection_id}: {e}")
                self.closed = True
                break

    async def close(self, flush: bool = False):
        """
        Stop the writer task

        Args:
            flush: Deliver frames already queued before stopping
        """
        self.closed = True
        if self._writer is None:
            return

        if flush:
            self._queue.put_nowait(None)
            await self._writer
        else:
            self._writer.cancel()
            try:
                await self._writer
            except asyncio.CancelledError:
                pass
        self._writer = None
