# chatguard/services/connections.py

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from fastapi import WebSocket
from fastapi.websockets import WebSocketState

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """
    What the core needs from a transport session.

    `send` must never block the caller: the broadcaster calls it for every
    member of a room while the room store is being mutated.
    """

    id: str

    def is_open(self) -> bool: ...

    def send(self, payload: str) -> None: ...

    def close(self) -> None: ...


# ============================================================================
# WEBSOCKET CONNECTION
# ============================================================================

class WebSocketConnection:
    """
    Adapts a FastAPI WebSocket to the `Connection` protocol.

    Outbound frames go through a bounded queue drained by a writer task, so
    `send` returns immediately. When the queue is full the frame is dropped:
    a slow reader loses messages instead of stalling the room.

    Lifecycle:
        connection = WebSocketConnection(websocket, "id", queue_size=256)
        connection.start()      # spawn the writer on the running loop
        ...
        connection.close()      # cancel the writer, stop accepting frames
    """

    def __init__(self, websocket: WebSocket, connection_id: str, queue_size: int = 256) -> None:
        self.websocket = websocket
        self.id = connection_id
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self._writer: Optional[asyncio.Task] = None
        self._closed = False

    def start(self) -> None:
        self._writer = asyncio.create_task(self._drain())

    def is_open(self) -> bool:
        if self._closed:
            return False
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    def send(self, payload: str) -> None:
        if self._closed:
            return
        try:
            self._queue.put_nowait(payload)
        except asyncio.QueueFull:
            logger.warning("Outbound queue full for %s, dropping frame", self.id)

    def close(self) -> None:
        """Stop the writer. Synchronous so it is safe inside a cancelled task."""
        self._closed = True
        if self._writer is not None and not self._writer.done():
            self._writer.cancel()

    async def _drain(self) -> None:
        try:
            while True:
                payload = await self._queue.get()
                await self.websocket.send_text(payload)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Send error on %s: %s", self.id, e)
            self._closed = True
