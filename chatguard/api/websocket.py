# chatguard/api/websocket.py

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket

from chatguard.core.state import ChatState, get_chat_state
from chatguard.services.connections import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter()

# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/")
@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, chat: ChatState = Depends(get_chat_state)):
    """
    WebSocket endpoint for the chat relay.

    Lifecycle:
    ==========
    1. Connection accepted, assigned an id and a random "unnamed_user<n>" name
    2. Client sends {"type": "join", "roomId": ..., "username": ...}
    3. Client sends "message" / "emoji" events, echoed to the whole room
    4. On disconnect, removed from its room (the room goes away when empty)

    Text and binary frames are both treated as JSON payloads. See
    `EventRouter` for the event formats.
    """
    await websocket.accept()

    connection = WebSocketConnection(
        websocket,
        chat.id_factory(),
        queue_size=chat.settings.SEND_QUEUE_SIZE,
    )
    connection.start()
    chat.open_connection(connection)
    client = websocket.client
    logger.info("Client connected: %s with client ID: %s",
                client.host if client else "unknown", connection.id)

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break

            raw = frame.get("text")
            if raw is None:
                raw = frame.get("bytes")
            if raw is None:
                continue

            chat.router.dispatch(connection, raw)

    except Exception as e:
        logger.exception("WebSocket error on %s: %s", connection.id, e)
    finally:
        # Runs even when the task is cancelled; both calls are synchronous
        connection.close()
        chat.close_connection(connection)
