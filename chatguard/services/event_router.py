# chatguard/services/event_router.py

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Union

from pydantic import ValidationError

from chatguard.models.models import EventType, InboundEvent, UserEmoji, UserText
from chatguard.services.connection_registry import ConnectionRegistry
from chatguard.services.connections import Connection
from chatguard.services.room_manager import RoomManager

logger = logging.getLogger(__name__)


class EventRouter:
    """
    Decodes inbound frames and dispatches them by their `type`.

    Protocol:
    =========

    Client -> Server:
    -----------------
    Join Room:
        {"type": "join", "roomId": "lobby", "username": "alice"}
        Broadcast (existing room only): {"type": "join", "message": {...}}

    Text Message:
        {"type": "message", "sender": {...}, "str": "hi", "style": {...}}
        Broadcast: {"type": "message", "message": {"sender": ..., "str": ..., "style": ...}}

    Emoji:
        {"type": "emoji", "sender": {...}, "emoji": "🎉", "style": {...}}
        Broadcast: {"type": "emoji", "message": {"sender": ..., "emoji": ..., "style": ...}}

    Nothing is ever sent back on errors. Malformed frames, unknown types, and
    messages from connections that are not in a room are dropped.
    """

    def __init__(self, registry: ConnectionRegistry, room_manager: RoomManager) -> None:
        self.registry = registry
        self.room_manager = room_manager
        self.message_count = 0
        self._handlers: Dict[str, Callable[[Connection, InboundEvent], bool]] = {
            EventType.JOIN.value: self._handle_join,
            EventType.MESSAGE.value: self._handle_message,
            EventType.EMOJI.value: self._handle_emoji,
        }

    def connect(self, connection: Connection) -> None:
        self.registry.register(connection.id)
        logger.info("✓ Connection %s registered as %s",
                    connection.id, self.registry.name_of(connection.id))

    def disconnect(self, connection: Connection) -> None:
        self.room_manager.remove_connection(connection)
        logger.info("✗ Connection %s closed", connection.id)

    def dispatch(self, connection: Connection, raw: Union[str, bytes]) -> Optional[str]:
        """
        Handle one inbound frame.

        Returns:
            The event type that was applied, or None if the frame was dropped
        """
        try:
            event = InboundEvent.model_validate_json(raw)
        except ValidationError as e:
            logger.debug("Dropping malformed payload from %s: %s", connection.id, e.errors()[:1])
            return None

        handler = self._handlers.get(event.type)
        if handler is None:
            logger.debug("Ignoring unknown event type %r from %s", event.type, connection.id)
            return None

        if not handler(connection, event):
            return None
        return event.type

    # ------------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------------

    def _handle_join(self, connection: Connection, event: InboundEvent) -> bool:
        if event.roomId is None:
            logger.debug("Dropping join without roomId from %s", connection.id)
            return False
        self.room_manager.join_room(event.roomId, connection, event.username)
        return True

    def _handle_message(self, connection: Connection, event: InboundEvent) -> bool:
        room_id = self._current_room(connection)
        if room_id is None:
            return False
        message = UserText(sender=event.sender, text=event.text, style=event.style)
        self.room_manager.append_and_broadcast(room_id, EventType.MESSAGE, message)
        self.message_count += 1
        return True

    def _handle_emoji(self, connection: Connection, event: InboundEvent) -> bool:
        room_id = self._current_room(connection)
        if room_id is None:
            return False
        message = UserEmoji(sender=event.sender, emoji=event.emoji, style=event.style)
        self.room_manager.append_and_broadcast(room_id, EventType.EMOJI, message)
        self.message_count += 1
        return True

    def _current_room(self, connection: Connection) -> Optional[str]:
        room_id = self.room_manager.current_room_of(connection)
        if room_id is None:
            logger.debug("Dropping event from %s: not in a room", connection.id)
        return room_id
