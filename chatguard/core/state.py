# chatguard/core/state.py
from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from fastapi.requests import HTTPConnection

from chatguard.core.config import Settings, settings as default_settings
from chatguard.services.broadcaster import Broadcaster
from chatguard.services.connection_registry import ConnectionRegistry
from chatguard.services.connections import Connection
from chatguard.services.event_router import EventRouter
from chatguard.services.room_manager import RoomManager

logger = logging.getLogger(__name__)


def _new_connection_id() -> str:
    return str(uuid.uuid4())


class ChatState:
    """
    Everything one relay instance owns: registry, room store, broadcaster,
    router and the set of live connections.

    Built by the app factory and stored on `app.state.chat`; nothing lives at
    module level, so tests can run several independent instances.

    Args:
        settings: Relay configuration
        rng: Source of randomness for default names and join phrases
        id_factory: Generates connection identifiers
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.rng = rng or random.Random()
        self.id_factory = id_factory or _new_connection_id

        self.registry = ConnectionRegistry(rng=self.rng)
        self.broadcaster = Broadcaster()
        self.room_manager = RoomManager(self.registry, self.broadcaster, rng=self.rng)
        self.router = EventRouter(self.registry, self.room_manager)

        self.connections: Dict[str, Connection] = {}
        self.started_at: datetime = datetime.now(timezone.utc)

    def open_connection(self, connection: Connection) -> None:
        self.connections[connection.id] = connection
        self.router.connect(connection)

    def close_connection(self, connection: Connection) -> None:
        """Idempotent; the room store and registry tolerate repeated removal."""
        self.connections.pop(connection.id, None)
        self.router.disconnect(connection)

    def close(self) -> None:
        """Tear down every live connection (server shutdown)."""
        for connection in list(self.connections.values()):
            connection.close()
            self.close_connection(connection)
        logger.info("Relay state cleared")


def get_chat_state(connection: HTTPConnection) -> ChatState:
    """FastAPI dependency returning the relay state of the serving app."""
    return connection.app.state.chat
