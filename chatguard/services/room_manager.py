# chatguard/services/room_manager.py

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from chatguard.models.models import Envelope, EventType, Message, system_notice
from chatguard.services.broadcaster import Broadcaster
from chatguard.services.connection_registry import ConnectionRegistry
from chatguard.services.connections import Connection

logger = logging.getLogger(__name__)

WELCOME_TEMPLATE = "Welcome in room {room_id}\nPlease be kind and follow the guidelines"

JOIN_PHRASES = [
    "{username} hopped into the room!",
    "Welcome {username} to the room!",
    "Hey {username}, glad to have you here!",
    "Look who's here! It's {username}!",
    "Everyone, please welcome {username}!",
    "Say hello to {username}!",
    "A wild {username} appeared!",
    "Guess who just walked in? It's {username}!",
    "Everyone, meet {username}!",
    "Let's give a warm welcome to {username}!",
    "{username} just joined the party!",
    "W in the chat! {username} is here!",
    "We hope you enjoy your stay, {username}!",
    "Welcome aboard, {username}!",
    "Hi {username}, hope you brought pizza!",
]


def pick_join_phrase(username: str, rng: random.Random) -> str:
    return rng.choice(JOIN_PHRASES).format(username=username)


class JoinOutcome(str, Enum):
    CREATED = "created"
    JOINED = "joined"
    ALREADY_MEMBER = "already_member"


@dataclass
class Room:
    room_id: str
    members: List[Connection] = field(default_factory=list)
    history: List[Message] = field(default_factory=list)


# ============================================================================
# ROOM STORE
# ============================================================================

class RoomManager:
    """
    In-memory room store and membership bookkeeping.

    A room exists only while it has members: it is created by the first join
    (seeded with a welcome notice) and deleted, history included, as soon as
    its last member leaves. Nothing is persisted.

    Data Structures:
        rooms: Maps room_id -> Room
               Example: {"lobby": Room(members=[conn1, conn2], history=[...])}

        connection_rooms: Maps connection id -> room_id it currently occupies
                          Example: {"c0ffee": "lobby"}

    A connection occupies at most one room. Joining a different room first
    leaves the current one; joining the current room again only renames.

    Not thread-safe: every method runs to completion on the event loop
    without awaiting, which is what serializes events against each other.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        broadcaster: Broadcaster,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rooms: Dict[str, Room] = {}
        self.connection_rooms: Dict[str, str] = {}
        self.registry = registry
        self.broadcaster = broadcaster
        self._rng = rng or random.Random()

    def join_room(
        self,
        room_id: str,
        connection: Connection,
        requested_name: Optional[str] = None,
    ) -> JoinOutcome:
        """
        Put `connection` into `room_id`, creating the room if needed.

        Args:
            room_id: Any string, including the empty string
            connection: The joining connection
            requested_name: Overwrites the registry name when non-empty

        Returns:
            CREATED for a new room (nobody is notified, the joiner only gets
            the welcome notice in history), JOINED when an existing room was
            entered (a join notice is broadcast to every member, joiner
            included), ALREADY_MEMBER when the connection was already there.
        """
        if requested_name:
            self.registry.set_name(connection.id, requested_name)
        username = self.registry.name_of(connection.id)

        current = self.connection_rooms.get(connection.id)
        if current == room_id:
            logger.debug("%s is already in room '%s'", username, room_id)
            return JoinOutcome.ALREADY_MEMBER
        if current is not None:
            self.leave_room(connection)

        room = self.rooms.get(room_id)
        if room is None:
            room = Room(
                room_id=room_id,
                members=[connection],
                history=[system_notice(WELCOME_TEMPLATE.format(room_id=room_id))],
            )
            self.rooms[room_id] = room
            self.connection_rooms[connection.id] = room_id
            logger.info("✓ Created room '%s' for %s", room_id, username)
            return JoinOutcome.CREATED

        room.members.append(connection)
        self.connection_rooms[connection.id] = room_id
        logger.info("→ %s joined '%s' (%d members)", username, room_id, len(room.members))

        notice = system_notice(pick_join_phrase(username, self._rng))
        self.append_and_broadcast(room_id, EventType.JOIN, notice)
        return JoinOutcome.JOINED

    def current_room_of(self, connection: Connection) -> Optional[str]:
        return self.connection_rooms.get(connection.id)

    def append_and_broadcast(self, room_id: str, event_type: EventType, message: Message) -> int:
        """
        Append `message` to the room history and fan it out.

        The caller must have checked that the room exists.
        """
        room = self.rooms[room_id]
        room.history.append(message)
        return self.broadcaster.broadcast(room, Envelope(type=event_type, message=message))

    def leave_room(self, connection: Connection) -> Optional[str]:
        """
        Drop `connection` from the room it occupies, deleting the room if it
        becomes empty. Returns the room id it left, or None.
        """
        room_id = self.connection_rooms.pop(connection.id, None)
        if room_id is None:
            return None

        room = self.rooms.get(room_id)
        if room is not None:
            room.members = [member for member in room.members if member is not connection]
            if not room.members:
                del self.rooms[room_id]
                logger.info("✗ Deleted empty room '%s'", room_id)
        return room_id

    def remove_connection(self, connection: Connection) -> None:
        """
        Teardown path for a closed connection.

        Removes it from its room (deleting the room when empty) and forgets
        its display name. Safe to call repeatedly and for connections that
        never joined anything.
        """
        room_id = self.leave_room(connection)
        self.registry.unregister(connection.id)
        if room_id is not None:
            logger.info("✗ %s left '%s'", connection.id, room_id)

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def list_rooms(self) -> List[Room]:
        return list(self.rooms.values())
