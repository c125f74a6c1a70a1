# chatguard/services/broadcaster.py

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatguard.models.models import Envelope

if TYPE_CHECKING:
    from chatguard.services.room_manager import Room

logger = logging.getLogger(__name__)


class Broadcaster:
    """
    Fans an envelope out to every open member of a room.

    Delivery is best-effort: closed members are skipped, a member whose send
    raises is logged and skipped, and nothing is retried or acknowledged.
    """

    def broadcast(self, room: Room, envelope: Envelope) -> int:
        """
        Send `envelope` to the members of `room`.

        Args:
            room: Target room (its member list is snapshotted before sending)
            envelope: Tagged wrapper, serialized once for all members

        Returns:
            Number of members the frame was handed to
        """
        payload = envelope.to_wire()
        connections = list(room.members)
        delivered = 0

        logger.debug("📨 Broadcasting %s to room %s: %d clients",
                     envelope.type.value, room.room_id, len(connections))

        for connection in connections:
            if not connection.is_open():
                continue
            try:
                connection.send(payload)
                delivered += 1
            except Exception as e:
                logger.warning("Send error to %s: %s", connection.id, e)

        return delivered
