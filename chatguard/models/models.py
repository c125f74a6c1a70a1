# chatguard/models/models.py
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Synthetic sender used for welcome and join notices
CHATGUARD_USERNAME = "Chatguard"
CHATGUARD_COLOR = "#9b39d5"
SYSTEM_STYLE_COLOR = "#22283b"


class EventType(str, Enum):
    JOIN = "join"
    MESSAGE = "message"
    EMOJI = "emoji"


# ============================================================================
# ROOM HISTORY ENTRIES
# ============================================================================

class MessageEntry(BaseModel):
    """
    Base for everything stored in a room's history.

    `sender` and `style` come straight from the client and are forwarded
    verbatim, so they are deliberately untyped. Entries are frozen once built.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sender: Any = None
    style: Any = None


class SystemNotice(MessageEntry):
    text: str = Field(alias="str")


class UserText(MessageEntry):
    text: Any = Field(default=None, alias="str")


class UserEmoji(MessageEntry):
    emoji: Any = None


Message = Union[SystemNotice, UserText, UserEmoji]


def system_notice(text: str) -> SystemNotice:
    """Build a notice attributed to the Chatguard system sender."""
    return SystemNotice(
        sender={"username": CHATGUARD_USERNAME, "uuid": None, "color": CHATGUARD_COLOR},
        text=text,
        style={"color": SYSTEM_STYLE_COLOR},
    )


# ============================================================================
# WIRE PAYLOADS
# ============================================================================

class Envelope(BaseModel):
    """Outbound frame: {"type": ..., "message": {...}}"""
    type: EventType
    message: Message

    def to_wire(self) -> str:
        return self.model_dump_json(by_alias=True)


class InboundEvent(BaseModel):
    """
    Inbound frame sent by a client.

    Only `type` is required; which of the other fields matter depends on it:
        join    -> roomId, username (optional)
        message -> sender, str, style
        emoji   -> sender, emoji, style
    """
    model_config = ConfigDict(extra="ignore")

    type: str
    roomId: Optional[str] = None
    username: Optional[str] = None
    sender: Any = None
    text: Any = Field(default=None, alias="str")
    style: Any = None
    emoji: Any = None


# ============================================================================
# HTTP RESPONSES
# ============================================================================

class RoomInfo(BaseModel):
    room_id: str
    member_count: int = 0
    history_length: int = 0


class RoomDetail(RoomInfo):
    history: List[Dict[str, Any]] = []
