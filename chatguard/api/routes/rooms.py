# chatguard/api/routes/rooms.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from chatguard.core.state import ChatState, get_chat_state
from chatguard.models.models import RoomDetail, RoomInfo
from chatguard.services.room_manager import Room

router = APIRouter()


def _room_info(room: Room) -> RoomInfo:
    return RoomInfo(
        room_id=room.room_id,
        member_count=len(room.members),
        history_length=len(room.history),
    )

# ============================================================================
# ROOM INSPECTION ENDPOINTS
# ============================================================================

@router.get("/rooms", response_model=List[RoomInfo])
async def list_rooms(chat: ChatState = Depends(get_chat_state)):
    """
    List all active rooms.

    Rooms only exist while somebody is in them, so this is also the list
    of rooms with at least one member.
    """
    return [_room_info(room) for room in chat.room_manager.list_rooms()]


@router.get("/rooms/{room_id}", response_model=RoomDetail)
async def get_room(room_id: str, chat: ChatState = Depends(get_chat_state)):
    """
    Get a room with its full message history.

    Raises:
        HTTPException: 404 if the room does not exist
    """
    room = chat.room_manager.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    info = _room_info(room)
    return RoomDetail(
        **info.model_dump(),
        history=[entry.model_dump(by_alias=True) for entry in room.history],
    )
