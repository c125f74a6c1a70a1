# chatguard/api/routes/health.py

from fastapi import APIRouter, Depends

from chatguard.core.state import ChatState, get_chat_state

router = APIRouter()

@router.get("/health")
async def health(chat: ChatState = Depends(get_chat_state)):
    """
    Health check endpoint.

    Returns:
        dict: Status, live connection count, active room count
    """
    return {
        "status": "healthy",
        "connections": len(chat.registry),
        "rooms": len(chat.room_manager.rooms),
    }
