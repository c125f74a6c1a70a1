# chatguard/api/routes/metrics.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from chatguard.core.state import ChatState, get_chat_state

router = APIRouter()

@router.get("/metrics")
async def get_metrics(chat: ChatState = Depends(get_chat_state)):
    """
    Usage counters for the running relay.

    Returns:
        dict: total user messages (text + emoji), uptime, throughput,
              live connections and active rooms
    """
    uptime_seconds = (datetime.now(timezone.utc) - chat.started_at).total_seconds()
    total = chat.router.message_count

    if uptime_seconds > 0:
        messages_per_second = total / uptime_seconds
    else:
        messages_per_second = 0

    return {
        "total_messages": total,
        "uptime_hours": round(uptime_seconds / 3600, 2) if uptime_seconds > 0 else 0,
        "messages_per_second": round(messages_per_second, 2),
        "concurrent_connections": len(chat.connections),
        "active_rooms": len(chat.room_manager.rooms),
    }
