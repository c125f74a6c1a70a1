# chatguard/api/routes/root.py

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - API information.

    Returns basic info about the relay. The WebSocket endpoint shares
    this path, so plain HTTP GETs land here and upgrades go to the relay.
    """
    return {
        "message": "Chatguard Relay",
        "version": "1.0",
        "features": ["rooms", "text_messages", "emoji", "join_notices"],
        "endpoints": {
            "websocket": ["/", "/ws"],
            "rooms": "/rooms",
            "health": "/health",
            "metrics": "/metrics",
        },
    }
