# chatguard/main.py

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatguard.core.config import Settings, settings as default_settings
from chatguard.core.logging import setup_logging, get_logger
from chatguard.core.state import ChatState
from chatguard.api.routes import root, health, metrics, rooms
from chatguard.api import websocket as websocket_module

# Configure logging first
setup_logging(default_settings.LOG_LEVEL)
logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    chat_state: Optional[ChatState] = None,
) -> FastAPI:
    """
    Build a relay application with its own room store and registry.

    Args:
        settings: Configuration (defaults to the environment-driven settings)
        chat_state: Pre-built state, mostly for tests that need to seed
                    randomness or inspect rooms directly
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Relay starting on port %d", settings.PORT)
        yield
        app.state.chat.close()

    app = FastAPI(title="Chatguard Relay", lifespan=lifespan)
    app.state.chat = chat_state or ChatState(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # REST routes
    app.include_router(root.router)
    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(rooms.router)

    # WebSocket routes
    app.include_router(websocket_module.router)

    return app


app = create_app()


def run() -> None:
    import uvicorn
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
