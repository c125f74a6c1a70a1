"""Chatguard: a WebSocket group chat relay with per-room history."""

__version__ = "1.0.0"
