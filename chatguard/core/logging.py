# chatguard/core/logging.py

import logging
import os
import sys


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Per-frame chatter from the WebSocket protocol libraries uvicorn may load
NOISY_LOGGERS = ("websockets", "websockets.protocol", "wsproto")


def setup_logging(level_name: str | None = None) -> None:
    """
    Configure relay-wide logging.

    - Level comes from the argument, then LOG_LEVEL, then INFO
    - One stdout handler on the root logger
    - WebSocket protocol libraries are held at WARNING so DEBUG runs show
      relay decisions (drops, joins, fan-out) rather than frame dumps
    """
    log_level_name = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, log_level_name, logging.INFO)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Uvicorn installs its own handlers when it starts first; only adjust the level
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Usage:
        from chatguard.core.logging import get_logger

        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
