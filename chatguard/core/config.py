# chatguard/core/config.py
import os
from typing import List
from dotenv import load_dotenv

class Settings:
    """
    Setup environment variables.
        - PORT the port the relay listens on (default 8080)
        - HOST the interface the relay binds to
        - LOG_LEVEL root log level
        - SEND_QUEUE_SIZE outbound frames buffered per connection before dropping
        - CORS_ORIGINS comma separated list of allowed origins
    """

    def __init__(self) -> None:
        # Load environment variables from the .env file
        load_dotenv()

        self.PORT: int = int(os.getenv("PORT", "8080"))
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        self.SEND_QUEUE_SIZE: int = int(os.getenv("SEND_QUEUE_SIZE", "256"))
        self.CORS_ORIGINS: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

settings = Settings()
