"""
Configuration management for the pronunciation audio server.

Loads environment variables from .env file and provides typed access to
server-level configuration. Backend selection lives in infra.config.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Server configuration."""

    # HTTP server
    AUDIO_PORT = int(os.getenv("AUDIO_PORT", "8000"))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> bool:
        """Validate server configuration."""
        if not 0 < cls.AUDIO_PORT < 65536:
            raise ValueError(f"AUDIO_PORT out of range: {cls.AUDIO_PORT}")
        return True
