"""
typed-kv Configuration Settings

Defaults for the typed-kv server. Bind host and port can be overridden
from the command line; everything else is fixed at import time.
"""

from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = "127.0.0.1"
    PORT: int = 7878
    LISTEN_BACKLOG: int = 128

    # Dispatch loop settings
    POLL_INTERVAL: float = 0.01  # Seconds to sleep when nothing is pending

    # Connection settings
    READ_BUFFER_SIZE: int = 4096
    MAX_LINE_LENGTH: int = 65536  # Unterminated input beyond this closes the connection

    # Logging settings
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"


# Global settings instance
settings = Settings()
