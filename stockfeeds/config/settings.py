"""
Configuration settings for stockfeeds.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

DEFAULT_IMAGE_BASE_URL = "http://localhost:1200/rotation-images"


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ServerConfig:
    """HTTP server settings."""
    host: str = "0.0.0.0"
    port: int = 1200
    cors_origins: List[str] = field(default_factory=list)


@dataclass
class FeedSettings:
    """Settings consumed by the feed routes."""
    image_base_url: str = DEFAULT_IMAGE_BASE_URL
    image_directory: Optional[str] = None  # served under /rotation-images when set


@dataclass
class AppConfig:
    """Top-level application configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    feeds: FeedSettings = field(default_factory=FeedSettings)
    log_level: LogLevel = LogLevel.INFO
