"""
HTTP route modules.
"""

from typing import Optional

from ..config.settings import AppConfig

# Configuration reference (set by the server)
_config: Optional[AppConfig] = None


def set_config(config: Optional[AppConfig]) -> None:
    """Set the configuration used by route handlers."""
    global _config
    _config = config


def get_config() -> AppConfig:
    """Get the active configuration, falling back to defaults."""
    if _config is None:
        return AppConfig()
    return _config


# Import routers
from .feeds import router as feeds_router
from .images import router as images_router

__all__ = [
    "feeds_router",
    "images_router",
    "set_config",
    "get_config",
]
