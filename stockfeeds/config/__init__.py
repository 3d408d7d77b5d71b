"""
Configuration module for stockfeeds.
"""

from .settings import AppConfig, ServerConfig, FeedSettings, LogLevel, DEFAULT_IMAGE_BASE_URL
from .environment import EnvironmentLoader
from .validation import ConfigValidator

__all__ = [
    'AppConfig',
    'ServerConfig',
    'FeedSettings',
    'LogLevel',
    'DEFAULT_IMAGE_BASE_URL',
    'EnvironmentLoader',
    'ConfigValidator',
]
