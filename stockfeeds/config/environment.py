"""
Environment variable handling for stockfeeds configuration.
"""

import os
import logging
from typing import List, Optional
from dotenv import load_dotenv

from .settings import AppConfig, ServerConfig, FeedSettings, LogLevel, DEFAULT_IMAGE_BASE_URL
from .validation import ConfigValidator
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class EnvironmentLoader:
    """Loads configuration from environment variables."""

    @staticmethod
    def load_config(load_env_file: bool = True) -> AppConfig:
        """Load and validate configuration from environment variables.

        Args:
            load_env_file: Read a .env file from the working directory first

        Returns:
            Validated application configuration

        Raises:
            ConfigurationError: If any setting is invalid
        """
        if load_env_file:
            # Prefer .env over shell env
            load_dotenv(override=True)

        server_config = ServerConfig(
            host=os.getenv('FEED_HOST', '0.0.0.0'),
            port=EnvironmentLoader._parse_int('FEED_PORT', 1200),
            cors_origins=EnvironmentLoader._parse_list(os.getenv('FEED_CORS_ORIGINS', '')),
        )

        feed_settings = FeedSettings(
            image_base_url=os.getenv('ROTATION_IMAGE_BASE_URL') or DEFAULT_IMAGE_BASE_URL,
            image_directory=os.getenv('ROTATION_IMAGE_DIR') or None,
        )

        log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
        log_level = LogLevel.INFO
        try:
            log_level = LogLevel(log_level_str)
        except ValueError:
            logger.warning(f"Unknown LOG_LEVEL {log_level_str!r}, using INFO")

        config = AppConfig(
            server=server_config,
            feeds=feed_settings,
            log_level=log_level,
        )

        errors = ConfigValidator.validate_config(config)
        if errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(errors)}",
                errors=errors,
            )

        return config

    @staticmethod
    def _parse_int(key: str, default: int) -> int:
        """Read an integer variable, raising ConfigurationError on garbage."""
        value = os.getenv(key)
        if not value:
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(
                f"Environment variable {key} must be an integer, got {value!r}",
                errors=[f"{key} is not an integer"],
            )

    @staticmethod
    def _parse_list(value: Optional[str], delimiter: str = ',') -> List[str]:
        """Parse a comma-separated string into a list."""
        if not value:
            return []
        return [item.strip() for item in value.split(delimiter) if item.strip()]
