"""
Configuration validation for stockfeeds.
"""

import os
import re
from typing import List

from .settings import AppConfig


class ConfigValidator:
    """Validates configuration settings."""

    @staticmethod
    def validate_config(config: AppConfig) -> List[str]:
        """Validate the entire configuration.

        Returns:
            List of human-readable problems; empty when valid
        """
        errors = []
        errors.extend(ConfigValidator._validate_server_config(config))
        errors.extend(ConfigValidator._validate_feed_settings(config))
        return errors

    @staticmethod
    def _validate_server_config(config: AppConfig) -> List[str]:
        errors = []
        server = config.server

        if not (1 <= server.port <= 65535):
            errors.append(f"Server port must be between 1 and 65535, got {server.port}")

        if not server.host:
            errors.append("Server host must not be empty")

        for origin in server.cors_origins:
            if not ConfigValidator._is_valid_url_or_wildcard(origin):
                errors.append(f"Invalid CORS origin: {origin}")

        return errors

    @staticmethod
    def _validate_feed_settings(config: AppConfig) -> List[str]:
        errors = []
        feeds = config.feeds

        if not ConfigValidator._is_http_url(feeds.image_base_url):
            errors.append(f"Image base URL must be an http(s) URL, got {feeds.image_base_url!r}")

        if feeds.image_directory and not os.path.isdir(feeds.image_directory):
            errors.append(f"Image directory does not exist: {feeds.image_directory}")

        return errors

    @staticmethod
    def _is_http_url(value: str) -> bool:
        url_pattern = r'^https?://[a-zA-Z0-9.-]+(?::[0-9]+)?(?:/.*)?$'
        return bool(re.match(url_pattern, value or ''))

    @staticmethod
    def _is_valid_url_or_wildcard(origin: str) -> bool:
        """Check if a CORS origin is a valid URL or wildcard."""
        if origin == '*':
            return True
        return ConfigValidator._is_http_url(origin)
