"""
Exception hierarchy for stockfeeds.
"""

from typing import Any, Dict, List, Optional


class StockFeedError(Exception):
    """Base exception for all stockfeeds errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "STOCKFEED_ERROR",
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.user_message = user_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.user_message or self.message,
        }


class ConfigurationError(StockFeedError):
    """Raised when the loaded configuration fails validation."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(
            message=message,
            error_code="INVALID_CONFIGURATION",
            user_message="Service configuration is invalid.",
        )
        self.errors = errors or []


class DirectoryReadError(StockFeedError):
    """Raised when a feed directory can't be listed.

    Carries the degraded feed that should be served in place of the
    real one.
    """

    def __init__(self, directory: str, cause: OSError, feed: Any = None):
        super().__init__(
            message=f"Unable to read directory {directory}: {cause}",
            error_code="DIRECTORY_READ_FAILED",
        )
        self.directory = directory
        self.cause = cause
        self.feed = feed


class FeedFormatError(StockFeedError):
    """Raised when a feed is requested in a format we can't produce."""

    def __init__(self, feed_format: str):
        super().__init__(
            message=f"Unsupported feed format: {feed_format}",
            error_code="UNSUPPORTED_FEED_FORMAT",
        )
        self.feed_format = feed_format
