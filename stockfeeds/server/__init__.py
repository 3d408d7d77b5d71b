"""
HTTP server for stockfeeds.
"""

from .app import FeedServer, create_app

__all__ = [
    'FeedServer',
    'create_app',
]
