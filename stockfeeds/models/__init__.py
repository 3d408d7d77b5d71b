"""
Data models module for stockfeeds.
"""

from .feed import Feed, FeedItem, FeedFormat

__all__ = [
    'Feed',
    'FeedItem',
    'FeedFormat',
]
