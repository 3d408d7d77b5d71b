"""
Feed building and serialization for stockfeeds.
"""

from .generator import FeedGenerator
from .stockpicker import build_stockpicker_feed
from .rotation import build_rotation_feed

__all__ = [
    'FeedGenerator',
    'build_stockpicker_feed',
    'build_rotation_feed',
]
