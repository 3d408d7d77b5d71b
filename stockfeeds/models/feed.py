"""
Feed document models shared by the feed routes and the serializer.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FeedFormat(str, Enum):
    """Output formats the serializer can produce."""
    RSS = "rss"
    ATOM = "atom"
    JSON = "json"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @classmethod
    def from_accept(cls, accept: Optional[str]) -> "FeedFormat":
        """Pick a format from an HTTP Accept header, defaulting to RSS."""
        if not accept:
            return cls.RSS
        accept = accept.lower()
        if "application/atom+xml" in accept:
            return cls.ATOM
        if "application/feed+json" in accept or "application/json" in accept:
            return cls.JSON
        return cls.RSS


_CONTENT_TYPES = {
    FeedFormat.RSS: "application/rss+xml; charset=utf-8",
    FeedFormat.ATOM: "application/atom+xml; charset=utf-8",
    FeedFormat.JSON: "application/feed+json; charset=utf-8",
}


class FeedItem(BaseModel):
    """A single entry of a generated feed."""
    title: str
    description: str  # Markdown/plain text, or HTML when is_html is set
    pub_date: date
    category: List[str] = Field(default_factory=list)
    guid: Optional[str] = None
    is_html: bool = False


class Feed(BaseModel):
    """A feed document ready for serialization.

    ``link`` is the scanned directory path, not a URL.
    """
    title: str
    link: str
    description: str
    items: List[FeedItem] = Field(default_factory=list)
