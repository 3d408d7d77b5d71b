"""
RSS 2.0, Atom 1.0 and JSON Feed 1.1 serialization for feed documents.
"""

import hashlib
import json
from datetime import date, datetime, time, timezone
from typing import Optional
from xml.etree.ElementTree import Element, SubElement, tostring, register_namespace
from xml.dom import minidom

from ..exceptions import FeedFormatError
from ..models.feed import Feed, FeedFormat, FeedItem

# Register namespace prefixes to avoid ns0 declarations
register_namespace('atom', 'http://www.w3.org/2005/Atom')

GENERATOR_NAME = 'stockfeeds'
JSON_FEED_VERSION = 'https://jsonfeed.org/version/1.1'


class FeedGenerator:
    """Serializes Feed documents into syndication formats."""

    def generate(self, feed: Feed, feed_format: FeedFormat, self_url: Optional[str] = None) -> str:
        """Serialize a feed.

        Args:
            feed: Feed document to serialize
            feed_format: Target format
            self_url: Public URL the feed is served from, if known

        Returns:
            Serialized feed text
        """
        if feed_format == FeedFormat.RSS:
            return self.generate_rss(feed, self_url)
        if feed_format == FeedFormat.ATOM:
            return self.generate_atom(feed, self_url)
        if feed_format == FeedFormat.JSON:
            return self.generate_json(feed, self_url)
        raise FeedFormatError(str(feed_format))

    def generate_rss(self, feed: Feed, self_url: Optional[str] = None) -> str:
        """Generate RSS 2.0 XML."""
        rss = Element('rss', {'version': '2.0'})
        channel = SubElement(rss, 'channel')

        SubElement(channel, 'title').text = feed.title
        SubElement(channel, 'link').text = feed.link
        SubElement(channel, 'description').text = feed.description
        SubElement(channel, 'generator').text = GENERATOR_NAME

        if feed.items:
            SubElement(channel, 'lastBuildDate').text = self._format_rss_date(self.get_last_modified(feed))

        if self_url:
            SubElement(channel, '{http://www.w3.org/2005/Atom}link', {
                'href': self_url,
                'rel': 'self',
                'type': 'application/rss+xml'
            })

        for item in feed.items:
            self._add_rss_item(channel, item)

        return self._prettify_xml(rss)

    def generate_atom(self, feed: Feed, self_url: Optional[str] = None) -> str:
        """Generate Atom 1.0 XML."""
        root = Element('feed', {'xmlns': 'http://www.w3.org/2005/Atom'})

        SubElement(root, 'title').text = feed.title
        SubElement(root, 'subtitle').text = feed.description
        SubElement(root, 'id').text = self._feed_id(feed)
        SubElement(root, 'generator').text = GENERATOR_NAME

        if self_url:
            SubElement(root, 'link', {
                'href': self_url,
                'rel': 'self',
                'type': 'application/atom+xml'
            })

        SubElement(root, 'updated').text = self._format_atom_date(self.get_last_modified(feed))

        author = SubElement(root, 'author')
        SubElement(author, 'name').text = GENERATOR_NAME

        for item in feed.items:
            self._add_atom_entry(root, feed, item)

        return self._prettify_xml(root)

    def generate_json(self, feed: Feed, self_url: Optional[str] = None) -> str:
        """Generate JSON Feed 1.1."""
        document = {
            'version': JSON_FEED_VERSION,
            'title': feed.title,
            'description': feed.description,
            'items': [self._json_item(feed, item) for item in feed.items],
        }
        if self_url:
            document['feed_url'] = self_url
        # Directory paths aren't URLs; keep them out of home_page_url
        document['_stockfeeds'] = {'link': feed.link}

        return json.dumps(document, ensure_ascii=False, indent=2)

    def _add_rss_item(self, channel: Element, item: FeedItem) -> None:
        entry = SubElement(channel, 'item')
        SubElement(entry, 'title').text = item.title

        guid = SubElement(entry, 'guid', {'isPermaLink': 'false'})
        guid.text = self._item_id(item)

        SubElement(entry, 'pubDate').text = self._format_rss_date(self._item_datetime(item))
        SubElement(entry, 'description').text = item.description

        for category in item.category:
            SubElement(entry, 'category').text = category

    def _add_atom_entry(self, root: Element, feed: Feed, item: FeedItem) -> None:
        entry = SubElement(root, 'entry')

        SubElement(entry, 'id').text = f"{self._feed_id(feed)}:{self._item_id(item)}"
        SubElement(entry, 'title').text = item.title

        published = self._format_atom_date(self._item_datetime(item))
        SubElement(entry, 'updated').text = published
        SubElement(entry, 'published').text = published

        content_elem = SubElement(entry, 'content', {'type': 'html' if item.is_html else 'text'})
        content_elem.text = item.description

        for category in item.category:
            SubElement(entry, 'category', {'term': category})

    def _json_item(self, feed: Feed, item: FeedItem) -> dict:
        data = {
            'id': self._item_id(item),
            'title': item.title,
            'date_published': self._format_atom_date(self._item_datetime(item)),
            'tags': list(item.category),
        }
        if item.is_html:
            data['content_html'] = item.description
        else:
            data['content_text'] = item.description
        return data

    def _item_id(self, item: FeedItem) -> str:
        if item.guid:
            return item.guid
        return hashlib.md5(f"{item.title}:{item.pub_date.isoformat()}".encode()).hexdigest()

    def _feed_id(self, feed: Feed) -> str:
        digest = hashlib.md5(f"{feed.title}:{feed.link}".encode()).hexdigest()
        return f"urn:stockfeeds:feed:{digest}"

    @staticmethod
    def _item_datetime(item: FeedItem) -> datetime:
        return _midnight_utc(item.pub_date)

    def _format_rss_date(self, dt: datetime) -> str:
        """Format datetime for RSS 2.0 (RFC 822)."""
        return dt.strftime('%a, %d %b %Y %H:%M:%S +0000')

    def _format_atom_date(self, dt: datetime) -> str:
        """Format datetime for Atom 1.0 (ISO 8601)."""
        return dt.strftime('%Y-%m-%dT%H:%M:%SZ')

    def _prettify_xml(self, elem: Element) -> str:
        """Convert Element to pretty-printed XML string."""
        rough_string = tostring(elem, encoding='unicode')
        reparsed = minidom.parseString(rough_string)
        return reparsed.toprettyxml(indent="  ", encoding=None)

    @staticmethod
    def generate_etag(content: str, feed_format: FeedFormat) -> str:
        """Generate an ETag (without quotes) for one serialized representation."""
        return hashlib.md5(f"{feed_format.value}:{content}".encode()).hexdigest()

    @staticmethod
    def get_last_modified(feed: Feed) -> datetime:
        """Most recent item date, or the current time for empty feeds."""
        if feed.items:
            return max(_midnight_utc(item.pub_date) for item in feed.items)
        return datetime.now(timezone.utc).replace(microsecond=0)


def _midnight_utc(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
