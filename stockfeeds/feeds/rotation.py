"""
Sector rotation monitor feed.

The screener writes, per trading day, the leading industry's stocks
(``*_top_industry_stocks.csv``), the high-potential industry's stocks
(``*_bottom_industry_stocks.csv``) and optionally a trend chart
(``*_industry_performance_trend.png``). A day becomes a feed item only when
both CSV files exist.
"""

import asyncio
import html
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import markdown

from ..config.settings import DEFAULT_IMAGE_BASE_URL
from ..exceptions import DirectoryReadError
from ..models.feed import Feed, FeedItem
from ..sources import (
    CsvRecord,
    TOP_INDUSTRY,
    BOTTOM_INDUSTRY,
    PERFORMANCE_CHART,
    list_directory,
    match_files,
    resolve_item_date,
    read_csv_files,
)

logger = logging.getLogger(__name__)

FEED_TITLE = "Sector rotation monitor"
FEED_DESCRIPTION = "Daily sector rotation monitor covering the leading and high-potential industries"
NO_FILES_DESCRIPTION = "No rotation CSV files matching the naming rules were found"
NO_PAIRS_DESCRIPTION = "No complete rotation data found (top and bottom industry files are required for the same date)"
READ_FAILED_TITLE = "Read failed"

MISSING_CELL = "-"
UNKNOWN_INDUSTRY = "Unknown industry"
NO_CHART_NOTICE = "> No industry performance chart available"
ITEM_CATEGORIES = ["rotation", "stock"]

_MARKDOWN_SPECIALS = re.compile(r'([\\`*_\[\]])')


@dataclass
class RotationFiles:
    """Files found for one trading day."""
    date_str: str
    top: Optional[Path] = None
    bottom: Optional[Path] = None
    image: Optional[Path] = None

    @property
    def is_complete(self) -> bool:
        return self.top is not None and self.bottom is not None


def group_rotation_files(entries) -> List[RotationFiles]:
    """Group directory entries by date, newest first.

    Top files define the candidate dates; bottom files and charts only
    attach to a date that already has a top file. Incomplete dates are
    dropped.
    """
    by_date: Dict[str, RotationFiles] = {}

    for found in match_files(entries, TOP_INDUSTRY):
        by_date.setdefault(found.date_str, RotationFiles(date_str=found.date_str)).top = found.path

    for found in match_files(entries, BOTTOM_INDUSTRY):
        if found.date_str in by_date:
            by_date[found.date_str].bottom = found.path

    for found in match_files(entries, PERFORMANCE_CHART):
        if found.date_str in by_date:
            by_date[found.date_str].image = found.path

    complete = [files for files in by_date.values() if files.is_complete]
    return sorted(complete, key=lambda files: files.date_str, reverse=True)


def build_image_url(image_base_url: str, image_name: str) -> str:
    return f"{image_base_url.rstrip('/')}/{image_name}"


def _escape_cell(value: str) -> str:
    """Make a CSV cell safe to embed in the Markdown body as literal text."""
    return html.escape(_MARKDOWN_SPECIALS.sub(r'\\\1', value), quote=False)


def _industry_of(records: List[CsvRecord]) -> str:
    if records and records[0].get('industry'):
        return records[0]['industry']
    return UNKNOWN_INDUSTRY


def _stock_list(records: List[CsvRecord]) -> List[str]:
    return [
        f"{index}. **{_escape_cell(record.get('name', MISSING_CELL))}** "
        f"({_escape_cell(record.get('ts_code', MISSING_CELL))})"
        for index, record in enumerate(records, start=1)
    ]


def format_rotation_markdown(
    date_str: str,
    top_records: List[CsvRecord],
    bottom_records: List[CsvRecord],
    image_url: Optional[str] = None,
) -> str:
    """Markdown body for one trading day.

    Cell values are HTML-escaped and their Markdown punctuation is
    backslash-escaped, so a name like ``*ST Kangmei`` renders literally.
    """
    top_industry = _escape_cell(_industry_of(top_records))
    bottom_industry = _escape_cell(_industry_of(bottom_records))

    lines = [
        "# Sector rotation monitor",
        "",
        f"> 📅 Date: {date_str}",
        "",
        f"## 📈 Leading sector today: {top_industry}",
        "",
        "### 📋 Stocks",
        "",
        *_stock_list(top_records),
        "",
        f"## 📊 High-potential sector today: {bottom_industry}",
        "",
        "### 📋 Stocks",
        "",
        *_stock_list(bottom_records),
        "",
        "## 📉 Industry performance trend",
        "",
    ]

    if image_url:
        lines.append(f"![Industry performance trend]({image_url})")
    else:
        lines.append(NO_CHART_NOTICE)
    lines.append("")

    return "\n".join(lines) + "\n"


def render_markdown(text: str) -> str:
    """Render Markdown to HTML, keeping single line breaks."""
    return markdown.markdown(text, extensions=["nl2br", "sane_lists"])


def format_rotation_item(
    files: RotationFiles,
    top_records: List[CsvRecord],
    bottom_records: List[CsvRecord],
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
) -> FeedItem:
    image_url = build_image_url(image_base_url, files.image.name) if files.image else None
    body = format_rotation_markdown(files.date_str, top_records, bottom_records, image_url)

    return FeedItem(
        title=f"{files.date_str} Sector rotation monitor",
        description=render_markdown(body),
        pub_date=resolve_item_date(files.date_str),
        category=list(ITEM_CATEGORIES),
        guid=f"rotation:{files.date_str}",
        is_html=True,
    )


def read_failure_feed(directory: str, error: OSError) -> Feed:
    """Degraded feed served when the directory can't be listed."""
    return Feed(
        title=READ_FAILED_TITLE,
        link=directory,
        description=f"Unable to read directory: {directory}, error: {error}",
    )


async def build_rotation_feed(
    directory: str,
    image_base_url: str = DEFAULT_IMAGE_BASE_URL,
) -> Feed:
    """Scan ``directory`` and build the rotation monitor feed.

    Args:
        directory: Absolute path of the screener output folder
        image_base_url: Base URL the chart file names are appended to

    Raises:
        DirectoryReadError: If the directory can't be listed; carries the
            degraded feed to serve instead
        OSError: If a matched CSV file can't be read
    """
    loop = asyncio.get_event_loop()
    try:
        entries = await loop.run_in_executor(None, list_directory, directory)
    except OSError as e:
        logger.warning(f"Failed to list rotation directory {directory}: {e}")
        raise DirectoryReadError(directory, e, feed=read_failure_feed(directory, e))

    has_top = bool(match_files(entries, TOP_INDUSTRY))
    has_bottom = bool(match_files(entries, BOTTOM_INDUSTRY))
    if not has_top or not has_bottom:
        logger.info(f"No rotation CSV files in {directory}")
        return Feed(title=FEED_TITLE, link=directory, description=NO_FILES_DESCRIPTION)

    days = group_rotation_files(entries)
    if not days:
        logger.info(f"No complete rotation days in {directory}")
        return Feed(title=FEED_TITLE, link=directory, description=NO_PAIRS_DESCRIPTION)

    items = await asyncio.gather(*[
        _build_day(files, image_base_url) for files in days
    ])
    logger.info(f"Built rotation feed for {directory} with {len(items)} items")

    return Feed(
        title=FEED_TITLE,
        link=directory,
        description=FEED_DESCRIPTION,
        items=list(items),
    )


async def _build_day(files: RotationFiles, image_base_url: str) -> FeedItem:
    top_records, bottom_records = await read_csv_files(
        [files.top, files.bottom],
        placeholder=MISSING_CELL,
    )
    return format_rotation_item(files, top_records, bottom_records, image_base_url)
