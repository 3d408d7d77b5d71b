"""
Stock picker feed: one item per daily ``*_selected_stocks.csv`` file.
"""

import asyncio
import logging
from typing import List

from ..models.feed import Feed, FeedItem
from ..sources import (
    CsvRecord,
    DatedFile,
    SELECTED_STOCKS,
    list_directory,
    match_files,
    sort_by_date,
    rollover_embedded_date,
    read_csv_files,
)

logger = logging.getLogger(__name__)

FEED_TITLE = "Daily stock picks"
FEED_DESCRIPTION = "Daily stock selection results"
NO_FILES_DESCRIPTION = "No stock selection files (YYYYMMDD_<type>_selected_stocks.csv) were found in this directory"
DEFAULT_LABEL = "selected"


def format_type_label(label: str) -> str:
    """Turn a filename label such as ``value_growth`` into ``Value growth``."""
    text = (label or DEFAULT_LABEL).replace('_', ' ')
    return text[:1].upper() + text[1:]


def format_stock_picks(dated_file: DatedFile, records: List[CsvRecord]) -> FeedItem:
    """Build the feed item for one selection file.

    The description is Markdown and is deliberately left unrendered.
    """
    label = dated_file.label or DEFAULT_LABEL
    type_name = format_type_label(label)
    date_str = dated_file.date_str

    lines = [
        f"### {type_name} stock picks",
        "",
        f"**Date**: {date_str}",
        f"**Stocks selected**: {len(records)}",
        "",
    ]

    for index, record in enumerate(records, start=1):
        lines.append(f"{index}. **{record.get('name', '')}** ({record.get('ts_code', '')})")
        lines.append(f"   - Industry: {record.get('industry', '')}")
        lines.append(f"   - Weight: {record.get('target_weight', '')}")
        if record.get('pe'):
            lines.append(f"   - PE: {record['pe']}")
        if record.get('pe_percentile'):
            lines.append(f"   - PE percentile: {record['pe_percentile']}")
        lines.append("")

    return FeedItem(
        title=f"{date_str} {type_name} stock picks",
        description="\n".join(lines) + "\n",
        pub_date=rollover_embedded_date(date_str),
        category=[label],
        guid=dated_file.name,
        is_html=False,
    )


async def build_stockpicker_feed(directory: str) -> Feed:
    """Scan ``directory`` and build the stock picker feed.

    Listing and read failures are not handled here: an unreadable directory
    or a single unreadable file fails the whole request.

    Raises:
        OSError: If the directory or any matched file can't be read
    """
    loop = asyncio.get_event_loop()
    entries = await loop.run_in_executor(None, list_directory, directory)

    stock_files = sort_by_date(match_files(entries, SELECTED_STOCKS))
    if not stock_files:
        logger.info(f"No stock selection files in {directory}")
        return Feed(title=FEED_TITLE, link=directory, description=NO_FILES_DESCRIPTION)

    record_sets = await read_csv_files([f.path for f in stock_files])

    items = [
        format_stock_picks(dated_file, records)
        for dated_file, records in zip(stock_files, record_sets)
    ]
    logger.info(f"Built stock picker feed for {directory} with {len(items)} items")

    return Feed(
        title=FEED_TITLE,
        link=directory,
        description=FEED_DESCRIPTION,
        items=items,
    )
