"""
Directory listing and dated-filename matching for screener output folders.

Every file the screener writes starts with an 8-digit ``YYYYMMDD`` date,
followed by a fixed suffix that identifies what the file holds.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class DirectoryEntry:
    """An immediate child of a scanned directory."""
    name: str
    is_file: bool
    path: Path


@dataclass
class DatedFile:
    """A directory entry whose name matched a dated filename pattern."""
    entry: DirectoryEntry
    date_str: str
    label: str = ""

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def path(self) -> Path:
        return self.entry.path


class DatedFilePattern:
    """A filename pattern with a leading date group and optional label group."""

    def __init__(self, name: str, regex: str):
        self.name = name
        self.regex = re.compile(regex, re.ASCII)

    def match(self, filename: str) -> Optional[DatedFile]:
        m = self.regex.match(filename)
        if not m:
            return None
        label = m.group(2) if self.regex.groups >= 2 else None
        return DatedFile(
            entry=DirectoryEntry(name=filename, is_file=True, path=Path(filename)),
            date_str=m.group(1),
            label=label or "",
        )

    def __repr__(self) -> str:
        return f"DatedFilePattern({self.name!r}, {self.regex.pattern!r})"


SELECTED_STOCKS = DatedFilePattern("selected_stocks", r"^(\d{8})_(?:(\w+)_)?selected_stocks\.csv$")
TOP_INDUSTRY = DatedFilePattern("top_industry", r"^(\d{8})_top_industry_stocks\.csv$")
BOTTOM_INDUSTRY = DatedFilePattern("bottom_industry", r"^(\d{8})_bottom_industry_stocks\.csv$")
PERFORMANCE_CHART = DatedFilePattern("performance_chart", r"^(\d{8})_industry_performance_trend\.png$")


def list_directory(directory: Union[str, Path]) -> List[DirectoryEntry]:
    """List the immediate children of ``directory``.

    Raises:
        OSError: If the directory does not exist, is not a directory or
            can't be read.
    """
    root = Path(directory)
    entries = []
    for child in root.iterdir():
        entries.append(DirectoryEntry(name=child.name, is_file=child.is_file(), path=child))
    logger.debug(f"Listed {len(entries)} entries in {root}")
    return entries


def match_files(entries: Iterable[DirectoryEntry], pattern: DatedFilePattern) -> List[DatedFile]:
    """Keep regular files whose name matches ``pattern``."""
    matched = []
    for entry in entries:
        if not entry.is_file:
            continue
        found = pattern.match(entry.name)
        if found:
            found.entry = entry
            matched.append(found)
    return matched


def sort_by_date(files: Iterable[DatedFile]) -> List[DatedFile]:
    """Sort newest first.

    Plain string comparison is enough because the date prefix is always
    eight zero-padded digits.
    """
    return sorted(files, key=lambda f: f.date_str, reverse=True)


def parse_embedded_date(date_str: str) -> Optional[date]:
    """Parse a ``YYYYMMDD`` string, returning None for impossible dates."""
    try:
        return datetime.strptime(date_str, "%Y%m%d").date()
    except ValueError:
        return None


def resolve_item_date(date_str: str) -> date:
    """Date for a feed item, falling back to today for impossible dates."""
    parsed = parse_embedded_date(date_str)
    if parsed is None:
        logger.warning(f"Invalid embedded date {date_str!r}, using today's date")
        return date.today()
    return parsed


def rollover_embedded_date(date_str: str) -> date:
    """Date for a feed item, carrying out-of-range fields into the next unit.

    Month 13 becomes January of the following year and day 30 of February
    becomes the 1st or 2nd of March. Only a year outside the supported range
    falls back to today.
    """
    year, month, day = int(date_str[:4]), int(date_str[4:6]), int(date_str[6:8])
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return date(year, month, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        logger.warning(f"Embedded date {date_str!r} is out of range, using today's date")
        return date.today()
