"""
Screener output discovery: directory listing and CSV parsing.
"""

from .lister import (
    DirectoryEntry,
    DatedFile,
    DatedFilePattern,
    SELECTED_STOCKS,
    TOP_INDUSTRY,
    BOTTOM_INDUSTRY,
    PERFORMANCE_CHART,
    list_directory,
    match_files,
    sort_by_date,
    parse_embedded_date,
    resolve_item_date,
    rollover_embedded_date,
)
from .csv_parser import CsvRecord, parse_csv, read_csv_files

__all__ = [
    'DirectoryEntry',
    'DatedFile',
    'DatedFilePattern',
    'SELECTED_STOCKS',
    'TOP_INDUSTRY',
    'BOTTOM_INDUSTRY',
    'PERFORMANCE_CHART',
    'list_directory',
    'match_files',
    'sort_by_date',
    'parse_embedded_date',
    'resolve_item_date',
    'rollover_embedded_date',
    'CsvRecord',
    'parse_csv',
    'read_csv_files',
]
