"""
Minimal CSV parsing for screener output.

The screener writes plain comma-separated values without quoting, so rows
are split on every comma. Quoted fields containing commas and fields with
embedded newlines are NOT supported; such input is split naively.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Union

logger = logging.getLogger(__name__)

CsvRecord = Dict[str, str]


def parse_csv(content: str, placeholder: str = "") -> List[CsvRecord]:
    """Parse CSV text into one mapping per data row.

    The first line is the header. Blank lines are skipped. Every header gets
    a value in every record: cells that are blank or missing from a short
    row are filled with ``placeholder``, and surplus cells are dropped.

    Args:
        content: Raw file text
        placeholder: Value used for blank or missing cells

    Returns:
        Records in file order
    """
    # A leading byte-order mark would otherwise stick to the first header
    lines = content.lstrip("\ufeff").strip().splitlines()
    if not lines:
        return []

    headers = [h.strip() for h in lines[0].split(',')]
    records = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = [v.strip() for v in line.split(',')]
        record = {}
        for index, header in enumerate(headers):
            value = values[index] if index < len(values) else ""
            record[header] = value or placeholder
        records.append(record)

    return records


async def read_csv_files(
    paths: Sequence[Union[str, Path]],
    placeholder: str = "",
) -> List[List[CsvRecord]]:
    """Read and parse several CSV files concurrently.

    Results come back in the order of ``paths``. The first failed read
    propagates and the whole batch is abandoned.
    """
    loop = asyncio.get_event_loop()
    contents = await asyncio.gather(*[
        loop.run_in_executor(None, _read_text, Path(path))
        for path in paths
    ])
    return [parse_csv(content, placeholder) for content in contents]


def _read_text(path: Path) -> str:
    logger.debug(f"Reading {path}")
    # Undecodable bytes become U+FFFD rather than failing the request
    return path.read_text(encoding="utf-8-sig", errors="replace")
