"""CSV parser for published spreadsheet exports.

This module decodes the comma-separated text a published sheet serves
into header-keyed records. The dialect is the permissive one sheets emit:
- comma delimiter, double-quote quoting, quoted cells may span lines
- empty lines are skipped; a row of empty cells (`,,,`) is still a row
- short rows are padded with empty strings; surplus cells are dropped
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
import io
import logging
from types import MappingProxyType

from ..core.types import RawRecord
from ..errors import MalformedFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedFeed:
    """Decoded feed contents.

    Attributes:
        headers: Column names in feed order, as they appear in the header row
        records: One read-only mapping per data row, in feed order
    """

    headers: tuple[str, ...] = ()
    records: list[RawRecord] = field(default_factory=list)


def parse_csv(text: str, header: bool = True) -> ParsedFeed:
    """Parse comma-separated text into header-keyed records.

    Args:
        text: The full feed body
        header: When True the first non-empty line names the columns;
            otherwise columns are named "1", "2", ... by position

    Returns:
        ParsedFeed with headers and records. Text with no rows yields an
        empty ParsedFeed; deciding whether that is an error is up to the caller.

    Raises:
        MalformedFeed: If the text is not valid CSV (e.g. a stray or
            unterminated quote)
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        rows = [row for row in reader if row]
    except csv.Error as exc:
        raise MalformedFeed(f"Malformed CSV near line {reader.line_num}: {exc}") from exc

    if not rows:
        return ParsedFeed()

    if header:
        header_row, data_rows = rows[0], rows[1:]
    else:
        width = max(len(row) for row in rows)
        header_row, data_rows = [str(i + 1) for i in range(width)], rows

    # (position, name) for every usable column; first of duplicate names wins
    columns: list[tuple[int, str]] = []
    seen: set[str] = set()
    for position, name in enumerate(header_row):
        if not name.strip() or name in seen:
            continue
        seen.add(name)
        columns.append((position, name))

    records: list[RawRecord] = []
    for index, row in enumerate(data_rows):
        if len(row) > len(header_row):
            logger.debug(
                f"Row {index}: dropping {len(row) - len(header_row)} cells beyond the header"
            )
        values = {name: (row[position] if position < len(row) else "") for position, name in columns}
        records.append(MappingProxyType(values))

    return ParsedFeed(headers=tuple(name for _, name in columns), records=records)
