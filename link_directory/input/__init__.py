"""Input parsing for spreadsheet feeds."""

from .csv_parser import ParsedFeed, parse_csv

__all__ = ["ParsedFeed", "parse_csv"]
