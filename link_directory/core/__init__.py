"""
Core domain models and business logic.

This package contains the canonical data types, column resolution, row
normalization and filtering, independent of how the feed is retrieved.
"""

from .types import ColumnResolution, Entry, FilterState, SortMode, TagMode
from .text import parse_list, slugify
from .columns import resolve_columns
from .entry import detect_tag_mode, normalize_records, normalize_row
from .filters import filter_entries, tag_vocabulary

__all__ = [
    "ColumnResolution",
    "Entry",
    "FilterState",
    "SortMode",
    "TagMode",
    "parse_list",
    "slugify",
    "resolve_columns",
    "detect_tag_mode",
    "normalize_records",
    "normalize_row",
    "filter_entries",
    "tag_vocabulary",
]
