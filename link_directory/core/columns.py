"""
Column resolution for loosely structured spreadsheet feeds.

Published sheets rename, reorder and drop columns over time, so logical
fields are looked up through a prioritized list of acceptable header names
instead of by position. Resolution happens once per feed; the normalizer
then reads cells through the resulting table for every row.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from .types import LOGICAL_FIELDS, ColumnResolution

logger = logging.getLogger(__name__)


def _header_key(name: str) -> str:
    return name.strip().lower()


def resolve_columns(
    headers: Iterable[str],
    candidates: Mapping[str, Sequence[str]],
) -> ColumnResolution:
    """Map logical fields onto the headers actually present in a feed.

    For each logical field, the first candidate (in declared order) whose
    trimmed, lowercased form equals a trimmed, lowercased actual header wins.
    The returned value is the header exactly as it appears in the feed, so
    it can be used to index raw records directly.

    Args:
        headers: Header names from the feed's first row
        candidates: Logical field name -> candidate header names, highest
            priority first. Fields missing from the mapping resolve to None.

    Returns:
        ColumnResolution with None for every field no candidate matched

    Raises:
        ValueError: If `candidates` names a field that is not a logical field
    """
    unknown = set(candidates) - set(LOGICAL_FIELDS)
    if unknown:
        raise ValueError(f"Unknown logical fields: {', '.join(sorted(unknown))}")

    # First occurrence wins when two headers differ only by case or padding
    present: dict[str, str] = {}
    for header in headers:
        present.setdefault(_header_key(header), header)

    resolved: dict[str, str | None] = {}
    for logical_field in LOGICAL_FIELDS:
        resolved[logical_field] = None
        for candidate in candidates.get(logical_field, ()):
            if not candidate.strip():
                continue
            actual = present.get(_header_key(candidate))
            if actual is not None:
                resolved[logical_field] = actual
                break

    resolution = ColumnResolution(**resolved)
    logger.debug(f"Resolved columns: {resolved}")
    return resolution
