"""
Filtering, search and tag vocabulary over a loaded directory.

Everything here is recomputed from scratch for each filter change; the
datasets are small (tens to low hundreds of rows) and the functions are
pure, so identical inputs always produce identical output.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .text import slugify
from .types import Entry, SortMode, TagMode


def _entry_tag_slugs(entry: Entry, tag_mode: TagMode) -> set[str]:
    if tag_mode is TagMode.PRIMARY:
        return {slugify(entry.main_tag)} if entry.main_tag else set()
    return {slugify(tag) for tag in entry.legacy_categories}


def filter_entries(
    entries: Sequence[Entry],
    selected_tags: Iterable[str],
    query: str,
    tag_mode: TagMode,
    sort: SortMode | str = SortMode.SOURCE,
) -> list[Entry]:
    """Return the visible subset of entries.

    Filtering happens in two conjunctive stages:
    1. Tag filter: with no tags selected everything passes; otherwise an
       entry passes when one of its tags (main tag under PRIMARY mode,
       legacy categories under LEGACY mode) slug-matches a selected tag.
       Selected tags combine with OR.
    2. Text filter: a query that trims to empty passes everything;
       otherwise the lowercased query must be a substring of the entry's
       title, description, main tag, hidden tags or legacy categories.

    Args:
        entries: Entries in feed order
        selected_tags: Selected tag labels, compared by slug
        query: Free-text search string
        tag_mode: Which tag scheme the loaded feed uses
        sort: SOURCE keeps feed order; AZ sorts by title, case-insensitively,
            breaking ties by original row index

    Returns:
        A new list; the input sequence is not modified
    """
    wanted = {slugify(tag) for tag in selected_tags}
    needle = (query or "").strip().lower()

    visible: list[Entry] = []
    for entry in entries:
        if wanted and not (_entry_tag_slugs(entry, tag_mode) & wanted):
            continue
        if needle and needle not in entry.search_text():
            continue
        visible.append(entry)

    if SortMode(sort) is SortMode.AZ:
        visible.sort(key=lambda entry: (entry.title.casefold(), entry.row_index))
    return visible


def tag_vocabulary(entries: Iterable[Entry], tag_mode: TagMode) -> list[str]:
    """Distinct filterable tags, sorted case-insensitively.

    Tags that share a slug collapse into one chip labelled with the first
    spelling seen in feed order.
    """
    labels: dict[str, str] = {}
    for entry in entries:
        if tag_mode is TagMode.PRIMARY:
            tags: Iterable[str] = (entry.main_tag,) if entry.main_tag else ()
        else:
            tags = entry.legacy_categories
        for tag in tags:
            identity = slugify(tag) or tag.casefold()
            labels.setdefault(identity, tag)
    return sorted(labels.values(), key=lambda tag: (tag.casefold(), tag))
