"""
Core data types for the link directory.

This module defines the data structures shared by every pipeline stage:
- RawRecord: One header-keyed row as decoded from the feed
- ColumnResolution: Which actual header serves each logical field
- Entry: A canonical, normalized directory item
- TagMode / SortMode: Enumerations switched on by filtering and listing
- FilterState: The user's current tag selection, query and sort
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping

from .text import slugify

RawRecord = Mapping[str, str]

LOGICAL_FIELDS = (
    "title",
    "link",
    "description",
    "categories",
    "main_tag",
    "hidden_tags",
    "logo_url",
    "image",
)


class TagMode(str, Enum):
    """Which tag scheme a loaded feed uses for filtering.

    PRIMARY when any entry carries a main tag, LEGACY otherwise.
    """

    PRIMARY = "primary"
    LEGACY = "legacy"


class SortMode(str, Enum):
    SOURCE = "source"
    AZ = "az"


@dataclass(frozen=True)
class ColumnResolution:
    """Actual header name for each logical field, or None if absent.

    Computed once per feed by `resolve_columns`.
    """

    title: str | None = None
    link: str | None = None
    description: str | None = None
    categories: str | None = None
    main_tag: str | None = None
    hidden_tags: str | None = None
    logo_url: str | None = None
    image: str | None = None

    def get(self, logical_field: str) -> str | None:
        return getattr(self, logical_field)

    def unresolved(self) -> list[str]:
        """Logical fields that matched no header."""
        return [name for name in LOGICAL_FIELDS if self.get(name) is None]


@dataclass(frozen=True)
class Entry:
    """A canonical directory item.

    Attributes:
        key: `slug(title)-rowIndex`, unique within a loaded feed
        title: Display title, never empty
        link: Destination URL, possibly empty
        description: Free text, possibly empty
        main_tag: Primary category, possibly empty
        hidden_tags: Search-only tags, never shown as chips
        legacy_categories: Tags from the older multi-category column
        image: Logo URL, possibly empty
        row_index: 0-based position of the row in the feed
    """

    key: str
    title: str
    link: str = ""
    description: str = ""
    main_tag: str = ""
    hidden_tags: tuple[str, ...] = ()
    legacy_categories: tuple[str, ...] = ()
    image: str = ""
    row_index: int = 0

    def chips(self, tag_mode: TagMode) -> tuple[str, ...]:
        """Tags displayed on the entry's card under the given mode."""
        if tag_mode is TagMode.PRIMARY:
            return (self.main_tag,) if self.main_tag else ()
        return self.legacy_categories

    def search_text(self) -> str:
        """Lowercased haystack for free-text search."""
        parts = [self.title, self.description, self.main_tag]
        parts.extend(self.hidden_tags)
        parts.extend(self.legacy_categories)
        return "\n".join(parts).lower()


@dataclass(frozen=True)
class FilterState:
    """User-controlled filter inputs.

    `selected_tags` keeps selection order for display; membership is
    compared through `slugify`, so "Art" and "art" are the same tag.
    """

    selected_tags: tuple[str, ...] = ()
    query: str = ""
    sort: SortMode = SortMode.SOURCE

    def toggle_tag(self, tag: str) -> "FilterState":
        wanted = slugify(tag)
        if any(slugify(t) == wanted for t in self.selected_tags):
            remaining = tuple(t for t in self.selected_tags if slugify(t) != wanted)
            return replace(self, selected_tags=remaining)
        return replace(self, selected_tags=self.selected_tags + (tag,))

    def clear_tags(self) -> "FilterState":
        return replace(self, selected_tags=())

    def with_query(self, query: str) -> "FilterState":
        return replace(self, query=query)

    def with_sort(self, sort: SortMode | str) -> "FilterState":
        return replace(self, sort=SortMode(sort))
