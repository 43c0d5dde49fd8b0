"""Text helpers shared by normalization and filtering."""

from __future__ import annotations

import re

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_LIST_SPLIT_RE = re.compile(r"[,;]")


def slugify(text: str | None) -> str:
    """Convert text to a lowercase, hyphenated slug.

    Runs of characters outside a-z0-9 collapse to a single hyphen and
    leading/trailing hyphens are stripped. The result is used both for tag
    identity ("Art", "art" and " Art " share a slug) and for derived asset
    paths, so it is never truncated and has no placeholder for empty input.

    Args:
        text: The text to slugify

    Returns:
        The slug, possibly empty

    Example:
        >>> slugify("  Art & Culture ")
        'art-culture'
    """
    slug = (text or "").strip().lower()
    slug = _NON_ALNUM_RE.sub("-", slug)
    return slug.strip("-")


def parse_list(value: str | None) -> list[str]:
    """Split a multi-valued cell on commas and semicolons.

    Pieces are trimmed and empty pieces dropped; order and duplicates are kept.

    Example:
        >>> parse_list("Art, Events;; Music ")
        ['Art', 'Events', 'Music']
    """
    pieces = (piece.strip() for piece in _LIST_SPLIT_RE.split(value or ""))
    return [piece for piece in pieces if piece]
