"""Row normalization: raw feed records to canonical directory entries.

Every fallback (derived title, derived logo path, hyperlinked name cells)
is decided here so that filtering and presentation only ever see complete
`Entry` values. Normalization is a pure function of the record, its row
index and the column resolution; it never raises for odd row content.
"""

from __future__ import annotations

from dataclasses import dataclass
import html
import re
from typing import Callable, Iterable, Sequence
from urllib.parse import urlsplit

from ..config import AssetsConfig
from .text import parse_list, slugify
from .types import ColumnResolution, Entry, RawRecord, TagMode

# <a href="https://example.com" target="_blank">Example</a>
ANCHOR_RE = re.compile(
    r"<a\b[^>]*?\bhref\s*=\s*[\"']([^\"']*)[\"'][^>]*>(.*?)</a\s*>",
    re.IGNORECASE | re.DOTALL,
)
# =HYPERLINK("https://example.com", "Example")
HYPERLINK_RE = re.compile(
    r"^=?\s*HYPERLINK\(\s*\"([^\"]*)\"\s*(?:[,;]\s*\"([^\"]*)\"\s*)?\)$",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]+>")


@dataclass(frozen=True)
class _RowContext:
    """Cell values a single row's fallback rules are evaluated against."""

    title_cell: str
    link: str
    logo_url: str
    image: str
    row_index: int
    assets: AssetsConfig


def split_hyperlink(cell: str) -> tuple[str, str]:
    """Split a hyperlinked name cell into (text, url).

    Sheets export a linked cell either as an HTML anchor or as a
    HYPERLINK formula. Cells in neither form come back unchanged with an
    empty URL.

    Examples:
        >>> split_hyperlink('<a href="https://x.io">X Club</a>')
        ('X Club', 'https://x.io')
        >>> split_hyperlink('=HYPERLINK("https://x.io","X Club")')
        ('X Club', 'https://x.io')
        >>> split_hyperlink("Plain")
        ('Plain', '')
    """
    match = ANCHOR_RE.search(cell)
    if match:
        url = html.unescape(match.group(1)).strip()
        text = html.unescape(_TAG_RE.sub("", match.group(2))).strip()
        return text, url

    match = HYPERLINK_RE.match(cell.strip())
    if match:
        url = match.group(1).strip()
        text = (match.group(2) or "").strip()
        return text, url

    return cell, ""


def hostname_from_link(link: str) -> str:
    """Return the link's hostname without a leading "www.".

    Only absolute URLs with a scheme and host qualify; anything else,
    including strings the URL parser rejects, yields an empty string.

    Example:
        >>> hostname_from_link("https://www.example.com/page")
        'example.com'
    """
    if not link:
        return ""
    try:
        parts = urlsplit(link)
        host = parts.hostname
    except ValueError:
        return ""
    if not parts.scheme or not host:
        return ""
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def derived_logo_path(title: str, assets: AssetsConfig) -> str:
    slug = slugify(title)
    if not slug:
        return ""
    return f"{assets.logo_dir.rstrip('/')}/{slug}.{assets.logo_extension}"


def _title_from_cell(row: _RowContext) -> str:
    return row.title_cell


def _title_from_link_host(row: _RowContext) -> str:
    return hostname_from_link(row.link)


def _title_placeholder(row: _RowContext) -> str:
    return f"Untitled {row.row_index + 1}"


def _image_from_logo_url(row: _RowContext) -> str:
    return row.logo_url


def _image_from_legacy_cell(row: _RowContext) -> str:
    return row.image


def _image_from_title_slug(row: _RowContext) -> str:
    # Only a title supplied by the sheet names a static asset
    if not row.title_cell:
        return ""
    return derived_logo_path(row.title_cell, row.assets)


Rule = Callable[[_RowContext], str]

TITLE_RULES: tuple[Rule, ...] = (_title_from_cell, _title_from_link_host, _title_placeholder)
IMAGE_RULES: tuple[Rule, ...] = (
    _image_from_logo_url,
    _image_from_legacy_cell,
    _image_from_title_slug,
)


def _first_non_empty(rules: Sequence[Rule], row: _RowContext) -> str:
    for rule in rules:
        value = rule(row)
        if value:
            return value
    return ""


def normalize_row(
    record: RawRecord,
    row_index: int,
    resolution: ColumnResolution,
    assets: AssetsConfig | None = None,
) -> Entry:
    """Build the canonical Entry for one feed row.

    Args:
        record: Header-keyed cell values for the row
        row_index: 0-based position of the row among data rows
        resolution: Header resolution computed once for the feed
        assets: Derived logo path convention (defaults apply when None)

    Returns:
        An Entry with a non-empty title and a key unique to this row index
    """

    def cell(logical_field: str) -> str:
        header = resolution.get(logical_field)
        if header is None:
            return ""
        return (record.get(header) or "").strip()

    title_cell = cell("title")
    link = cell("link")
    text, url = split_hyperlink(title_cell)
    if url:
        title_cell = text
        link = link or url

    row = _RowContext(
        title_cell=title_cell,
        link=link,
        logo_url=cell("logo_url"),
        image=cell("image"),
        row_index=row_index,
        assets=assets or AssetsConfig(),
    )
    title = _first_non_empty(TITLE_RULES, row)
    main_tags = parse_list(cell("main_tag"))

    return Entry(
        key=f"{slugify(title)}-{row_index}",
        title=title,
        link=link,
        description=cell("description"),
        main_tag=main_tags[0] if main_tags else "",
        hidden_tags=tuple(parse_list(cell("hidden_tags"))),
        legacy_categories=tuple(parse_list(cell("categories"))),
        image=_first_non_empty(IMAGE_RULES, row),
        row_index=row_index,
    )


def normalize_records(
    records: Iterable[RawRecord],
    resolution: ColumnResolution,
    assets: AssetsConfig | None = None,
) -> list[Entry]:
    """Normalize every record in feed order."""
    return [
        normalize_row(record, index, resolution, assets)
        for index, record in enumerate(records)
    ]


def detect_tag_mode(entries: Iterable[Entry]) -> TagMode:
    """PRIMARY if any entry has a main tag, otherwise LEGACY."""
    if any(entry.main_tag for entry in entries):
        return TagMode.PRIMARY
    return TagMode.LEGACY
