"""
Load orchestration for the link directory.

This module coordinates one feed load:
1. Fetch the feed text (directly or through the caching proxy)
2. Parse it into header-keyed records
3. Resolve logical fields against the header row
4. Normalize every row into an Entry
5. Publish the resulting Directory as a single immutable value

Failures at any stage become a `failed` LoadState carrying the message;
they are never raised to the caller of `DirectoryLoader.load`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Awaitable, Callable

from .config import AppConfig, AssetsConfig, ColumnsConfig, get_feed_url
from .core.columns import resolve_columns
from .core.entry import detect_tag_mode, normalize_records
from .core.filters import filter_entries, tag_vocabulary
from .core.types import ColumnResolution, Entry, FilterState, TagMode
from .errors import DirectoryLoadError, EmptyFeed, FetchFailure
from .fetch.fetcher import FetchResult, fetch_feed_async
from .input.csv_parser import parse_csv
from .utils.logging import log_event

FetchFn = Callable[[str], Awaitable[FetchResult]]


@dataclass
class _Ticket:
    """Request sequence number an in-flight fetch publishes under."""

    sequence: int


@dataclass(frozen=True)
class Directory:
    """An immutable, fully normalized feed load.

    Attributes:
        entries: Canonical entries in feed order
        tag_mode: Tag scheme derived once from the entries
        resolution: Header resolution the entries were built with
        source: Where the feed came from (URL or file path)
    """

    entries: tuple[Entry, ...]
    tag_mode: TagMode
    resolution: ColumnResolution = field(default_factory=ColumnResolution)
    source: str | None = None

    def view(self, state: FilterState | None = None) -> list[Entry]:
        """Entries visible under the given filter state."""
        state = state or FilterState()
        return filter_entries(
            self.entries, state.selected_tags, state.query, self.tag_mode, state.sort
        )

    def tags(self) -> list[str]:
        """Tag chips for this directory."""
        return tag_vocabulary(self.entries, self.tag_mode)


def build_directory(
    text: str,
    columns: ColumnsConfig | None = None,
    assets: AssetsConfig | None = None,
    source: str | None = None,
) -> Directory:
    """Run parse -> resolve -> normalize over feed text.

    Raises:
        MalformedFeed: If the text is not valid CSV
        EmptyFeed: If the text has no header row or no data rows
    """
    parsed = parse_csv(text)
    if not parsed.headers:
        raise EmptyFeed("Feed has no header row")
    if not parsed.records:
        raise EmptyFeed("Feed has no data rows")

    resolution = resolve_columns(parsed.headers, (columns or ColumnsConfig()).as_candidates())
    entries = tuple(normalize_records(parsed.records, resolution, assets))
    return Directory(
        entries=entries,
        tag_mode=detect_tag_mode(entries),
        resolution=resolution,
        source=source,
    )


def load_directory_file(path: Path, cfg: AppConfig) -> Directory:
    """Build a directory from a local CSV export.

    Raises:
        DirectoryLoadError: On unreadable, malformed or empty files
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FetchFailure(f"Could not read {path}: {exc}", url=str(path)) from exc
    return build_directory(text, cfg.columns, cfg.assets, source=str(path))


@dataclass(frozen=True)
class LoadState:
    """Published state of the directory.

    Attributes:
        status: "idle", "loading", "loaded" or "failed"
        directory: The loaded directory; only set when status is "loaded"
        error: Failure message; only set when status is "failed"
        source: URL of the load this state describes
    """

    status: str = "idle"
    directory: Directory | None = None
    error: str | None = None
    source: str | None = None

    @property
    def loaded(self) -> bool:
        return self.status == "loaded" and self.directory is not None

    def visible(self, state: FilterState | None = None) -> list[Entry]:
        """Filtered entries; empty unless a load has completed successfully."""
        if not self.loaded:
            return []
        return self.directory.view(state)

    def tags(self) -> list[str]:
        if not self.loaded:
            return []
        return self.directory.tags()


class DirectoryLoader:
    """Loads a feed and publishes the result atomically.

    Runs on a single asyncio event loop. Every `load()` call takes a new
    sequence number and only the newest request may publish, so an older
    load that finishes late is discarded. A call for a URL that already has
    a fetch in flight joins that fetch and hands it its own sequence number.
    """

    def __init__(
        self,
        cfg: AppConfig,
        fetch: FetchFn | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the loader.

        Args:
            cfg: Application configuration
            fetch: Coroutine function mapping a URL to a FetchResult;
                defaults to `fetch_feed_async` with `cfg.feed`
            logger: Logger for structured load events
        """
        self._cfg = cfg
        self._fetch = fetch or (lambda url: fetch_feed_async(url, cfg.feed))
        self._logger = logger or logging.getLogger(__name__)
        self._state = LoadState()
        self._sequence = 0
        self._inflight: dict[str, tuple[asyncio.Task[LoadState], _Ticket]] = {}

    @property
    def state(self) -> LoadState:
        return self._state

    async def load(self, url: str | None = None) -> LoadState:
        """Load the feed at `url` (or the configured feed URL).

        Returns:
            The state this load produced. If a newer load has started in
            the meantime, the returned state is not the published one.
        """
        url = url or get_feed_url(self._cfg.feed)
        if not url:
            self._sequence += 1
            return self._publish(
                self._sequence,
                LoadState(status="failed", error="No feed URL configured"),
            )

        self._sequence += 1
        self._state = LoadState(status="loading", source=url)

        pending = self._inflight.get(url)
        if pending is not None and not pending[0].done():
            task, ticket = pending
            # The joined fetch now answers the newest request
            ticket.sequence = self._sequence
            log_event(
                self._logger,
                "Joining in-flight load",
                event="load_joined",
                url=url,
                sequence=self._sequence,
            )
            return await asyncio.shield(task)

        ticket = _Ticket(self._sequence)
        task = asyncio.ensure_future(self._run(url, ticket))
        self._inflight[url] = (task, ticket)
        task.add_done_callback(lambda done: self._forget(url, done))
        return await asyncio.shield(task)

    def _forget(self, url: str, task: asyncio.Task[LoadState]) -> None:
        pending = self._inflight.get(url)
        if pending is not None and pending[0] is task:
            del self._inflight[url]

    async def _run(self, url: str, ticket: _Ticket) -> LoadState:
        log_event(
            self._logger, "Load start", event="load_start", url=url, sequence=ticket.sequence
        )
        try:
            result = await self._fetch(url)
            if not result.ok:
                raise FetchFailure(
                    result.error or "Fetch failed", url=url, status_code=result.status_code
                )
            directory = build_directory(
                result.text or "", self._cfg.columns, self._cfg.assets, source=url
            )
        except DirectoryLoadError as exc:
            self._logger.warning(f"Could not load directory from {url}: {exc}")
            state = LoadState(status="failed", error=str(exc), source=url)
        except Exception as exc:  # noqa: BLE001
            self._logger.exception(f"Unexpected error loading directory from {url}")
            state = LoadState(
                status="failed", error=f"{type(exc).__name__}: {exc}", source=url
            )
        else:
            log_event(
                self._logger,
                "Load complete",
                event="load_complete",
                url=url,
                rows=len(directory.entries),
                tag_mode=directory.tag_mode.value,
                unresolved=directory.resolution.unresolved(),
            )
            state = LoadState(status="loaded", directory=directory, source=url)
        return self._publish(ticket.sequence, state)

    def _publish(self, sequence: int, state: LoadState) -> LoadState:
        if sequence != self._sequence:
            log_event(
                self._logger,
                "Discarding stale load",
                event="load_discarded",
                url=state.source,
                sequence=sequence,
                latest=self._sequence,
            )
            return state
        self._state = state
        return state
