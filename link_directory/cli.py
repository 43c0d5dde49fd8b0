"""
Command-line interface for the link directory.

Uses Typer to load a feed (from a URL or a local CSV export), apply tag
and text filters, and print the result with Rich. Supports loading .env
files so the feed URL can come from the environment.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.table import Table

from .config import AppConfig, load_config
from .core.types import FilterState, SortMode
from .errors import DirectoryLoadError
from .runner import Directory, DirectoryLoader, load_directory_file
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False)
console = Console()


def _prepare(
    config: Path | None,
    log_level: str | None,
    log_format: str | None,
    log_file: bool | None,
) -> AppConfig:
    # Load environment variables from .env if available
    load_dotenv()

    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = log_file
    return cfg


def _load(source: str | None, cfg: AppConfig, log_dir: Path) -> Directory:
    """Load from a local file when `source` names one, otherwise over HTTP."""
    logger = setup_logging(cfg.logging, log_dir)

    if source and Path(source).is_file():
        try:
            return load_directory_file(Path(source), cfg)
        except DirectoryLoadError as exc:
            _fail(str(exc))

    loader = DirectoryLoader(cfg, logger=logger)
    state = asyncio.run(loader.load(source))
    if not state.loaded:
        _fail(state.error or "unknown error")
    return state.directory


def _fail(message: str) -> None:
    console.print(f"[red]Could not load directory:[/red] {message}")
    raise typer.Exit(code=1)


@app.command("list")
def list_entries(
    source: str | None = typer.Option(
        None, "--source", "-s", help="Feed URL or local CSV path (defaults to the configured feed)."
    ),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Filter by tag; repeat to OR tags."),
    query: str = typer.Option("", "--query", "-q", help="Free-text search."),
    sort: SortMode | None = typer.Option(None, "--sort", help="source or az."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    log_dir: Path = typer.Option(Path("logs"), "--log-dir", help="Directory for log files."),
):
    """List directory entries matching the given filters.

    Args:
        source: Feed URL or local CSV path
        tag: Tags to filter by (OR within tags, AND with the query)
        query: Case-insensitive substring searched across text and tags
        sort: "source" keeps feed order, "az" sorts by title
        config: Optional path to YAML config file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Log file format (jsonl, plain)
        log_file: Enable/disable file logging
        log_dir: Directory for log files
    """
    cfg = _prepare(config, log_level, log_format, log_file)
    directory = _load(source, cfg, log_dir)

    state = FilterState(query=query, sort=sort or SortMode(cfg.view.sort))
    for selected in tag:
        state = state.toggle_tag(selected)
    rows = directory.view(state)

    table = Table(show_lines=False)
    table.add_column("Title", style="bold")
    table.add_column("Link", overflow="fold")
    table.add_column("Tags")
    table.add_column("Description")
    for entry in rows:
        table.add_row(
            entry.title,
            entry.link,
            ", ".join(entry.chips(directory.tag_mode)),
            entry.description,
        )

    if rows:
        console.print(table)
    console.print(f"{len(rows)} shown")


@app.command("tags")
def list_tags(
    source: str | None = typer.Option(
        None, "--source", "-s", help="Feed URL or local CSV path (defaults to the configured feed)."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_dir: Path = typer.Option(Path("logs"), "--log-dir", help="Directory for log files."),
):
    """Print the directory's filterable tags, one per line."""
    cfg = _prepare(config, log_level, None, None)
    directory = _load(source, cfg, log_dir)
    console.print(f"Tag mode: {directory.tag_mode.value}")
    for tag in directory.tags():
        console.print(tag, markup=False, highlight=False)


if __name__ == "__main__":
    app()
