"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FeedConfig: Feed source and HTTP fetching settings
- ColumnsConfig: Candidate header names per logical field
- AssetsConfig: Derived logo path convention
- ViewConfig: Default listing behavior
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class FeedConfig:
    """Configuration for retrieving the published spreadsheet feed.

    Attributes:
        url: Published-sheet CSV export URL
        proxy_url: Optional caching proxy endpoint; receives the feed URL as its `url` parameter
        url_env: Environment variable that overrides `url` when set
        timeout_seconds: HTTP request timeout
        retries: Number of transport-level retry attempts after the first failure
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    url: str | None = None
    proxy_url: str | None = None
    url_env: str = "LINK_DIRECTORY_FEED_URL"
    timeout_seconds: float = 15.0
    retries: int = 0
    trust_env: bool = True
    user_agent: str = "link-directory/0.1 (+https://github.com)"


@dataclass
class ColumnsConfig:
    """Candidate header names for each logical field, in priority order.

    Matching against the feed's header row is case-insensitive and ignores
    surrounding whitespace; the first candidate present wins.
    """

    title: list[str] = field(
        default_factory=lambda: ["Name (with url hyperlinked)", "Name", "Title", "Project"]
    )
    link: list[str] = field(default_factory=lambda: ["URL", "Link", "Website"])
    description: list[str] = field(default_factory=lambda: ["Description", "Summary", "About"])
    categories: list[str] = field(default_factory=lambda: ["Category", "Categories"])
    main_tag: list[str] = field(default_factory=lambda: ["Main Tag", "Primary Tag", "Tag"])
    hidden_tags: list[str] = field(
        default_factory=lambda: ["Hidden Tags", "Search Tags", "Tags"]
    )
    logo_url: list[str] = field(default_factory=lambda: ["Logo URL", "Logo Link"])
    image: list[str] = field(default_factory=lambda: ["Logo", "Image"])

    def as_candidates(self) -> dict[str, list[str]]:
        """Return the logical field -> candidate list mapping."""
        return asdict(self)


@dataclass
class AssetsConfig:
    """Configuration for derived logo paths.

    Attributes:
        logo_dir: Static asset directory the derived path points into
        logo_extension: File extension of per-entry logo files
    """

    logo_dir: str = "/logos"
    logo_extension: str = "png"


@dataclass
class ViewConfig:
    """Configuration for listing output.

    Attributes:
        sort: "source" to keep feed order, "az" to sort by title
    """

    sort: str = "source"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "directory.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    feed: FeedConfig = field(default_factory=FeedConfig)
    columns: ColumnsConfig = field(default_factory=ColumnsConfig)
    assets: AssetsConfig = field(default_factory=AssetsConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        feed=FeedConfig(**data["feed"]),
        columns=ColumnsConfig(**data["columns"]),
        assets=AssetsConfig(**data["assets"]),
        view=ViewConfig(**data["view"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_feed_url(cfg: FeedConfig) -> str | None:
    """Get the feed URL from the environment override or inline config."""
    from_env = os.getenv(cfg.url_env) if cfg.url_env else None
    if from_env:
        return from_env.strip()
    return cfg.url
