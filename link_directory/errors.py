"""Errors raised while loading a directory feed.

Each failure is converted to a `failed` load state at the pipeline
boundary (see `runner.DirectoryLoader`); none of them escapes to callers
of `DirectoryLoader.load`.
"""

from __future__ import annotations


class DirectoryLoadError(Exception):
    """Base class for failures that prevent a feed from loading."""


class FetchFailure(DirectoryLoadError):
    """The feed (or its caching proxy) could not be retrieved."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MalformedFeed(DirectoryLoadError):
    """The feed text could not be decoded as comma-separated data."""


class EmptyFeed(DirectoryLoadError):
    """The feed has no header row or no data rows after it."""
