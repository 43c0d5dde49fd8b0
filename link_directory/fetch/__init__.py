"""
Feed retrieval.

This package handles HTTP fetching of the published spreadsheet export,
directly or through a caching proxy.
"""

from .fetcher import FetchResult, build_request, fetch_feed_async

__all__ = [
    "FetchResult",
    "build_request",
    "fetch_feed_async",
]
