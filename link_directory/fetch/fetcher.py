"""
HTTP retrieval of the published spreadsheet feed.

The feed is fetched either directly or through a caching proxy that takes
the feed URL as its single `url` query parameter and forwards the origin's
body and status. Both paths share the same result shape, so callers only
see "text or a failure".

Retries cover transport errors only, with a linear backoff between
attempts.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from ..config import FeedConfig

_ERROR_BODY_LIMIT = 500


@dataclass
class FetchResult:
    """Result of a feed fetch.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The feed URL that was requested (not the proxy URL)
        status_code: HTTP status code, or None if no response was received
        text: The response body text, or None on error
        error: Error message if the fetch failed, None on success
    """

    url: str
    status_code: int | None
    text: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_request(url: str, cfg: FeedConfig) -> tuple[str, dict[str, str]]:
    """Return the (endpoint, query params) to request for a feed URL.

    Example:
        >>> build_request("https://sheet/csv", FeedConfig(proxy_url="https://site/api/sheet-proxy"))
        ('https://site/api/sheet-proxy', {'url': 'https://sheet/csv'})
    """
    if cfg.proxy_url:
        return cfg.proxy_url, {"url": url}
    return url, {}


def _result_from_response(url: str, resp: httpx.Response) -> FetchResult:
    if resp.is_success:
        return FetchResult(url=url, status_code=resp.status_code, text=resp.text, error=None)
    # The proxy reports its own failures as the response body
    body = resp.text.strip()[:_ERROR_BODY_LIMIT]
    error = f"HTTP {resp.status_code}: {body}" if body else f"HTTP {resp.status_code}"
    return FetchResult(url=url, status_code=resp.status_code, text=None, error=error)


async def fetch_feed_async(
    url: str,
    cfg: FeedConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """Fetch the feed text using an async httpx client with retry logic.

    Non-2xx responses are returned as failures without retrying; only
    transport errors (connection, timeout) are retried.

    Args:
        url: The published feed URL
        cfg: Feed settings (proxy, timeout, retries, headers)
        transport: Optional httpx transport, used by tests

    Returns:
        FetchResult with text on success or error message on failure
    """
    endpoint, params = build_request(url, cfg)
    headers = {"User-Agent": cfg.user_agent}
    last_error: str | None = None

    for attempt in range(cfg.retries + 1):
        try:
            async with httpx.AsyncClient(
                timeout=cfg.timeout_seconds,
                headers=headers,
                follow_redirects=True,
                trust_env=cfg.trust_env,
                transport=transport,
            ) as client:
                resp = await client.get(endpoint, params=params or None)
                return _result_from_response(url, resp)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < cfg.retries:
                # Linear backoff: 0.5s, 1.0s, 1.5s...
                await asyncio.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=None, text=None, error=last_error)
