"""Tests for feed fetching over httpx."""

import asyncio

import httpx

from link_directory.config import FeedConfig
from link_directory.fetch import fetcher
from link_directory.fetch.fetcher import build_request, fetch_feed_async

FEED_URL = "https://docs.example.com/spreadsheets/pub?gid=0&single=true&output=csv"
PROXY_URL = "https://site.example/api/sheet-proxy"


def _fetch(cfg: FeedConfig, handler):
    return asyncio.run(fetch_feed_async(FEED_URL, cfg, transport=httpx.MockTransport(handler)))


def test_build_request_direct_and_proxied():
    assert build_request(FEED_URL, FeedConfig()) == (FEED_URL, {})
    assert build_request(FEED_URL, FeedConfig(proxy_url=PROXY_URL)) == (PROXY_URL, {"url": FEED_URL})


def test_direct_fetch_keeps_feed_query_string():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="Name\nArt Club\n")

    result = _fetch(FeedConfig(), handler)

    assert result.ok
    assert result.status_code == 200
    assert result.text == "Name\nArt Club\n"
    assert seen[0].url.params["gid"] == "0"
    assert seen[0].url.params["output"] == "csv"
    assert seen[0].headers["User-Agent"] == FeedConfig().user_agent


def test_proxied_fetch_passes_feed_url_parameter():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "site.example"
        assert request.url.params["url"] == FEED_URL
        return httpx.Response(200, text="Name\nArt Club\n")

    result = _fetch(FeedConfig(proxy_url=PROXY_URL), handler)

    assert result.ok
    assert result.text == "Name\nArt Club\n"
    # The result is reported against the feed URL, not the proxy endpoint
    assert result.url == FEED_URL


def test_error_status_keeps_proxy_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="TypeError: fetch failed\n")

    result = _fetch(FeedConfig(proxy_url=PROXY_URL), handler)

    assert not result.ok
    assert result.text is None
    assert result.status_code == 500
    assert result.error == "HTTP 500: TypeError: fetch failed"


def test_error_status_without_body():
    result = _fetch(FeedConfig(), lambda request: httpx.Response(404))

    assert result.error == "HTTP 404"


def test_transport_errors_are_retried(monkeypatch):
    delays = []

    async def no_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(fetcher.asyncio, "sleep", no_sleep)
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    result = _fetch(FeedConfig(retries=2), handler)

    assert len(attempts) == 3
    assert delays == [0.5, 1.0]
    assert result.status_code is None
    assert result.error.startswith("ConnectError")


def test_timeouts_fail_without_retries():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = _fetch(FeedConfig(), handler)

    assert not result.ok
    assert result.error.startswith("ReadTimeout")


def test_error_status_is_not_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(503, text="busy")

    result = _fetch(FeedConfig(retries=2), handler)

    assert len(attempts) == 1
    assert result.error == "HTTP 503: busy"
