"""
Concurrent feed fetching.

Every enabled feed is requested at the same time with its own timeout.
A feed that times out, answers with an error status or serves XML that
does not parse contributes no articles; the other feeds are unaffected.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
import logging

import httpx
import xmltodict

from ..config import FetchConfig
from ..core.normalizer import normalize_document
from ..core.types import Article, FeedSource
from ..utils.logging import log_event


logger = logging.getLogger("aero_news.fetch")

ACCEPT_HEADER = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"


@dataclass
class FetchResult:
    """Result of one feed request.

    Either content will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        content: The raw response body, or None on error
        error: Error message if fetch failed, None on success
    """

    url: str
    status_code: int | None
    content: bytes | None
    error: str | None


async def fetch_feed_body(client: httpx.AsyncClient, feed: FeedSource, timeout: float) -> FetchResult:
    """GET a feed document. Never raises for network, HTTP or URL errors."""
    try:
        resp = await asyncio.wait_for(client.get(feed.url), timeout=timeout)
    except asyncio.TimeoutError:
        return FetchResult(url=feed.url, status_code=None, content=None, error=f"TimeoutError: no response in {timeout}s")
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return FetchResult(url=feed.url, status_code=None, content=None, error=f"{type(exc).__name__}: {exc}")

    if not resp.is_success:
        return FetchResult(
            url=feed.url,
            status_code=resp.status_code,
            content=None,
            error=f"HTTP {resp.status_code}: {resp.reason_phrase}",
        )
    return FetchResult(url=feed.url, status_code=resp.status_code, content=resp.content, error=None)


def parse_feed(content: bytes | str, feed: FeedSource, now: datetime | None = None) -> list[Article]:
    """Parse feed XML and normalize its items.

    Bytes are handed to the parser as-is so the XML declaration decides the
    encoding.

    Raises:
        ExpatError: If the document is not well-formed XML
    """
    document = xmltodict.parse(content)
    return normalize_document(document, feed, now)


async def fetch_feed(client: httpx.AsyncClient, feed: FeedSource, cfg: FetchConfig) -> list[Article]:
    """Fetch and normalize one feed; any failure yields an empty list."""
    log_event(logger, f"Fetching: {feed.name}", level=logging.DEBUG, event="feed_fetch_start", feed=feed.name)
    result = await fetch_feed_body(client, feed, cfg.timeout_seconds)
    if result.error or result.content is None:
        log_event(
            logger,
            f"Failed to fetch {feed.name}: {result.error}",
            level=logging.WARNING,
            event="feed_fetch_failed",
            feed=feed.name,
            url=feed.url,
            status_code=result.status_code,
            error=result.error,
        )
        return []

    try:
        articles = parse_feed(result.content, feed)
    except Exception as exc:  # noqa: BLE001
        log_event(
            logger,
            f"Failed to parse {feed.name}: {exc}",
            level=logging.WARNING,
            event="feed_parse_failed",
            feed=feed.name,
            url=feed.url,
            error=f"{type(exc).__name__}: {exc}",
        )
        return []

    log_event(
        logger,
        f"{feed.name}: found {len(articles)} articles",
        event="feed_fetch_ok",
        feed=feed.name,
        count=len(articles),
    )
    return articles


async def fetch_all_feeds_async(
    feeds: list[FeedSource],
    cfg: FetchConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[list[Article]]:
    """Fetch every feed concurrently. Results follow the order of `feeds`."""
    headers = {"User-Agent": cfg.user_agent, "Accept": ACCEPT_HEADER}
    async with httpx.AsyncClient(
        timeout=cfg.timeout_seconds,
        headers=headers,
        follow_redirects=True,
        trust_env=cfg.trust_env,
        transport=transport,
    ) as client:
        tasks = [asyncio.create_task(fetch_feed(client, feed, cfg)) for feed in feeds]
        return list(await asyncio.gather(*tasks))


def fetch_all_feeds(
    feeds: list[FeedSource],
    cfg: FetchConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Article]:
    """Synchronous entry point: fetch all feeds and flatten in feed order."""
    results = asyncio.run(fetch_all_feeds_async(feeds, cfg, transport))
    articles = [article for batch in results for article in batch]
    log_event(
        logger,
        f"Total articles fetched: {len(articles)}",
        event="feeds_fetched",
        feeds=len(feeds),
        count=len(articles),
    )
    return articles
