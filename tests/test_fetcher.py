"""Tests for concurrent feed fetching with per-feed failure isolation."""

from __future__ import annotations

import asyncio

import httpx

from aero_news.config import FetchConfig
from aero_news.core.types import FeedSource
from aero_news.fetch.fetcher import fetch_all_feeds, fetch_all_feeds_async, fetch_feed_body, parse_feed


def _rss(*links: str) -> str:
    items = "".join(f"<item><title>Story {link}</title><link>{link}</link></item>" for link in links)
    return f"<rss version='2.0'><channel><title>t</title>{items}</channel></rss>"


FEEDS = [
    FeedSource(name="Good A", url="https://a.example/feed", category="commercial"),
    FeedSource(name="Broken", url="https://broken.example/feed"),
    FeedSource(name="Down", url="https://down.example/feed"),
    FeedSource(name="Garbage", url="https://garbage.example/feed"),
    FeedSource(name="Good B", url="https://b.example/feed", category="safety"),
]


def _handler(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    if host == "a.example":
        return httpx.Response(200, text=_rss("https://a.example/1", "https://a.example/2"))
    if host == "b.example":
        return httpx.Response(200, text=_rss("https://b.example/1"))
    if host == "broken.example":
        return httpx.Response(503, text="maintenance")
    if host == "garbage.example":
        return httpx.Response(200, text="<rss><channel><item>")
    raise httpx.ConnectError("unreachable", request=request)


def test_failing_feeds_do_not_affect_others():
    articles = fetch_all_feeds(FEEDS, FetchConfig(), transport=httpx.MockTransport(_handler))

    assert [a.source.url for a in articles] == [
        "https://a.example/1",
        "https://a.example/2",
        "https://b.example/1",
    ]
    assert [a.category for a in articles] == ["commercial", "commercial", "safety"]
    assert articles[2].source.name == "Good B"


def test_results_follow_feed_order():
    batches = asyncio.run(fetch_all_feeds_async(FEEDS, FetchConfig(), transport=httpx.MockTransport(_handler)))

    assert [len(batch) for batch in batches] == [2, 0, 0, 0, 1]


def test_user_agent_is_sent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, text=_rss("https://a.example/1"))

    cfg = FetchConfig(user_agent="AeroNews-Test/1.0")
    fetch_all_feeds(FEEDS[:1], cfg, transport=httpx.MockTransport(handler))

    assert seen["ua"] == "AeroNews-Test/1.0"


def test_fetch_feed_body_reports_status_errors():
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_handler)) as client:
            return await fetch_feed_body(client, FEEDS[1], timeout=5)

    result = asyncio.run(run())

    assert result.content is None
    assert result.status_code == 503
    assert result.error.startswith("HTTP 503")


def test_parse_feed_empty_channel():
    assert parse_feed("<rss><channel><title>none</title></channel></rss>", FEEDS[0]) == []


def test_malformed_feed_url_does_not_abort_other_feeds():
    feeds = [FEEDS[0], FeedSource(name="Bad Port", url="http://example.com:abc/feed")]

    articles = fetch_all_feeds(feeds, FetchConfig(), transport=httpx.MockTransport(_handler))

    assert [a.source.url for a in articles] == ["https://a.example/1", "https://a.example/2"]


def test_xml_declaration_decides_encoding():
    body = (
        "<?xml version='1.0' encoding='ISO-8859-1'?>"
        "<rss><channel><item><title>Zürich slot cuts</title><link>https://a.example/z</link></item></channel></rss>"
    ).encode("iso-8859-1")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"Content-Type": "application/xml"})

    articles = fetch_all_feeds(FEEDS[:1], FetchConfig(), transport=httpx.MockTransport(handler))

    assert articles[0].headline == "Zürich slot cuts"
