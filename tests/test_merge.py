"""Tests for manual/feed merge ordering, dedup and capping."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from aero_news.core.merge import (
    dedup_by_title,
    dedup_by_url,
    format_manual_articles,
    merge_articles,
    sort_by_date,
)
from aero_news.core.text import generate_id
from aero_news.core.types import Article, ManualEntry, Source

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _article(idx: int, url: str | None = None, hours_ago: int = 0, headline: str | None = None) -> Article:
    return Article(
        id=f"id{idx}",
        headline=headline or f"Headline {idx}",
        blurb="",
        source=Source(name="Feed", url=url or f"https://feed.example/{idx}"),
        category="industry",
        published_at=NOW - timedelta(hours=hours_ago),
    )


def _manual(idx: int, priority: str, url: str | None = None) -> Article:
    entry = ManualEntry(
        headline=f"Manual {idx}",
        url=url or f"https://manual.example/{idx}",
        priority=priority,
        date="2026-10-01T00:00:00Z",
    )
    return format_manual_articles([entry], "AeroNews Editorial", now=NOW)[0]


def test_dedup_by_url_keeps_first_of_each_url():
    shared = "https://feed.example/shared"
    articles = [_article(i) for i in range(6)] + [_article(10 + i, url=shared) for i in range(3)]

    deduped = dedup_by_url(articles)

    assert len(deduped) == 9 - 3 + 1
    assert [a.id for a in deduped if a.source.url == shared] == ["id10"]


def test_merge_orders_high_manual_then_feeds_then_normal_manual():
    rss = [_article(1, hours_ago=5), _article(2, hours_ago=1), _article(3, hours_ago=3)]
    high = _manual(1, "high")
    normal = _manual(2, "normal")

    merged = merge_articles(rss, [normal, high], max_articles=36)

    assert [a.headline for a in merged] == [
        "Manual 1",
        "Headline 2",
        "Headline 3",
        "Headline 1",
        "Manual 2",
    ]


def test_normal_manual_with_feed_url_is_dropped():
    rss = [_article(1, url="https://dup.example/x")]
    normal = _manual(2, "normal", url="https://dup.example/x")

    merged = merge_articles(rss, [normal])

    assert [a.headline for a in merged] == ["Headline 1"]


def test_high_manual_kept_even_when_feed_has_same_url():
    rss = [_article(1, url="https://dup.example/x")]
    high = _manual(2, "high", url="https://dup.example/x")

    merged = merge_articles(rss, [high])

    assert [a.headline for a in merged] == ["Manual 2", "Headline 1"]


def test_truncation_keeps_high_priority_entries():
    rss = [_article(i, hours_ago=i) for i in range(10)]
    manual = [_manual(1, "high"), _manual(2, "high"), _manual(3, "normal")]

    merged = merge_articles(rss, manual, max_articles=5)

    assert len(merged) == 5
    assert [a.headline for a in merged[:2]] == ["Manual 1", "Manual 2"]
    assert all(a.priority is None for a in merged[2:])


def test_non_positive_cap_yields_empty_list():
    assert merge_articles([_article(1)], [_manual(1, "high")], max_articles=0) == []
    assert merge_articles([_article(1)], [], max_articles=-3) == []


def test_sort_by_date_is_stable_for_ties():
    a, b, c = _article(1), _article(2), _article(3, hours_ago=-1)
    assert [x.id for x in sort_by_date([a, b, c])] == ["id3", "id1", "id2"]


def test_title_dedup_is_opt_in():
    rss = [
        _article(1, hours_ago=1, headline="Boeing 777X completes flight test campaign"),
        _article(2, hours_ago=2, headline="Boeing 777X completes flight-test campaign"),
        _article(3, hours_ago=3, headline="Cessna unveils new trainer"),
    ]

    assert len(merge_articles(rss, [])) == 3
    merged = merge_articles(rss, [], title_similarity_threshold=90)
    assert [a.id for a in merged] == ["id1", "id3"]
    assert [a.id for a in dedup_by_title(rss, 90)] == ["id1", "id3"]


def test_format_manual_articles_defaults():
    entries = [
        ManualEntry(headline="Editorial note", url="https://manual.example/n", takeaway="Keep this."),
        ManualEntry(
            headline="Sourced",
            url="https://manual.example/s",
            blurb="Drone ops expand",
            source="Partner Weekly",
            date="Fri, 17 Oct 2026 10:30:00 GMT",
            category="drones",
            priority="high",
        ),
    ]

    first, second = format_manual_articles(entries, "AeroNews Editorial", now=NOW)

    assert first.id == generate_id("Editorial note", "https://manual.example/n")
    assert first.source.name == "AeroNews Editorial"
    assert first.category == "industry"
    assert first.published_at == NOW
    assert first.takeaway == "Keep this."
    assert first.priority == "normal"
    assert second.source.name == "Partner Weekly"
    assert second.published_at == datetime(2026, 10, 17, 10, 30, tzinfo=timezone.utc)
    assert second.keywords == ["drone"]
    assert second.priority == "high"


def test_manual_blurb_is_cleaned_and_truncated():
    entries = [
        ManualEntry(headline="Long note", url="https://manual.example/long", blurb="x" * 500),
        ManualEntry(headline="Markup", url="https://manual.example/markup", blurb="<p>Ops  &amp; safety</p>"),
    ]

    long_note, markup = format_manual_articles(entries, "AeroNews Editorial", now=NOW)

    assert len(long_note.blurb) == 300
    assert long_note.blurb.endswith("...")
    assert markup.blurb == "Ops & safety"
