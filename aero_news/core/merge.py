"""
Merging of feed articles with manual entries.

Order of the final list:
1. High-priority manual entries (input order)
2. Feed articles, newest first, deduplicated by URL
3. Normal-priority manual entries whose URL the feed set did not emit

The result is truncated from the tail, so high-priority entries are only
dropped when they alone exceed the cap.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from rapidfuzz import fuzz

from .normalizer import parse_date
from .text import HEADLINE_PLACEHOLDER, clean_description, extract_keywords, generate_id
from .types import Article, ManualEntry, Source


DEFAULT_MAX_ARTICLES = 36
DEFAULT_MANUAL_CATEGORY = "industry"
HIGH_PRIORITY = "high"
NORMAL_PRIORITY = "normal"


def format_manual_articles(
    entries: Iterable[ManualEntry],
    default_source: str,
    now: datetime | None = None,
) -> list[Article]:
    """Convert manual entries into Articles.

    Pre-set takeaways are carried over unchanged. Blurbs get the same cleanup
    and length limit as feed descriptions. Entries without a date are stamped
    with `now`.
    """
    now = now or datetime.now(timezone.utc)
    articles: list[Article] = []
    for entry in entries:
        headline = entry.headline.strip() or HEADLINE_PLACEHOLDER
        blurb = clean_description(entry.blurb)
        articles.append(
            Article(
                id=generate_id(entry.headline, entry.url),
                headline=headline,
                blurb=blurb,
                source=Source(name=entry.source or default_source, url=entry.url),
                category=entry.category or DEFAULT_MANUAL_CATEGORY,
                published_at=parse_date(entry.date, now) if entry.date else now,
                keywords=extract_keywords(f"{entry.headline} {blurb}"),
                takeaway=entry.takeaway or None,
                priority=entry.priority or NORMAL_PRIORITY,
            )
        )
    return articles


def sort_by_date(articles: list[Article]) -> list[Article]:
    """Newest first. The sort is stable, so ties keep their input order."""
    return sorted(articles, key=lambda article: article.published_at, reverse=True)


def dedup_by_url(articles: Iterable[Article]) -> list[Article]:
    """Keep the first article seen for each source URL."""
    seen_urls: set[str] = set()
    kept: list[Article] = []
    for article in articles:
        if article.source.url in seen_urls:
            continue
        seen_urls.add(article.source.url)
        kept.append(article)
    return kept


def dedup_by_title(articles: Iterable[Article], threshold: int) -> list[Article]:
    """Drop articles whose headline is similar to an already kept one.

    Uses rapidfuzz's ratio (0-100). Syndicated stories often reach several
    feeds under different URLs with near-identical headlines.
    """
    kept: list[Article] = []
    headlines: list[str] = []
    for article in articles:
        if any(fuzz.ratio(article.headline, existing) >= threshold for existing in headlines):
            continue
        headlines.append(article.headline)
        kept.append(article)
    return kept


def merge_articles(
    rss_articles: list[Article],
    manual_articles: list[Article],
    max_articles: int = DEFAULT_MAX_ARTICLES,
    title_similarity_threshold: int | None = None,
) -> list[Article]:
    """Combine feed and manual articles into the final ordered list.

    Args:
        rss_articles: Normalized feed articles in fetch order
        manual_articles: Formatted manual articles in file order
        max_articles: Cap on the merged list
        title_similarity_threshold: When set, also drop feed articles with
            near-duplicate headlines (rapidfuzz ratio >= threshold)

    Returns:
        New list; the Article objects themselves are not modified
    """
    high_priority = [a for a in manual_articles if a.priority == HIGH_PRIORITY]
    normal_priority = [a for a in manual_articles if a.priority != HIGH_PRIORITY]

    deduped = dedup_by_url(sort_by_date(rss_articles))
    if title_similarity_threshold is not None:
        deduped = dedup_by_title(deduped, title_similarity_threshold)
    emitted_urls = {article.source.url for article in deduped}

    combined = [
        *high_priority,
        *deduped,
        *(a for a in normal_priority if a.source.url not in emitted_urls),
    ]
    return combined[: max(0, max_articles)]
