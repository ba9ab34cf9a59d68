"""
Feed document normalization.

Feed XML is parsed with xmltodict into nested dictionaries (attributes are
prefixed with "@", element text lives under "#text"). This module detects
whether the document is RSS 2.0, Atom or RDF, pulls out its items, and maps
each item onto the uniform Article record.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from .text import (
    clean_description,
    clean_headline,
    extract_keywords,
    generate_id,
)
from .types import Article, FeedSource, Source, parse_timestamp


TITLE_PLACEHOLDER = "Untitled"

TITLE_FIELDS = ("title", "dc:title")
DESCRIPTION_FIELDS = ("description", "summary", "content", "content:encoded")
DATE_FIELDS = ("pubDate", "published", "updated", "dc:date")


def extract_items(document: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Return the item list of a parsed feed document.

    Shapes are recognized by their root keys:
        rss.channel.item   RSS 2.0
        feed.entry         Atom
        <prefix>:RDF.item  RDF / RSS 1.0

    A feed with a single item is represented as a dict rather than a list;
    it is wrapped so callers always get a list. Unknown shapes yield [].
    """
    if not isinstance(document, dict):
        return []

    items: Any = None
    rss = document.get("rss")
    feed = document.get("feed")
    if isinstance(rss, dict) and isinstance(rss.get("channel"), dict):
        items = rss["channel"].get("item")
    elif isinstance(feed, dict):
        items = feed.get("entry")
    else:
        rdf = _find_rdf_root(document)
        if rdf is not None:
            items = rdf.get("item")

    if items is None:
        return []
    if not isinstance(items, list):
        items = [items]
    return [item for item in items if isinstance(item, dict)]


def _find_rdf_root(document: dict[str, Any]) -> dict[str, Any] | None:
    for key, value in document.items():
        if key.split(":")[-1] == "RDF" and isinstance(value, dict):
            return value
    return None


def normalize_item(
    item: dict[str, Any],
    feed: FeedSource,
    now: datetime | None = None,
) -> Article:
    """Map one feed item onto an Article.

    Args:
        item: A single item/entry dictionary from `extract_items`
        feed: The feed it came from (provides source name and category)
        now: Ingestion time used when the item has no usable date

    Returns:
        Article with takeaway left unset
    """
    now = now or datetime.now(timezone.utc)
    title = _extract_title(item)
    description = _extract_description(item)
    link = _extract_link(item.get("link"))

    return Article(
        id=generate_id(title, link),
        headline=clean_headline(title),
        blurb=clean_description(description),
        source=Source(name=feed.name, url=link),
        category=feed.category,
        published_at=parse_date(_first_present(item, DATE_FIELDS), now),
        keywords=extract_keywords(f"{title} {description}"),
        takeaway=None,
    )


def normalize_document(
    document: dict[str, Any] | None,
    feed: FeedSource,
    now: datetime | None = None,
) -> list[Article]:
    now = now or datetime.now(timezone.utc)
    return [normalize_item(item, feed, now) for item in extract_items(document)]


def _first_present(item: dict[str, Any], fields: tuple[str, ...]) -> Any:
    for name in fields:
        value = item.get(name)
        if value:
            return value
    return None


def _text_of(value: Any) -> str:
    """Text content of an element that may be a plain string or an object."""
    if value is None:
        return ""
    if isinstance(value, dict):
        text = value.get("#text")
        return str(text) if text else ""
    if isinstance(value, list):
        for candidate in value:
            text = _text_of(candidate)
            if text:
                return text
        return ""
    return str(value)


def _extract_title(item: dict[str, Any]) -> str:
    return _text_of(_first_present(item, TITLE_FIELDS)) or TITLE_PLACEHOLDER


def _extract_description(item: dict[str, Any]) -> str:
    return _text_of(_first_present(item, DESCRIPTION_FIELDS))


def _extract_link(link: Any) -> str:
    """Resolve the article URL.

    RSS and RDF links are plain strings. Atom links are attribute objects
    ({"@href": ..., "@rel": ..., "@type": ...}) or lists of them; the first
    candidate typed "text/html" or without a type wins, otherwise the first.
    """
    if not link:
        return ""
    if isinstance(link, str):
        return link.strip()
    if isinstance(link, dict):
        return str(link.get("@href") or link.get("#text") or "").strip()
    if isinstance(link, list):
        candidates = [candidate for candidate in link if candidate]
        if not candidates:
            return ""
        preferred = next(
            (
                candidate
                for candidate in candidates
                if isinstance(candidate, str)
                or candidate.get("@type") in (None, "", "text/html")
            ),
            candidates[0],
        )
        return _extract_link(preferred)
    return ""


def parse_date(value: Any, now: datetime) -> datetime:
    """Parse an RFC 822 or ISO-8601 date into aware UTC, falling back to `now`."""
    raw = _text_of(value).strip()
    if not raw:
        return now
    try:
        parsed = parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError, OverflowError):
        parsed = None
    if parsed is not None:
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return parse_timestamp(raw) or now
