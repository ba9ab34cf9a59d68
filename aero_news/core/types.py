"""
Core data types for AeroNews.

This module defines the structures passed between pipeline stages:
- FeedSource: A configured RSS/Atom/RDF feed
- Source: Publication name and article URL
- Article: Normalized article from a feed or a manual entry
- ManualEntry: Operator-supplied article before normalization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class FeedSource:
    """A feed listed in the configuration.

    Attributes:
        name: Display name of the publication (e.g., "AVweb")
        url: Feed URL
        category: Category slug applied to every article from this feed
        enabled: Disabled feeds are never fetched
    """

    name: str
    url: str
    category: str = "industry"
    enabled: bool = True


@dataclass
class Source:
    """Where an article came from.

    Attributes:
        name: Publication name
        url: Link to the original article
    """

    name: str
    url: str


@dataclass
class Article:
    """A normalized article ready for merging and takeaway generation.

    Attributes:
        id: Deterministic base-36 hash of (title, link)
        headline: Cleaned headline, never empty
        blurb: Cleaned description, at most 300 characters
        source: Publication name and article URL
        category: Category slug (e.g., "safety", "commercial")
        keywords: Vocabulary tokens found in the headline and description
        published_at: Timezone-aware UTC publication instant
        takeaway: One-sentence insight, None until generated
        priority: "high" or "normal" for manual entries, None for feed articles
    """

    id: str
    headline: str
    blurb: str
    source: Source
    category: str
    published_at: datetime
    keywords: list[str] = field(default_factory=list)
    takeaway: str | None = None
    priority: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the output contract consumed by renderers and analyst mode."""
        return {
            "id": self.id,
            "headline": self.headline,
            "blurb": self.blurb,
            "takeaway": self.takeaway,
            "source": {"name": self.source.name, "url": self.source.url},
            "category": self.category,
            "keywords": list(self.keywords),
            "publishedAt": format_timestamp(self.published_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        source = data.get("source") or {}
        published = parse_timestamp(data.get("publishedAt"))
        return cls(
            id=str(data.get("id") or ""),
            headline=str(data.get("headline") or ""),
            blurb=str(data.get("blurb") or ""),
            source=Source(name=str(source.get("name") or ""), url=str(source.get("url") or "")),
            category=str(data.get("category") or ""),
            published_at=published or datetime.now(timezone.utc),
            keywords=list(data.get("keywords") or []),
            takeaway=data.get("takeaway"),
            priority=data.get("priority"),
        )


@dataclass
class ManualEntry:
    """An operator-supplied article as read from the manual entries file.

    Attributes:
        headline: Article headline (required)
        url: Article URL (required)
        blurb: Optional description
        source: Optional publication name; the configured default is used when absent
        date: Optional date string
        category: Optional category slug
        priority: "high" or "normal"
        takeaway: Optional pre-set takeaway; never overwritten
    """

    headline: str
    url: str
    blurb: str = ""
    source: str | None = None
    date: str | None = None
    category: str | None = None
    priority: str = "normal"
    takeaway: str | None = None


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with milliseconds and a trailing Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string into an aware UTC datetime, or None."""
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
