"""
Ticker page and data file output.

The ticker page is rendered with a Jinja2 template; the JSON data file is
the structured contract read by analyst mode and any other consumer.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.types import Article, format_timestamp
from .digest import category_label


CATEGORY_COLORS = {
    "general-aviation": "#10B981",
    "commercial": "#3B82F6",
    "business-aviation": "#8B5CF6",
    "industry": "#F59E0B",
    "aerospace": "#EC4899",
    "evtol": "#06B6D4",
    "drones": "#84CC16",
    "electric": "#22D3EE",
    "regulatory": "#EF4444",
    "safety": "#DC2626",
    "military": "#6B7280",
    "corporate": "#A855F7",
    "international": "#14B8A6",
}
DEFAULT_COLOR = "#6B7280"
SECONDS_PER_CARD = 3
MIN_SCROLL_SECONDS = 60


def scroll_duration(article_count: int) -> int:
    return max(MIN_SCROLL_SECONDS, article_count * SECONDS_PER_CARD)


def _card(article: Article, index: int) -> dict[str, object]:
    published = article.published_at.astimezone(timezone.utc)
    return {
        "index": index,
        "headline": article.headline,
        "blurb": article.blurb,
        "takeaway": article.takeaway or "",
        "source_name": article.source.name,
        "source_url": article.source.url,
        "category": article.category,
        "category_label": category_label(article.category),
        "color": CATEGORY_COLORS.get(article.category, DEFAULT_COLOR),
        "date": f"{published:%b} {published.day}, {published.year}",
        "datetime": f"{published:%b} {published.day}, {published.year} {published:%H:%M} UTC",
    }


def render_ticker(
    articles: list[Article],
    sources_count: int,
    output_path: Path,
    now: datetime | None = None,
) -> None:
    """Render the scrolling ticker page.

    Cards are emitted twice so the CSS animation loops without a gap.
    """
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )
    template = env.get_template("ticker.html")
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)

    cards = [_card(article, index) for index, article in enumerate(articles)]
    html = template.render(
        cards=cards + cards,
        scroll_duration=scroll_duration(len(articles)),
        last_updated=f"{now:%b} {now.day}, {now.year} {now:%H:%M} UTC",
        source_summary=f"{len(articles)} articles from {sources_count} sources",
        article_count=len(articles),
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")


def write_news_data(articles: list[Article], output_path: Path, now: datetime | None = None) -> None:
    """Write {lastUpdated, articles} JSON for downstream consumers."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "lastUpdated": format_timestamp(now),
        "articles": [article.to_dict() for article in articles],
    }
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def read_news_data(path: Path) -> list[Article]:
    """Load articles from a data file written by `write_news_data`."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    raw_articles = payload.get("articles") if isinstance(payload, dict) else None
    if not isinstance(raw_articles, list):
        return []
    return [Article.from_dict(item) for item in raw_articles if isinstance(item, dict)]
