"""
SMS analyst digest.

Reads the data file written by the public run, keeps safety-relevant
articles, asks the provider for an analyst brief per article (under the
analyst daily cap) and posts one Teams card. Nothing here changes the
public pipeline's output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import os
from pathlib import Path

import httpx

from ..config import AppConfig, get_daily_cap
from ..core.merge import sort_by_date
from ..core.types import Article
from ..llm.prompts import analyst_brief_prompt
from ..llm.providers.base import TakeawayProvider
from ..output.digest import DeliveryResult, build_analyst_card, post_webhook
from ..output.renderer import read_news_data
from ..usage import UsageLimiter
from ..utils.logging import log_event
from .takeaway import metered_generate


logger = logging.getLogger("aero_news.analyst")


@dataclass
class AnalystOutcome:
    """What an analyst run did.

    Attributes:
        status: "disabled", "not_scheduled", "no_data", "no_matches",
            "no_webhook", "posted" or "delivery_failed"
        articles: Articles selected for the digest
        briefs: Brief per article id (None when no brief was produced)
        cap_reached: Whether the analyst cap stopped brief generation
        delivery: Webhook result when a post was attempted
    """

    status: str
    articles: list[Article] = field(default_factory=list)
    briefs: dict[str, str | None] = field(default_factory=dict)
    cap_reached: bool = False
    delivery: DeliveryResult | None = None


def dedup_analyst_articles(articles: list[Article]) -> list[Article]:
    """Drop articles without a URL and repeats of a URL already seen."""
    seen: set[str] = set()
    kept: list[Article] = []
    for article in articles:
        url = article.source.url
        if not url or url in seen:
            continue
        seen.add(url)
        kept.append(article)
    return kept


def filter_by_keywords(articles: list[Article], keywords: list[str]) -> list[Article]:
    lowered = [keyword.lower() for keyword in keywords if keyword]
    return [
        article
        for article in articles
        if any(keyword in f"{article.headline} {article.blurb}".lower() for keyword in lowered)
    ]


def select_articles(articles: list[Article], keywords: list[str], max_articles: int) -> list[Article]:
    matched = filter_by_keywords(dedup_analyst_articles(articles), keywords)
    return sort_by_date(matched)[:max_articles]


def generate_briefs(
    articles: list[Article],
    provider: TakeawayProvider | None,
    limiter: UsageLimiter,
    cap: int,
    max_tokens: int,
    temperature: float,
) -> tuple[dict[str, str | None], bool]:
    """Sequentially request one brief per article, re-checking the cap each time.

    Returns:
        (brief per article id, whether the cap was reached)
    """
    briefs: dict[str, str | None] = {article.id: None for article in articles}
    if provider is None:
        logger.warning("No summarization API key set, skipping analyst briefs")
        return briefs, False

    for article in articles:
        if not limiter.can_spend(1, cap):
            logger.warning(
                "Daily summarization cap reached (analyst cap: %d, remaining: %d); skipping remaining briefs",
                cap,
                limiter.remaining(cap),
            )
            return briefs, True
        result = metered_generate(
            provider,
            limiter,
            analyst_brief_prompt(article),
            max_tokens,
            temperature,
            context={"headline": article.headline, "url": article.source.url},
        )
        briefs[article.id] = result.text if result.ok else None
        log_event(
            logger,
            f"{'ok' if result.ok else 'failed'}: {article.headline[:60]}",
            event="analyst_brief",
            ok=result.ok,
        )
    return briefs, False


def run_analyst(
    cfg: AppConfig,
    provider: TakeawayProvider | None,
    limiter: UsageLimiter,
    data_path: Path,
    now: datetime | None = None,
    force: bool = False,
    transport: httpx.BaseTransport | None = None,
) -> AnalystOutcome:
    """Run analyst mode once.

    Args:
        cfg: Application configuration
        provider: Summarization provider, or None without credentials
        limiter: Shared daily usage counter
        data_path: The public run's JSON data file
        now: Current time (for the schedule gate and card date)
        force: Skip the hour-of-day gate
        transport: Optional httpx transport for the webhook post
    """
    analyst_cfg = cfg.analyst
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)

    if not analyst_cfg.enabled:
        logger.info("Analyst mode is not enabled")
        return AnalystOutcome(status="disabled")
    if not force and now.hour != analyst_cfg.daily_hour_utc:
        logger.info(
            "Not analyst digest hour (current: %d UTC, target: %d UTC), skipping",
            now.hour,
            analyst_cfg.daily_hour_utc,
        )
        return AnalystOutcome(status="not_scheduled")

    try:
        articles = read_news_data(data_path)
    except (OSError, ValueError) as exc:
        logger.warning("%s not found or unreadable, skipping analyst mode: %s", data_path, exc)
        return AnalystOutcome(status="no_data")
    if not articles:
        logger.info("No articles in %s", data_path)
        return AnalystOutcome(status="no_data")

    selected = select_articles(articles, analyst_cfg.keywords, analyst_cfg.max_articles)
    if not selected:
        logger.info("No articles matched analyst keywords")
        return AnalystOutcome(status="no_matches")
    logger.info("%d articles matched analyst keywords", len(selected))

    cap = get_daily_cap(cfg.usage, "analyst")
    briefs, cap_reached = generate_briefs(
        selected,
        provider,
        limiter,
        cap,
        analyst_cfg.max_tokens,
        analyst_cfg.temperature,
    )
    if cap_reached:
        logger.info("Digest will be posted without some AI briefs (cap reached)")

    outcome = AnalystOutcome(status="no_webhook", articles=selected, briefs=briefs, cap_reached=cap_reached)
    webhook_url = os.getenv(analyst_cfg.teams_url_env)
    if not webhook_url:
        logger.info("No %s configured, skipping Teams post", analyst_cfg.teams_url_env)
        return outcome

    payload = build_analyst_card(selected, briefs, today=now)
    outcome.delivery = post_webhook(
        webhook_url, payload, timeout=cfg.webhooks.timeout_seconds, transport=transport
    )
    if outcome.delivery.ok:
        outcome.status = "posted"
        logger.info("Analyst digest posted to Teams")
    else:
        outcome.status = "delivery_failed"
        logger.warning("Failed to post analyst digest to Teams: %s", outcome.delivery.error)
    return outcome
