"""
Chat digests for Microsoft Teams and Slack.

Payload builders are pure functions over the final article list. Posting
is best effort: one attempt with a timeout, failures logged and returned
as a DeliveryResult, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import os
from typing import Any

import httpx

from ..config import WebhookConfig
from ..core.types import Article
from ..utils.logging import log_event


logger = logging.getLogger("aero_news.digest")

DIGEST_TITLE = "✈️ AeroNews Daily Digest"
ANALYST_TITLE = "\U0001f6e1️ AeroNews — SMS Analyst Digest"
ADAPTIVE_CARD_SCHEMA = "http://adaptivecards.io/schemas/adaptive-card.json"

CATEGORY_LABELS = {
    "general-aviation": "General Aviation",
    "commercial": "Commercial",
    "business-aviation": "Business Aviation",
    "industry": "Industry",
    "aerospace": "Aerospace",
    "evtol": "eVTOL",
    "drones": "Drones",
    "electric": "Electric",
    "regulatory": "Regulatory",
    "safety": "Safety",
    "military": "Military",
    "corporate": "Corporate",
    "international": "International",
}


def category_label(category: str | None) -> str:
    return CATEGORY_LABELS.get(category or "", "News")


def _long_date(today: datetime | None) -> str:
    today = today or datetime.now(timezone.utc)
    return f"{today:%A}, {today:%B} {today.day}, {today.year}"


def _teams_article_container(article: Article, detail: str | None, detail_italic: bool) -> dict[str, Any]:
    items: list[dict[str, Any]] = [
        {
            "type": "TextBlock",
            "text": f"**[{article.headline}]({article.source.url})**",
            "wrap": True,
            "size": "default",
        },
        {
            "type": "ColumnSet",
            "columns": [
                {
                    "type": "Column",
                    "width": "auto",
                    "items": [
                        {
                            "type": "TextBlock",
                            "text": category_label(article.category),
                            "size": "small",
                            "color": "accent",
                            "weight": "bolder",
                        }
                    ],
                },
                {
                    "type": "Column",
                    "width": "auto",
                    "items": [
                        {
                            "type": "TextBlock",
                            "text": f"— {article.source.name}",
                            "size": "small",
                            "isSubtle": True,
                        }
                    ],
                },
            ],
        },
    ]
    if detail:
        block: dict[str, Any] = {
            "type": "TextBlock",
            "text": f"_{detail}_" if detail_italic else detail,
            "wrap": True,
            "size": "small",
        }
        if detail_italic:
            block["isSubtle"] = True
        else:
            block["spacing"] = "small"
        items.append(block)
    return {"type": "Container", "separator": True, "spacing": "medium", "items": items}


def _adaptive_card_message(body: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "content": {
                    "$schema": ADAPTIVE_CARD_SCHEMA,
                    "type": "AdaptiveCard",
                    "version": "1.4",
                    "body": body,
                },
            }
        ],
    }


def build_teams_digest(
    articles: list[Article],
    max_articles: int,
    today: datetime | None = None,
) -> dict[str, Any]:
    """Teams Adaptive Card message for the top `max_articles` articles."""
    top = articles[:max_articles]
    body = [
        {"type": "TextBlock", "text": DIGEST_TITLE, "size": "large", "weight": "bolder", "color": "accent"},
        {"type": "TextBlock", "text": _long_date(today), "size": "small", "isSubtle": True, "spacing": "none"},
        {
            "type": "TextBlock",
            "text": f"Top {len(top)} headlines from {len(articles)} total articles",
            "size": "small",
            "isSubtle": True,
        },
        *(_teams_article_container(a, a.takeaway, detail_italic=True) for a in top),
    ]
    return _adaptive_card_message(body)


def build_slack_digest(
    articles: list[Article],
    max_articles: int,
    today: datetime | None = None,
) -> dict[str, Any]:
    """Slack Block Kit message for the top `max_articles` articles."""
    top = articles[:max_articles]
    article_blocks: list[dict[str, Any]] = []
    for article in top:
        takeaway_text = f"\n_{article.takeaway}_" if article.takeaway else ""
        article_blocks.append({"type": "divider"})
        article_blocks.append(
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        f"*<{article.source.url}|{article.headline}>*\n"
                        f"{category_label(article.category)} — {article.source.name}"
                        f"{takeaway_text}"
                    ),
                },
            }
        )

    return {
        "blocks": [
            {"type": "header", "text": {"type": "plain_text", "text": DIGEST_TITLE}},
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": f"{_long_date(today)} · Top {len(top)} of {len(articles)} articles",
                    }
                ],
            },
            *article_blocks,
            {"type": "divider"},
            {"type": "context", "elements": [{"type": "mrkdwn", "text": "Powered by AeroNews"}]},
        ]
    }


def build_analyst_card(
    articles: list[Article],
    briefs: dict[str, str | None],
    today: datetime | None = None,
) -> dict[str, Any]:
    """Teams Adaptive Card for the SMS analyst digest.

    Args:
        articles: Filtered, capped articles
        briefs: Analyst brief per article id; missing or None means no brief
        today: Date shown in the header
    """
    count = len(articles)
    body = [
        {"type": "TextBlock", "text": ANALYST_TITLE, "size": "large", "weight": "bolder", "color": "accent"},
        {"type": "TextBlock", "text": _long_date(today), "size": "small", "isSubtle": True, "spacing": "none"},
        {
            "type": "TextBlock",
            "text": f"{count} safety-relevant article{'' if count == 1 else 's'} found",
            "size": "small",
            "isSubtle": True,
        },
        *(_teams_article_container(a, briefs.get(a.id), detail_italic=False) for a in articles),
        {
            "type": "TextBlock",
            "text": "_Internal — Safety Analytics_",
            "size": "small",
            "isSubtle": True,
            "spacing": "large",
            "horizontalAlignment": "right",
        },
    ]
    return _adaptive_card_message(body)


@dataclass
class DeliveryResult:
    """Outcome of one webhook post.

    Attributes:
        ok: True on a 2xx response
        status_code: HTTP status, None when no response was received
        error: Failure reason, None on success
    """

    ok: bool
    status_code: int | None = None
    error: str | None = None


def post_webhook(
    url: str,
    payload: dict[str, Any],
    timeout: float = 15.0,
    transport: httpx.BaseTransport | None = None,
) -> DeliveryResult:
    """POST a JSON payload once. Never raises."""
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            resp = client.post(url, json=payload)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return DeliveryResult(ok=False, error=f"{type(exc).__name__}: {exc}")
    if not resp.is_success:
        return DeliveryResult(
            ok=False,
            status_code=resp.status_code,
            error=f"HTTP {resp.status_code}: {resp.reason_phrase}",
        )
    return DeliveryResult(ok=True, status_code=resp.status_code)


def is_digest_hour(cfg: WebhookConfig, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).hour == cfg.daily_digest_hour_utc


def send_webhook_notifications(
    articles: list[Article],
    cfg: WebhookConfig,
    now: datetime | None = None,
    transport: httpx.BaseTransport | None = None,
) -> dict[str, DeliveryResult]:
    """Post the Teams and Slack digests that are enabled and configured.

    Returns:
        Delivery result per channel name ("teams", "slack") that was attempted
    """
    results: dict[str, DeliveryResult] = {}
    if not cfg.enabled:
        return results
    if cfg.mode == "daily" and not is_digest_hour(cfg, now):
        logger.info("Webhooks: not digest hour, skipping")
        return results

    channels = (
        ("teams", cfg.teams_enabled, cfg.teams_url_env, build_teams_digest),
        ("slack", cfg.slack_enabled, cfg.slack_url_env, build_slack_digest),
    )
    for channel, enabled, url_env, builder in channels:
        url = os.getenv(url_env)
        if not enabled or not url:
            continue
        payload = builder(articles, cfg.max_articles_in_digest, now)
        result = post_webhook(url, payload, timeout=cfg.timeout_seconds, transport=transport)
        results[channel] = result
        if result.ok:
            log_event(logger, f"{channel} notification sent", event="webhook_sent", channel=channel)
        else:
            log_event(
                logger,
                f"{channel} webhook failed: {result.error}",
                level=logging.WARNING,
                event="webhook_failed",
                channel=channel,
                status_code=result.status_code,
                error=result.error,
            )
    return results
