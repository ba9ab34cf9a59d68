"""
Output generation.

This package renders the ticker page, writes the structured data
file and builds/posts chat digests.
"""

from .digest import (
    DeliveryResult,
    build_analyst_card,
    build_slack_digest,
    build_teams_digest,
    post_webhook,
    send_webhook_notifications,
)
from .renderer import read_news_data, render_ticker, write_news_data

__all__ = [
    "DeliveryResult",
    "build_analyst_card",
    "build_slack_digest",
    "build_teams_digest",
    "post_webhook",
    "send_webhook_notifications",
    "read_news_data",
    "render_ticker",
    "write_news_data",
]
