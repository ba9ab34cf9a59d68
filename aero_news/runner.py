"""
Main pipeline orchestration for AeroNews.

This module coordinates the public ticker run:
1. Load manual entries
2. Fetch and normalize all enabled feeds concurrently
3. Merge, deduplicate and cap the article list
4. Fill takeaways (provider under the daily cap, rule-based otherwise)
5. Render the ticker page and write the JSON data file
6. Post chat digests when due

and the analyst run, which reads the data file produced by step 5.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from pathlib import Path

import httpx
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .analyzers.analyst import AnalystOutcome, run_analyst
from .analyzers.takeaway import TakeawayGenerator, TakeawayStats
from .config import AppConfig, ConfigError, get_daily_cap
from .core.merge import format_manual_articles, merge_articles
from .core.types import Article
from .fetch.fetcher import fetch_all_feeds
from .input.manual import load_manual_entries
from .llm.providers import TakeawayProvider, create_provider
from .output.digest import DeliveryResult, send_webhook_notifications
from .output.renderer import render_ticker, write_news_data
from .usage import UsageLimiter
from .utils.logging import log_event, setup_llm_logger, setup_logging


@dataclass
class RunResult:
    """Summary of one public run.

    Attributes:
        html_path: Rendered ticker page
        data_path: Written JSON data file
        articles: Final article list, takeaways filled
        takeaways: Takeaway counters
        deliveries: Webhook result per attempted channel
    """

    html_path: Path
    data_path: Path
    articles: list[Article]
    takeaways: TakeawayStats
    deliveries: dict[str, DeliveryResult]


def build_limiter(cfg: AppConfig) -> UsageLimiter:
    return UsageLimiter(Path(cfg.usage.counter_path))


def _build_provider(
    cfg: AppConfig,
    output_dir: Path,
    transport: httpx.BaseTransport | None,
) -> TakeawayProvider | None:
    llm_logger = setup_llm_logger(cfg.logging, output_dir)
    return create_provider(cfg.provider, cfg.logging, llm_logger, transport=transport)


def _collect_articles(
    cfg: AppConfig,
    logger: logging.Logger,
    now: datetime,
    feed_transport: httpx.AsyncBaseTransport | None,
) -> list[Article]:
    feeds = cfg.enabled_feeds()
    log_event(logger, f"Found {len(feeds)} enabled RSS feeds", event="feeds_enabled", count=len(feeds))

    entries = load_manual_entries(Path(cfg.manual.path))
    if entries:
        log_event(logger, f"Found {len(entries)} manual articles", event="manual_loaded", count=len(entries))

    rss_articles = fetch_all_feeds(feeds, cfg.fetch, transport=feed_transport)
    manual_articles = format_manual_articles(entries, cfg.manual.default_source, now=now)
    articles = merge_articles(
        rss_articles,
        manual_articles,
        max_articles=cfg.merge.max_articles,
        title_similarity_threshold=cfg.merge.title_similarity_threshold,
    )
    log_event(
        logger,
        f"After deduplication and limiting: {len(articles)} articles",
        event="articles_merged",
        fetched=len(rss_articles),
        manual=len(manual_articles),
        count=len(articles),
    )
    return articles


def _write_outputs(
    articles: list[Article],
    cfg: AppConfig,
    output_dir: Path,
    now: datetime,
) -> tuple[Path, Path]:
    html_path = output_dir / cfg.output.html_filename
    data_path = output_dir / cfg.output.data_filename
    render_ticker(articles, len(cfg.enabled_feeds()), html_path, now=now)
    write_news_data(articles, data_path, now=now)
    return html_path, data_path


def run_pipeline(
    cfg: AppConfig,
    output_dir: Path | None = None,
    show_progress: bool = True,
    console: Console | None = None,
    now: datetime | None = None,
    feed_transport: httpx.AsyncBaseTransport | None = None,
    transport: httpx.BaseTransport | None = None,
) -> RunResult | None:
    """Run the public ticker pipeline once.

    Args:
        cfg: Application configuration
        output_dir: Directory for the page, data file and logs (defaults to cfg.output.dir)
        show_progress: Whether to display a progress bar during takeaway generation
        console: Rich console for output (creates default if None)
        now: Clock used for dates, the digest schedule and the output timestamp
        feed_transport: Optional async httpx transport for feed fetches
        transport: Optional httpx transport for provider and webhook calls

    Returns:
        Run summary, or None when no articles were found (nothing is written)

    Raises:
        ConfigError: When no feeds are enabled
    """
    output_dir = output_dir or Path(cfg.output.dir)
    logger = setup_logging(cfg.logging, output_dir)
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)

    if not cfg.enabled_feeds():
        raise ConfigError("No enabled feeds configured")

    log_event(logger, "Pipeline start", event="pipeline_start", output=str(output_dir))
    articles = _collect_articles(cfg, logger, now, feed_transport)
    if not articles:
        logger.warning("No articles found, leaving previous output in place")
        return None

    provider = _build_provider(cfg, output_dir, transport)
    generator = TakeawayGenerator(
        provider,
        build_limiter(cfg),
        get_daily_cap(cfg.usage, "public"),
        max_tokens=cfg.provider.max_tokens,
        temperature=cfg.provider.temperature,
    )

    if show_progress:
        console = console or Console()
        progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        with progress:
            task = progress.add_task("Takeaways", total=len(articles))
            stats = generator.generate_all(articles, on_progress=lambda _a: progress.advance(task, 1))
    else:
        stats = generator.generate_all(articles)

    html_path, data_path = _write_outputs(articles, cfg, output_dir, now)
    log_event(
        logger,
        f"Generated {html_path} and {data_path}",
        event="outputs_written",
        html=str(html_path),
        data=str(data_path),
        count=len(articles),
    )

    deliveries = send_webhook_notifications(articles, cfg.webhooks, now=now, transport=transport)
    log_event(logger, "Pipeline complete", event="pipeline_complete", total=len(articles))
    return RunResult(
        html_path=html_path,
        data_path=data_path,
        articles=articles,
        takeaways=stats,
        deliveries=deliveries,
    )


def run_analyst_mode(
    cfg: AppConfig,
    output_dir: Path | None = None,
    now: datetime | None = None,
    force: bool = False,
    transport: httpx.BaseTransport | None = None,
) -> AnalystOutcome:
    """Run analyst mode against the data file in `output_dir`."""
    output_dir = output_dir or Path(cfg.output.dir)
    setup_logging(cfg.logging, output_dir)
    provider = _build_provider(cfg, output_dir, transport) if cfg.analyst.enabled else None
    return run_analyst(
        cfg,
        provider,
        build_limiter(cfg),
        output_dir / cfg.output.data_filename,
        now=now,
        force=force,
        transport=transport,
    )
