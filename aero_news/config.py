"""
AeroNews configuration.

A YAML file is layered over dataclass defaults; any section or key left
out keeps its default and unknown keys are ignored. Secrets (the API key,
webhook URLs) and the daily caps can come from the environment instead.

Top-level keys:
- feeds: list of {name, url, category, enabled}
- manual: ManualConfig, manual entries file and default source name
- fetch: FetchConfig, feed HTTP settings
- merge: MergeConfig, truncation and optional fuzzy dedup
- provider: ProviderConfig, summarization backend
- usage: UsageConfig, daily call caps and counter file
- output: OutputConfig, page and data file names
- webhooks: WebhookConfig, Teams/Slack digests
- analyst: AnalystConfig, SMS analyst digest
- logging: LoggingConfig
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
import os
from typing import Any

import yaml

from .core.types import FeedSource


class ConfigError(Exception):
    """Configuration is missing or invalid and the run cannot proceed."""


@dataclass
class ManualConfig:
    """Configuration for operator-supplied articles.

    Attributes:
        path: JSON or YAML file with manual entries; missing file means no entries
        default_source: Source name used when an entry has none
    """

    path: str = "manual.json"
    default_source: str = "AeroNews Editorial"


@dataclass
class FetchConfig:
    """Configuration for feed fetching.

    Attributes:
        timeout_seconds: Per-feed request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 15.0
    trust_env: bool = True
    user_agent: str = "AeroNews/1.0 (Aviation News Aggregator)"


@dataclass
class MergeConfig:
    """Configuration for merging feed and manual articles.

    Attributes:
        max_articles: Maximum number of articles in the ticker
        title_similarity_threshold: Optional fuzzy headline dedup threshold (0-100);
            None disables it
    """

    max_articles: int = 36
    title_similarity_threshold: int | None = None


@dataclass
class ProviderConfig:
    """Configuration for the summarization provider.

    Attributes:
        name: Provider name ("gemini")
        model: Model identifier
        api_key_env: Environment variable holding the API key
        api_key: Optional inline API key (overrides env var)
        base_url: Base URL for the provider API
        timeout_seconds: Request timeout for one summarization call
        max_tokens: maxOutputTokens for takeaway generation
        temperature: Sampling temperature for takeaway generation
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "gemini"
    model: str = "gemini-2.0-flash"
    api_key_env: str = "GOOGLE_AI_API_KEY"
    api_key: str | None = None
    base_url: str = "https://generativelanguage.googleapis.com"
    timeout_seconds: float = 20.0
    max_tokens: int = 100
    temperature: float = 0.7
    trust_env: bool = True


@dataclass
class UsageConfig:
    """Configuration for the daily usage cap.

    Attributes:
        counter_path: JSON file holding today's call count
        public_cap: Daily cap for the public ticker run
        analyst_cap: Daily cap checked by analyst mode
        public_cap_env: Environment variable overriding public_cap
        analyst_cap_env: Environment variable overriding analyst_cap
    """

    counter_path: str = "dist/usage-counters.json"
    public_cap: int = 900
    analyst_cap: int = 100
    public_cap_env: str = "GEMINI_DAILY_CALL_CAP_PUBLIC"
    analyst_cap_env: str = "GEMINI_DAILY_CALL_CAP_ANALYST"


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        dir: Output directory for the ticker page and data file
        html_filename: Name of the rendered ticker page
        data_filename: Name of the structured JSON output
    """

    dir: str = "dist"
    html_filename: str = "index.html"
    data_filename: str = "news-data.json"


@dataclass
class WebhookConfig:
    """Configuration for digest delivery.

    Attributes:
        enabled: Master switch for webhook delivery
        mode: "daily" posts only at daily_digest_hour_utc, "every" posts on every run
        daily_digest_hour_utc: UTC hour for daily digests
        max_articles_in_digest: Number of top articles in each digest
        teams_enabled: Whether to post the Teams card
        slack_enabled: Whether to post the Slack blocks
        teams_url_env: Environment variable with the Teams webhook URL
        slack_url_env: Environment variable with the Slack webhook URL
        timeout_seconds: Timeout for each webhook post
    """

    enabled: bool = False
    mode: str = "daily"
    daily_digest_hour_utc: int = 11
    max_articles_in_digest: int = 10
    teams_enabled: bool = True
    slack_enabled: bool = True
    teams_url_env: str = "TEAMS_WEBHOOK_URL"
    slack_url_env: str = "SLACK_WEBHOOK_URL"
    timeout_seconds: float = 15.0


@dataclass
class AnalystConfig:
    """Configuration for the SMS analyst digest.

    Attributes:
        enabled: Whether analyst mode runs at all
        keywords: Case-insensitive keywords matched against headline and blurb
        daily_hour_utc: UTC hour at which the digest is posted
        max_articles: Maximum number of articles in the digest
        teams_url_env: Environment variable with the analyst Teams webhook URL
        max_tokens: maxOutputTokens for analyst briefs
        temperature: Sampling temperature for analyst briefs
    """

    enabled: bool = False
    keywords: list[str] = field(
        default_factory=lambda: [
            "safety", "incident", "accident", "crash", "ntsb", "sms",
            "runway", "emergency", "investigation", "faa", "easa",
        ]
    )
    daily_hour_utc: int = 12
    max_articles: int = 10
    teams_url_env: str = "ANALYST_TEAMS_WEBHOOK_URL"
    max_tokens: int = 300
    temperature: float = 0.5


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file (inside the output directory)
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: LLM log detail level ("response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = False
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    feeds: list[FeedSource] = field(default_factory=list)
    manual: ManualConfig = field(default_factory=ManualConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    merge: MergeConfig = field(default_factory=MergeConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    webhooks: WebhookConfig = field(default_factory=WebhookConfig)
    analyst: AnalystConfig = field(default_factory=AnalystConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def enabled_feeds(self) -> list[FeedSource]:
        return [feed for feed in self.feeds if feed.enabled]


_SECTIONS: dict[str, type] = {
    "manual": ManualConfig,
    "fetch": FetchConfig,
    "merge": MergeConfig,
    "provider": ProviderConfig,
    "usage": UsageConfig,
    "output": OutputConfig,
    "webhooks": WebhookConfig,
    "analyst": AnalystConfig,
    "logging": LoggingConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    if not path:
        return AppConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot load config {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig. Unknown keys are ignored."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            known = {f.name for f in fields(_SECTIONS[key])}
            data[key].update({k: v for k, v in value.items() if k in known})
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    sections = {name: cls(**data[name]) for name, cls in _SECTIONS.items()}
    return AppConfig(feeds=_parse_feeds(data.get("feeds")), **sections)


def _parse_feeds(raw: Any) -> list[FeedSource]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("'feeds' must be a list")
    feeds: list[FeedSource] = []
    for index, item in enumerate(raw):
        if isinstance(item, FeedSource):
            feeds.append(item)
            continue
        if not isinstance(item, dict) or not item.get("name") or not item.get("url"):
            raise ConfigError(f"Feed #{index} needs at least 'name' and 'url'")
        feeds.append(
            FeedSource(
                name=str(item["name"]),
                url=str(item["url"]),
                category=str(item.get("category") or "industry"),
                enabled=bool(item.get("enabled", True)),
            )
        )
    return feeds


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env) or None


def get_daily_cap(cfg: UsageConfig, mode: str = "public") -> int:
    """Daily cap for "public" or "analyst", environment first, then config."""
    if mode == "analyst":
        env_name, default = cfg.analyst_cap_env, cfg.analyst_cap
    else:
        env_name, default = cfg.public_cap_env, cfg.public_cap
    raw = os.getenv(env_name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{env_name} must be an integer, got {raw!r}") from None
