"""Tests for run logging: JSONL records, key masking and LLM log redaction."""

from __future__ import annotations

import json
import logging

from aero_news.config import LoggingConfig
from aero_news.utils.logging import (
    log_event,
    mask_api_key,
    redact_text,
    redact_value,
    setup_llm_logger,
    setup_logging,
)


def _records(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_jsonl_file_carries_extra_fields(tmp_path):
    logger = setup_logging(LoggingConfig(console=False), tmp_path)

    log_event(logger, "Feed ok", event="feed_fetch_ok", feed="AVweb", count=3)
    logging.getLogger("aero_news.fetch").warning("Failed to fetch %s", "Gone")

    records = _records(tmp_path / "run.jsonl")
    assert records[0]["message"] == "Feed ok"
    assert records[0]["event"] == "feed_fetch_ok"
    assert records[0]["count"] == 3
    assert "lineno" not in records[0]
    assert records[1]["logger"] == "aero_news.fetch"
    assert records[1]["level"] == "WARNING"


def test_api_key_is_masked_in_logs(tmp_path):
    logger = setup_logging(LoggingConfig(console=False, format="plain"), tmp_path)

    logger.warning("POST %s failed", "https://g.example/v1beta/models/m:generateContent?key=SECRET123&alt=json")

    text = (tmp_path / "run.jsonl").read_text(encoding="utf-8")
    assert "SECRET123" not in text
    assert "key=***&alt=json" in text


def test_mask_api_key_leaves_other_params():
    assert mask_api_key("https://x.example/a?monkey=1&key=abc") == "https://x.example/a?monkey=1&key=***"


def test_llm_logger_disabled_by_default(tmp_path):
    assert setup_llm_logger(LoggingConfig(), tmp_path) is None
    assert setup_llm_logger(LoggingConfig(llm_log_enabled=True), None) is None


def test_redaction_modes():
    text = "See https://avweb.example/story for details"
    assert redact_text(text, "none") == text
    assert redact_text(text, "redact_content") == ""
    assert redact_text(text, "redact_urls") == "See [REDACTED_URL] for details"
    assert redact_value("https://avweb.example/story", "none") == "https://avweb.example/story"
    assert redact_value("https://avweb.example/story", "redact_urls") == "[REDACTED]"
    assert redact_value(None, "redact_urls") is None
