"""
Logging setup for AeroNews runs.

The "aero_news" logger writes to a Rich console handler and, when enabled,
to a JSONL (or plain) file in the output directory. Extra fields passed to
`log_event` become top-level keys in the JSONL records.

The Gemini API key travels as a `key=` query parameter, so httpx error
messages can contain it. Every handler installed here carries
`ApiKeyFilter`, which masks it before anything is written.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import re
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig


APP_LOGGER = "aero_news"
LLM_LOGGER = "aero_news.llm"

_URL_RE = re.compile(r"https?://\S+")
_API_KEY_RE = re.compile(r"([?&]key=)[^&\s'\"]+")

# LogRecord attributes that are not user-supplied extras.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

REDACTION_MODES = ("none", "redact_content", "redact_urls")


def mask_api_key(text: str) -> str:
    return _API_KEY_RE.sub(r"\1***", text)


class ApiKeyFilter(logging.Filter):
    """Masks `key=` query parameters in the rendered message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_api_key(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger:
    """Configure the application logger for one run.

    Existing handlers are replaced, so calling this once per command is safe.
    """
    logger = _reset_logger(APP_LOGGER, cfg.level)

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console_handler.setLevel(_level_from_string(cfg.level))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        console_handler.addFilter(ApiKeyFilter())
        logger.addHandler(console_handler)

    if cfg.file and log_dir is not None:
        logger.addHandler(_file_handler(log_dir / cfg.filename, cfg.level, _build_file_formatter(cfg.format)))

    return logger


def setup_llm_logger(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger | None:
    """Separate JSONL log of provider requests/responses, or None when disabled."""
    if not cfg.llm_log_enabled or log_dir is None:
        return None
    logger = _reset_logger(LLM_LOGGER, cfg.level)
    logger.addHandler(_file_handler(log_dir / cfg.llm_log_file, cfg.level, JsonlFormatter()))
    return logger


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    if logger is None:
        return
    logger.log(level, message, extra=fields)


def redact_text(text: str, mode: str) -> str:
    """Apply an LLM-log redaction mode to free text (prompts, responses)."""
    if mode == "redact_content":
        return ""
    if mode == "redact_urls":
        return _URL_RE.sub("[REDACTED_URL]", text)
    return text


def redact_value(value: str | None, mode: str) -> str | None:
    """Apply an LLM-log redaction mode to a single field such as an article URL."""
    if value is None or mode == "none":
        return value
    return "[REDACTED]"


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


class JsonlFormatter(logging.Formatter):
    """One JSON object per record: time, level, logger, message, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        )
        if record.exc_info:
            payload["exception"] = mask_api_key(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


def _reset_logger(name: str, level: str) -> logging.Logger:
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers = []
    logger.setLevel(_level_from_string(level))
    logger.propagate = False
    return logger


def _file_handler(path: Path, level: str, formatter: logging.Formatter) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(_level_from_string(level))
    handler.setFormatter(formatter)
    handler.addFilter(ApiKeyFilter())
    return handler


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
