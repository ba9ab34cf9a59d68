"""
Shared utility functions.

This package contains utility code used across multiple
pipeline stages.
"""

from .logging import (
    ApiKeyFilter,
    JsonlFormatter,
    log_event,
    mask_api_key,
    redact_text,
    redact_value,
    setup_llm_logger,
    setup_logging,
    truncate_text,
)

__all__ = [
    "setup_logging",
    "setup_llm_logger",
    "log_event",
    "mask_api_key",
    "redact_text",
    "redact_value",
    "truncate_text",
    "ApiKeyFilter",
    "JsonlFormatter",
]
