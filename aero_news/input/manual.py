"""
Loading of operator-supplied manual entries.

The file is JSON (`{"articles": [...]}` or a bare list) or, with a
.yaml/.yml suffix, the same structure in YAML. A missing or unreadable
file degrades to an empty list with a warning; it never stops a run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..core.types import ManualEntry


logger = logging.getLogger("aero_news.input")


def load_manual_entries(path: Path) -> list[ManualEntry]:
    """Read manual entries, skipping entries without a headline or URL."""
    try:
        raw_text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            payload = yaml.safe_load(raw_text)
        else:
            payload = json.loads(raw_text)
    except FileNotFoundError:
        logger.warning("No manual entries file at %s, skipping manual articles", path)
        return []
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.warning("Invalid manual entries file %s, skipping manual articles: %s", path, exc)
        return []

    raw_entries = payload.get("articles") if isinstance(payload, dict) else payload
    if not isinstance(raw_entries, list):
        logger.warning("Manual entries file %s has no article list, skipping", path)
        return []

    entries: list[ManualEntry] = []
    for index, raw in enumerate(raw_entries):
        entry = parse_manual_entry(raw)
        if entry is None:
            logger.warning("Skipping manual entry #%d: headline and url are required", index)
            continue
        entries.append(entry)
    return entries


def parse_manual_entry(raw: Any) -> ManualEntry | None:
    if not isinstance(raw, dict):
        return None
    headline = _optional_str(raw.get("headline"))
    url = _optional_str(raw.get("url"))
    if not headline or not url:
        return None
    priority = _optional_str(raw.get("priority")) or "normal"
    return ManualEntry(
        headline=headline,
        url=url,
        blurb=_optional_str(raw.get("blurb")) or "",
        source=_optional_str(raw.get("source")),
        date=_optional_str(raw.get("date")),
        category=_optional_str(raw.get("category")),
        priority=priority.lower(),
        takeaway=_optional_str(raw.get("takeaway")),
    )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
