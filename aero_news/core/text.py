"""
Text cleaning helpers shared by feed normalization and manual entries.

Feed titles and descriptions arrive with markup, HTML character entities
and publisher suffixes. These helpers turn them into plain display text.
"""

from __future__ import annotations

import html
import re


HEADLINE_PLACEHOLDER = "Aviation News"
MAX_BLURB_CHARS = 300

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
# Named, decimal and hex entities. The trailing semicolon is required so
# bare ampersands in clean text are left alone.
_ENTITY_RE = re.compile(r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")
# " - Reuters", " | CNN". Anchored to the end and requires an uppercase start,
# so "F-35" and "737-800" survive.
_SOURCE_SUFFIX_RE = re.compile(r"\s+[-–—|]\s+[A-Z][A-Za-z\s]{2,20}$")

KEYWORD_VOCABULARY = (
    "boeing", "airbus", "cessna", "piper", "cirrus", "gulfstream", "embraer",
    "faa", "easa", "ntsb", "icao",
    "evtol", "uam", "drone", "uas", "aam",
    "electric", "hybrid", "sustainable", "saf",
    "safety", "crash", "incident", "accident",
    "airline", "airport", "pilot", "atc",
    "nasa", "spacex", "space",
)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def decode_entities(text: str | None) -> str:
    """Decode HTML/XML character entities in a single pass.

    `&amp;amp;` becomes `&amp;`, and text without entities is returned
    unchanged.
    """
    if not text:
        return ""
    return _ENTITY_RE.sub(lambda match: html.unescape(match.group(0)), text)


def strip_tags(text: str) -> str:
    return _TAG_RE.sub("", text)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_headline(title: str | None) -> str:
    """Strip markup, entities and a trailing " - Source" suffix from a title.

    Returns the placeholder headline when nothing is left.
    """
    if not title:
        return HEADLINE_PLACEHOLDER
    cleaned = decode_entities(strip_tags(title))
    cleaned = _SOURCE_SUFFIX_RE.sub("", cleaned)
    cleaned = collapse_whitespace(cleaned)
    return cleaned or HEADLINE_PLACEHOLDER


def clean_description(description: str | None, max_chars: int = MAX_BLURB_CHARS) -> str:
    """Plain-text description, truncated to `max_chars` with a "..." marker."""
    if not description:
        return ""
    cleaned = collapse_whitespace(decode_entities(strip_tags(description)))
    if len(cleaned) > max_chars:
        cleaned = cleaned[: max_chars - 3] + "..."
    return cleaned


def extract_keywords(text: str) -> list[str]:
    lowered = text.lower()
    return [keyword for keyword in KEYWORD_VOCABULARY if keyword in lowered]


def generate_id(title: str, link: str) -> str:
    """Deterministic article id from title and link.

    A 32-bit rolling hash (h * 31 + c) over the UTF-16 code units of
    "title-link", folded to a signed 32-bit value and rendered as the
    base-36 form of its absolute value. Not collision resistant.
    """
    raw = f"{title}-{link}".encode("utf-16-le")
    value = 0
    for index in range(0, len(raw), 2):
        unit = raw[index] | (raw[index + 1] << 8)
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))
