"""
Core domain models and business logic.

This package contains the article types, text cleaning, feed
normalization and merge rules that are independent of any I/O.
"""

from .merge import dedup_by_url, format_manual_articles, merge_articles
from .normalizer import extract_items, normalize_document, normalize_item
from .text import clean_description, clean_headline, decode_entities, generate_id
from .types import Article, FeedSource, ManualEntry, Source

__all__ = [
    "Article",
    "FeedSource",
    "ManualEntry",
    "Source",
    "clean_description",
    "clean_headline",
    "decode_entities",
    "generate_id",
    "extract_items",
    "normalize_document",
    "normalize_item",
    "dedup_by_url",
    "format_manual_articles",
    "merge_articles",
]
