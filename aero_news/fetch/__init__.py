"""
Feed fetching.

This package handles concurrent HTTP fetching of RSS/Atom/RDF
feeds and hands the documents to the normalizer.
"""

from .fetcher import FetchResult, fetch_all_feeds, fetch_all_feeds_async, fetch_feed, parse_feed

__all__ = [
    "FetchResult",
    "fetch_all_feeds",
    "fetch_all_feeds_async",
    "fetch_feed",
    "parse_feed",
]
