"""
AeroNews - aviation news aggregator.

This package pulls aviation RSS/Atom/RDF feeds, merges them with
operator-supplied manual entries, adds a one-sentence takeaway per article
(AI-written under a daily call cap, rule-based otherwise) and renders a
scrolling ticker page plus a JSON data file. Optional chat digests go to
Teams and Slack; analyst mode posts a safety-focused digest.

Main entry point is the CLI via the `aero-news run` command.

Example:
    $ aero-news run -c config.yaml -o dist/
"""

__all__ = ["__version__", "Article", "FeedSource", "load_config", "run_pipeline"]
__version__ = "0.1.0"

from .config import load_config
from .core.types import Article, FeedSource
from .runner import run_pipeline
