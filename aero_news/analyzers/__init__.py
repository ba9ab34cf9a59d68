"""Per-article enrichment: takeaways and analyst briefs."""

from .analyst import AnalystOutcome, run_analyst, select_articles
from .takeaway import (
    TakeawayGenerator,
    TakeawayStats,
    fallback_takeaway,
    metered_generate,
)

__all__ = [
    "AnalystOutcome",
    "TakeawayGenerator",
    "TakeawayStats",
    "fallback_takeaway",
    "metered_generate",
    "run_analyst",
    "select_articles",
]
