"""
Takeaway generation.

Each article gets one sentence of editorial insight. When a provider is
configured and the daily cap allows, the provider writes it; otherwise, or
when the call fails, a fixed sentence is chosen by a rule cascade over the
article's category and text.

Calls are made strictly one at a time, so the check-then-record pair on the
usage counter cannot race within a run.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterable

from ..core.types import Article
from ..llm.prompts import takeaway_prompt
from ..llm.providers.base import GenerationResult, TakeawayProvider
from ..usage import UsageLimiter
from ..utils.logging import log_event


logger = logging.getLogger("aero_news.takeaway")

GENERIC_TAKEAWAY = "Industry developments to monitor closely."


def _mentions(*terms: str) -> Callable[[str], bool]:
    return lambda text: any(term in text for term in terms)


# (category, text predicate, sentence). Order matters: the first match wins.
FALLBACK_RULES: tuple[tuple[str | None, Callable[[str], bool], str], ...] = (
    ("safety", _mentions("safety", "crash", "incident"),
     "Safety implications warrant industry attention."),
    ("regulatory", _mentions("faa", "easa", "regulation"),
     "Regulatory changes may affect industry operations."),
    ("evtol", _mentions("evtol", "air taxi", "urban air"),
     "Urban air mobility advances toward commercial reality."),
    ("drones", _mentions("drone", "uas", "unmanned"),
     "Drone technology continues to reshape aviation operations."),
    ("electric", _mentions("electric", "hybrid", "sustainable"),
     "Sustainable aviation technology gains momentum."),
    (None, _mentions("boeing"),
     "Boeing developments impact global aviation supply chain."),
    (None, _mentions("airbus"),
     "Airbus activity reflects European aerospace trends."),
    ("aerospace", _mentions("nasa", "space"),
     "Aerospace developments expand industry horizons."),
    ("military", _mentions(),
     "Military aviation advances influence broader industry."),
    ("commercial", _mentions("airline", "airport"),
     "Commercial aviation dynamics shape travel industry."),
    ("business-aviation", _mentions(),
     "Business aviation sector shows evolving market trends."),
)


def fallback_takeaway(article: Article) -> str:
    """Rule-based takeaway from category and lowercased headline + blurb."""
    text = f"{article.headline} {article.blurb or ''}".lower()
    for category, matches_text, sentence in FALLBACK_RULES:
        if (category is not None and article.category == category) or matches_text(text):
            return sentence
    return GENERIC_TAKEAWAY


def metered_generate(
    provider: TakeawayProvider,
    limiter: UsageLimiter,
    prompt: str,
    max_tokens: int,
    temperature: float,
    context: dict[str, str] | None = None,
) -> GenerationResult:
    """Make one provider call and record it against the daily quota.

    The call is recorded exactly once whatever happens: success, HTTP
    error, unusable response, or an exception inside the provider.
    """
    try:
        return provider.generate(prompt, max_tokens, temperature, context=context)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Provider raised for %r: %s", (context or {}).get("headline"), exc)
        return GenerationResult(error=f"{type(exc).__name__}: {exc}")
    finally:
        limiter.record(1)


@dataclass
class TakeawayStats:
    """Counts collected during one takeaway pass.

    Attributes:
        ai: Takeaways written by the provider
        fallback: Rule-based takeaways
        preset: Manual takeaways kept as-is
        failed_calls: Provider calls that produced no usable text
        cap_reached: Whether the daily cap stopped provider calls
    """

    ai: int = 0
    fallback: int = 0
    preset: int = 0
    failed_calls: int = 0
    cap_reached: bool = False


class TakeawayGenerator:
    """Fills `Article.takeaway` for a list of articles.

    Attributes:
        provider: Summarization provider, or None when no credential is configured
        limiter: Daily usage counter
        daily_cap: Maximum provider calls per UTC day
        max_tokens: Output token limit per call
        temperature: Sampling temperature per call
    """

    def __init__(
        self,
        provider: TakeawayProvider | None,
        limiter: UsageLimiter,
        daily_cap: int,
        max_tokens: int = 100,
        temperature: float = 0.7,
    ):
        self.provider = provider
        self.limiter = limiter
        self.daily_cap = daily_cap
        self.max_tokens = max_tokens
        self.temperature = temperature

    def generate_all(
        self,
        articles: Iterable[Article],
        on_progress: Callable[[Article], None] | None = None,
    ) -> TakeawayStats:
        stats = TakeawayStats()
        if self.provider is None:
            logger.info("No summarization API key configured, using rule-based takeaways")

        for article in articles:
            if article.takeaway:
                stats.preset += 1
            else:
                article.takeaway = self._takeaway_for(article, stats)
            if on_progress is not None:
                on_progress(article)

        log_event(
            logger,
            "Takeaways generated",
            event="takeaways_done",
            ai=stats.ai,
            fallback=stats.fallback,
            preset=stats.preset,
            failed_calls=stats.failed_calls,
            cap_reached=stats.cap_reached,
        )
        return stats

    def _takeaway_for(self, article: Article, stats: TakeawayStats) -> str:
        if self.provider is None or stats.cap_reached:
            stats.fallback += 1
            return fallback_takeaway(article)

        if not self.limiter.can_spend(1, self.daily_cap):
            stats.cap_reached = True
            logger.warning(
                "Daily summarization cap reached (cap: %d, remaining: %d); "
                "using rule-based takeaways for the rest of this run",
                self.daily_cap,
                self.limiter.remaining(self.daily_cap),
            )
            stats.fallback += 1
            return fallback_takeaway(article)

        result = metered_generate(
            self.provider,
            self.limiter,
            takeaway_prompt(article),
            self.max_tokens,
            self.temperature,
            context={"headline": article.headline, "url": article.source.url},
        )
        if result.ok and result.text:
            stats.ai += 1
            return result.text.strip()

        stats.failed_calls += 1
        stats.fallback += 1
        return fallback_takeaway(article)
