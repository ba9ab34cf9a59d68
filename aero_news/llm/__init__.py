"""LLM-backed text generation."""

from .prompts import analyst_brief_prompt, takeaway_prompt
from .providers import GeminiProvider, GenerationResult, TakeawayProvider, create_provider

__all__ = [
    "GeminiProvider",
    "GenerationResult",
    "TakeawayProvider",
    "create_provider",
    "analyst_brief_prompt",
    "takeaway_prompt",
]
