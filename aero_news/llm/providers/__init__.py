"""
Summarization provider implementations.

To add a new provider:
1. Inherit from TakeawayProvider
2. Implement generate()
3. Register it in factory._PROVIDER_REGISTRY
"""

from .base import GenerationResult, TakeawayProvider
from .factory import available_providers, create_provider
from .gemini import GeminiProvider, extract_text

__all__ = [
    "GenerationResult",
    "TakeawayProvider",
    "GeminiProvider",
    "available_providers",
    "create_provider",
    "extract_text",
]
