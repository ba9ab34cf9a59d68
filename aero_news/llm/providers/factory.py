"""Provider factory and registry for summarization backends."""

from __future__ import annotations

import logging

import httpx

from ...config import LoggingConfig, ProviderConfig, get_api_key
from .base import TakeawayProvider
from .gemini import GeminiProvider


ProviderBuilder = type[TakeawayProvider]

_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "gemini": GeminiProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_provider(
    provider_cfg: ProviderConfig,
    log_cfg: LoggingConfig,
    llm_logger: logging.Logger | None = None,
    transport: httpx.BaseTransport | None = None,
) -> TakeawayProvider | None:
    """Build a provider instance from runtime config.

    Returns None when no API key is configured; callers then use
    rule-based takeaways only.
    """
    name = provider_cfg.name.lower().strip()
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    api_key = get_api_key(provider_cfg)
    if not api_key:
        return None
    return builder(provider_cfg, api_key, log_cfg, llm_logger, transport=transport)
