"""
Abstract base class for summarization providers.

New providers should inherit from TakeawayProvider and implement
`generate`, returning a GenerationResult instead of raising.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class GenerationResult:
    """Outcome of one summarization call.

    Either text is populated (success) or error is populated (failure).

    Attributes:
        text: Generated text, None on failure
        error: Failure reason ("HTTP 429", "ConnectTimeout: ...", "no text"), None on success
        status_code: HTTP status code when a response was received
    """

    text: str | None = None
    error: str | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)


class TakeawayProvider(ABC):
    """Provider interface for one-shot text generation."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        context: dict[str, str] | None = None,
    ) -> GenerationResult:
        """Run one generation request.

        Args:
            prompt: Full prompt text
            max_tokens: Output token limit
            temperature: Sampling temperature
            context: Optional article fields for logging (headline, url)

        Returns:
            GenerationResult; transport errors, timeouts and unusable
            responses are reported as failures, not raised
        """
        raise NotImplementedError
