"""Google Gemini provider for takeaways and analyst briefs."""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...utils.logging import log_event, redact_text, redact_value, truncate_text
from .base import GenerationResult, TakeawayProvider


logger = logging.getLogger("aero_news.llm")


class GeminiProvider(TakeawayProvider):
    """Gemini `generateContent` client."""

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        log_cfg: LoggingConfig,
        llm_logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("Missing Google AI API key")
        self.cfg = cfg
        self.api_key = api_key
        self.log_cfg = log_cfg
        self.llm_logger = llm_logger
        self.transport = transport

    @property
    def model_url(self) -> str:
        return f"{self.cfg.base_url.rstrip('/')}/v1beta/models/{self.cfg.model}:generateContent"

    def generate(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        context: dict[str, str] | None = None,
    ) -> GenerationResult:
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": max_tokens,
                "temperature": temperature,
            },
        }
        headline = (context or {}).get("headline", "")
        try:
            resp = self._post(payload)
        except httpx.HTTPError as exc:
            result = GenerationResult(error=f"{type(exc).__name__}: {exc}")
            logger.warning("Gemini call failed for %r: %s (model URL: %s)", headline, result.error, self.model_url)
            self._log_llm_response(context, "provider_error", result.error, prompt)
            return result

        if not resp.is_success:
            body = truncate_text(resp.text or "", 500)
            result = GenerationResult(error=f"HTTP {resp.status_code}", status_code=resp.status_code)
            logger.warning(
                "Gemini HTTP %s for %r (model URL: %s) response body: %s",
                resp.status_code,
                headline,
                self.model_url,
                body or "(empty)",
            )
            self._log_llm_response(context, "http_error", body, prompt)
            return result

        try:
            data = resp.json()
        except ValueError:
            result = GenerationResult(error="invalid JSON response", status_code=resp.status_code)
            logger.warning("Gemini returned non-JSON body for %r", headline)
            self._log_llm_response(context, "parse_error", resp.text or "", prompt)
            return result

        text = extract_text(data)
        if not text:
            logger.warning(
                "No usable Gemini text for %r, parsed response: %s",
                headline,
                truncate_text(str(data), 500),
            )
            self._log_llm_response(context, "no_text", str(data), prompt)
            return GenerationResult(error="no text", status_code=resp.status_code)

        self._log_llm_response(context, "ok", text, prompt)
        return GenerationResult(text=text, status_code=resp.status_code)

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        params = {"key": self.api_key}
        with httpx.Client(
            timeout=self.cfg.timeout_seconds,
            trust_env=self.cfg.trust_env,
            transport=self.transport,
        ) as client:
            return client.post(self.model_url, params=params, json=payload)

    def _log_llm_response(
        self,
        context: dict[str, str] | None,
        status: str,
        content: str,
        prompt: str,
    ) -> None:
        if self.llm_logger is None:
            return
        context = context or {}
        redaction = self.log_cfg.llm_log_redaction
        payload = {
            "event": "llm_response",
            "status": status,
            "model": self.cfg.model,
            "article_headline": context.get("headline"),
            "article_url": redact_value(context.get("url"), redaction),
            "raw_response": truncate_text(redact_text(content or "", redaction)),
        }
        if self.log_cfg.llm_log_detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
        log_event(self.llm_logger, "LLM response", **payload)


def _from_candidate_parts(data: dict[str, Any]) -> str | None:
    """candidates[0].content.parts[].text, skipping thought parts when possible."""
    parts = data["candidates"][0]["content"]["parts"]
    if not isinstance(parts, list):
        return None
    texts = [p.get("text") for p in parts if isinstance(p, dict) and not p.get("thought")]
    joined = "".join(t for t in texts if isinstance(t, str))
    if not joined.strip():
        joined = "".join(
            p.get("text") for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
        )
    return joined


def _from_output_text(data: dict[str, Any]) -> str | None:
    value = data["output_text"]
    return value if isinstance(value, str) else None


def _from_candidate_text(data: dict[str, Any]) -> str | None:
    value = data["candidates"][0]["text"]
    return value if isinstance(value, str) else None


TEXT_EXTRACTORS: tuple[Callable[[dict[str, Any]], str | None], ...] = (
    _from_candidate_parts,
    _from_output_text,
    _from_candidate_text,
)


def extract_text(data: Any) -> str | None:
    """Pull generated text out of a Gemini response.

    Tries each extractor in TEXT_EXTRACTORS; the first non-empty result wins.
    A shape mismatch in one extractor just moves on to the next.
    """
    if not isinstance(data, dict):
        return None
    for extractor in TEXT_EXTRACTORS:
        try:
            text = extractor(data)
        except (KeyError, IndexError, TypeError, AttributeError):
            continue
        if text and text.strip():
            return text.strip()
    return None
