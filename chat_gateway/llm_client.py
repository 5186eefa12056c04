"""Client wrapper for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from .config import ProviderConfig
from .errors import UpstreamError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper around the Gemini REST API.

    Every failure mode (transport, HTTP status, blocked prompt, unexpected
    payload) surfaces as :class:`~chat_gateway.errors.UpstreamError` so callers
    only have one exception type to handle.
    """

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    @property
    def url(self) -> str:
        return f"{self.config.endpoint.rstrip('/')}/models/{self.config.model}:generateContent"

    def generate(
        self,
        contents: List[Dict[str, object]],
        *,
        generation_config: Optional[Dict[str, object]] = None,
    ) -> str:
        """Send the conversation and return the generated text."""
        if not self.config.api_key:
            raise UpstreamError("GEMINI_API_KEY is not configured")

        payload: Dict[str, object] = {"contents": contents}
        if generation_config:
            payload["generationConfig"] = generation_config

        logger.info("Requesting completion from %s (%d content block(s))", self.config.model, len(contents))
        try:
            response = requests.post(
                self.url,
                json=payload,
                headers={"x-goog-api-key": self.config.api_key},
                timeout=self.config.request_timeout,
            )
        except requests.Timeout as exc:
            raise UpstreamError(f"Gemini request timed out after {self.config.request_timeout}s") from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"Gemini request failed: {exc}") from exc

        if not response.ok:
            raise UpstreamError(self._error_message(response))

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("Gemini returned a non-JSON response") from exc
        return self._extract_text(data)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            error = response.json().get("error") or {}
            message = error.get("message")
        except (ValueError, AttributeError):
            message = None
        return f"Gemini returned HTTP {response.status_code}: {message or response.reason}"

    @staticmethod
    def _extract_text(data: Dict[str, object]) -> str:
        feedback = data.get("promptFeedback") or {}
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise UpstreamError(f"Prompt was blocked by the provider: {block_reason}")

        candidates = data.get("candidates") or []
        if not candidates:
            raise UpstreamError("Gemini response contained no candidates")

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        texts = [str(part["text"]) for part in parts if isinstance(part, dict) and part.get("text")]
        if not texts:
            reason = candidate.get("finishReason") or "unknown"
            raise UpstreamError(f"Gemini response contained no text (finishReason={reason})")
        return "".join(texts)
