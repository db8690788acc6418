"""
Text generation capability used to phrase questions and suggestions.

Output is best-effort prose; callers parse it with app.core.suggestions.
No retries here: retry policy belongs to the caller.
"""
from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from app.core.config import settings
from app.core.errors import UpstreamUnavailable


class TextGenerator(Protocol):
    def complete(self, system_prompt: str, prompt: str) -> str: ...


class HTTPTextGenerator:
    """Client for an OpenAI-compatible /chat/completions endpoint."""

    def __init__(
        self,
        endpoint: str | None,
        api_key: str | None = None,
        *,
        model: str = "gpt-4",
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._endpoint = endpoint
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._transport = transport
        self._logger = structlog.get_logger(__name__)

    def complete(self, system_prompt: str, prompt: str) -> str:
        if not self._endpoint:
            raise UpstreamUnavailable("Text generation is not configured")

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.post(self._endpoint, json=payload, headers=headers)
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            self._logger.warning("text_generation.failed", error=str(exc), model=self._model)
            raise UpstreamUnavailable("Text generation provider failed") from exc

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content.strip():
            self._logger.warning("text_generation.empty", model=self._model)
            raise UpstreamUnavailable("Text generation provider returned no text")
        return content


def get_text_generator() -> TextGenerator:
    """FastAPI dependency; tests override it with a canned generator."""
    return HTTPTextGenerator(
        settings.TEXT_GENERATION_URL,
        settings.TEXT_GENERATION_API_KEY,
        model=settings.TEXT_GENERATION_MODEL,
        temperature=settings.TEXT_GENERATION_TEMPERATURE,
        max_tokens=settings.TEXT_GENERATION_MAX_TOKENS,
        timeout=settings.TEXT_GENERATION_TIMEOUT,
    )
