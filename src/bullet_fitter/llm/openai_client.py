from __future__ import annotations

import importlib
import logging
import threading
import time
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ..config import OpenAISettings

logger = logging.getLogger(__name__)

OpenAI: Callable[..., Any] | None = None


@dataclass(slots=True)
class GenerationMetadata:
    """Identifies a revision request in log lines."""

    label: str
    attempt: int


class OpenAIGenerationClient:
    """
    Send revision prompts to the OpenAI Responses API.

    Concurrent callers share at most ``parallel_requests`` in-flight
    requests, each request carries ``request_timeout`` and failed requests
    are retried up to ``max_attempts`` times with capped backoff.
    """

    def __init__(self, settings: OpenAISettings, api_key: str) -> None:
        if not api_key:
            raise ValueError("OpenAI API key is required for statement revision.")
        self._settings = settings
        self._api_key = api_key
        self._openai_cls = _resolve_openai_class()
        self._client: Any | None = None
        self._client_lock = threading.Lock()
        self._slots: AbstractContextManager[Any] = (
            threading.BoundedSemaphore(settings.parallel_requests)
            if settings.parallel_requests > 0
            else nullcontext()
        )
        self._max_attempts = max(1, settings.max_attempts)

    @property
    def settings(self) -> OpenAISettings:
        return self._settings

    def complete(
        self,
        *,
        system_prompt: str | None,
        user_prompt: str,
        metadata: GenerationMetadata,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> str:
        """Send one revision request and return the model's text."""
        request = self._build_request(
            system_prompt, user_prompt, temperature, max_output_tokens
        )
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                with self._slots:
                    response = self._get_client().responses.create(**request)
                text = _response_text(response)
            except Exception as exc:  # pragma: no cover - network-related
                last_error = exc
                logger.warning(
                    "OpenAI revision failed for %s (request %s/%s): %s",
                    metadata.label,
                    attempt,
                    self._max_attempts,
                    exc,
                )
                if attempt < self._max_attempts:
                    time.sleep(min(2 ** (attempt - 1), 5))
                continue
            logger.debug(
                "OpenAI revision succeeded for %s attempt=%s",
                metadata.label,
                metadata.attempt,
            )
            return text
        raise RuntimeError("OpenAI revision request failed.") from last_error

    def _build_request(
        self,
        system_prompt: str | None,
        user_prompt: str,
        temperature: float | None,
        max_output_tokens: int | None,
    ) -> dict[str, Any]:
        settings = self._settings
        messages = [{"role": "user", "content": user_prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})
        return {
            "model": settings.model,
            "input": messages,
            "temperature": settings.temperature if temperature is None else temperature,
            "max_output_tokens": (
                settings.max_output_tokens
                if max_output_tokens is None
                else max_output_tokens
            ),
            "top_p": settings.top_p,
            "timeout": settings.request_timeout,
        }

    def _get_client(self) -> Any:
        # Batch workers may race to the first request.
        with self._client_lock:
            if self._client is None:
                self._client = self._openai_cls(
                    api_key=self._api_key,
                    base_url=self._settings.base_url,
                    organization=self._settings.organization,
                )
            return self._client


def _response_text(response: Any) -> str:
    """Pull the generated text out of a Responses API result."""
    output_text = getattr(response, "output_text", None)
    if isinstance(output_text, str) and output_text:
        return output_text
    output = getattr(response, "output", None)
    if not output:
        raise RuntimeError("OpenAI response is missing output content.")
    content = _field(output[0], "content")
    if not content:
        raise RuntimeError("OpenAI response has no content segments.")
    text = _field(content[0], "text")
    if not text:
        raise RuntimeError("OpenAI response segment missing text.")
    return text


def _field(item: Any, name: str) -> Any:
    # SDK objects expose attributes; raw payloads are plain mappings.
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _resolve_openai_class() -> Callable[..., Any]:
    """Import ``openai.OpenAI`` on first use so the width engine never needs it."""
    global OpenAI
    if OpenAI is None:
        try:
            module = importlib.import_module("openai")
        except ImportError as exc:  # pragma: no cover - handled at runtime
            raise RuntimeError(
                "openai package is not installed. "
                "Install extras via 'pip install .[llm-openai]'."
            ) from exc
        OpenAI = getattr(module, "OpenAI")
    return OpenAI
