from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

from .llm.openai_client import GenerationMetadata, OpenAIGenerationClient

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """Opaque text-generation capability used to revise statements."""

    @abstractmethod
    def generate(
        self,
        *,
        system_prompt: str | None,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Return generated text for ``prompt``."""
        raise NotImplementedError


class CallableTextGenerator(TextGenerator):
    """Adapt a plain ``prompt -> text`` callable into the TextGenerator interface."""

    def __init__(self, func: Callable[[str], str]) -> None:
        self._func = func

    def generate(
        self,
        *,
        system_prompt: str | None,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        return self._func(prompt)


class OpenAITextGenerator(TextGenerator):
    """TextGenerator backed by the OpenAI Responses API."""

    def __init__(self, client: OpenAIGenerationClient, *, label: str = "statement") -> None:
        self._client = client
        self._label = label
        self._calls = 0
        self._calls_lock = threading.Lock()

    def generate(
        self,
        *,
        system_prompt: str | None,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        with self._calls_lock:
            self._calls += 1
            request_number = self._calls
        logger.info(
            "Requesting revision %s for %s (temperature=%.2f)",
            request_number,
            self._label,
            temperature,
        )
        text = self._client.complete(
            system_prompt=system_prompt,
            user_prompt=prompt,
            metadata=GenerationMetadata(label=self._label, attempt=request_number),
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        return text.strip()
