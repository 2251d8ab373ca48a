from __future__ import annotations

import threading
import time
from typing import Callable, List


def make_statement(length: int, lead: str = "A", fill: str = "b") -> str:
    """Build a single-sentence statement of exactly ``length`` characters."""
    return lead + fill * (length - 2) + "."


class ScriptedGenerator:
    """TextGenerator double that answers from a callable and records prompts."""

    def __init__(self, respond: Callable[[int, str], str], delay: float = 0.0) -> None:
        self._respond = respond
        self._delay = delay
        self._lock = threading.Lock()
        self.prompts: List[str] = []
        self.kwargs: List[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate(
        self,
        *,
        system_prompt: str | None,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        with self._lock:
            self.prompts.append(prompt)
            self.kwargs.append(
                {
                    "system_prompt": system_prompt,
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                }
            )
            call_number = len(self.prompts)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self._delay:
                time.sleep(self._delay)
            return self._respond(call_number, prompt)
        finally:
            with self._lock:
                self.in_flight -= 1
