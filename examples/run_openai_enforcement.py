"""Minimal example showing how to run character-count enforcement directly."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from bullet_fitter.config import load_config
from bullet_fitter.enforcement import enforce_character_limits
from bullet_fitter.generation import OpenAITextGenerator
from bullet_fitter.llm import OpenAIGenerationClient
from bullet_fitter.optimizer import optimize_bullet


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    config = load_config(Path(__file__).with_name("example_config.yaml"))
    config.openai.enabled = True
    api_key = (
        config.openai.api_key
        or os.environ.get(config.openai.api_key_env or "OPENAI_API_KEY")
        or ""
    )
    if not api_key:
        raise RuntimeError(
            "Set the OpenAI API key before running this example "
            f"({config.openai.api_key_env})."
        )

    client = OpenAIGenerationClient(config.openai, api_key=api_key)
    generator = OpenAITextGenerator(client, label="example")

    draft = (
        "Led 12-member team through 3 base-wide exercises; validated recall "
        "procedures for 1.2K personnel & cut response time by 30 percent."
    )
    result = enforce_character_limits(draft, config.enforcement, generator)
    print("Original:\n", draft)
    print(f"\nRevised ({result.stop_reason.value}, {result.attempts} attempts):\n")
    print(result.statement)

    fitted = optimize_bullet(result.statement, config.target_width_px)
    print(f"\nSpacing fit: {fitted.status.name}, {fitted.rendering.lines} line(s)")


if __name__ == "__main__":
    main()
