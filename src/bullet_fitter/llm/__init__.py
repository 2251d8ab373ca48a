from __future__ import annotations

from .openai_client import GenerationMetadata, OpenAIGenerationClient

__all__ = ["GenerationMetadata", "OpenAIGenerationClient"]
