from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping

import yaml

from .widths import AF1206_LINE_WIDTH_PX
from .wordlists import DEFAULT_ABBREVIATIONS, DEFAULT_BANNED_WORDS


@dataclass(slots=True)
class OpenAISettings:
    """Configuration block for OpenAI-powered statement revision."""

    enabled: bool = False
    model: str = "gpt-4.1-mini"
    api_key: str | None = None
    api_key_env: str = "OPENAI_API_KEY"
    base_url: str | None = None
    organization: str | None = None
    temperature: float = 0.3
    max_output_tokens: int = 500
    top_p: float = 0.95
    request_timeout: float = 60.0
    parallel_requests: int = 3
    max_attempts: int = 1


@dataclass(slots=True)
class EnforcementSettings:
    """Character-count window and model parameters for the enforcement loop."""

    target_max: int = 350
    target_min: int | None = None
    max_retries: int = 2
    temperature: float = 0.3
    max_tokens: int = 500
    context: str | None = None
    banned_words: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_BANNED_WORDS)
    )


@dataclass(slots=True)
class BulletFitterConfig:
    """Top-level configuration for width fitting and length enforcement."""

    target_width_px: float = AF1206_LINE_WIDTH_PX
    abbreviations: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_ABBREVIATIONS)
    )
    enforcement: EnforcementSettings = field(default_factory=EnforcementSettings)
    openai: OpenAISettings = field(default_factory=OpenAISettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _filter_fields(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {item.name for item in fields(cls)}
    return {key: data[key] for key in data if key in allowed}


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    kwargs = _filter_fields(BulletFitterConfig, data)
    enforcement_value = data.get("enforcement")
    if isinstance(enforcement_value, Mapping):
        kwargs["enforcement"] = EnforcementSettings(
            **_filter_fields(EnforcementSettings, enforcement_value)
        )
    openai_value = data.get("openai")
    if isinstance(openai_value, Mapping):
        kwargs["openai"] = OpenAISettings(
            **_filter_fields(OpenAISettings, openai_value)
        )
    return kwargs


def config_from_dict(data: Mapping[str, Any] | None) -> BulletFitterConfig:
    """Build a BulletFitterConfig from a dictionary-like input."""
    if data is None:
        return BulletFitterConfig()
    return BulletFitterConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> BulletFitterConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> BulletFitterConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return BulletFitterConfig()
    return config_from_yaml(path)
