from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, TypedDict

import typer
import yaml

from .analysis import analyze_text_fit, get_optimization_suggestions
from .config import BulletFitterConfig, OpenAISettings, load_config
from .enforcement import enforce_character_limits_multiple
from .generation import OpenAITextGenerator, TextGenerator
from .layout import render_bullet_text
from .llm import OpenAIGenerationClient
from .models import (
    CharacterValidationResult,
    EnforcementResult,
    OptimizeResult,
    RenderResult,
)
from .optimizer import optimize_bullet, optimize_multi_line_bullet
from .validation import should_attempt_enforcement, validate_character_count

app = typer.Typer(help="AF Form bullet fitting CLI.", no_args_is_help=True)

TEXT_OPTION = typer.Option(
    None, "--text", "-t", help="Statement to process (repeatable)."
)
INPUT_PATH_OPTION = typer.Option(
    None,
    "--input-path",
    exists=True,
    readable=True,
    dir_okay=False,
    file_okay=True,
    help="File with one statement per line.",
)
CONFIG_OPTION = typer.Option(None, "--config", "-c")
WIDTH_OPTION = typer.Option(
    None, "--width", "-w", help="Target line width in pixels (default: AF Form 1206)."
)


class RenderPayload(TypedDict):
    text_lines: List[str]
    full_width: float
    lines: int
    overflow: float


class OptimizePayload(TypedDict):
    text: str
    status: str
    optimized_text: str
    rendering: RenderPayload


class ValidationPayload(TypedDict):
    is_compliant: bool
    actual_length: int
    target_min: int
    target_max: int
    variance_direction: str
    chars_to_adjust: int


@app.command()
def render(
    text: List[str] | None = TEXT_OPTION,
    input_path: Path | None = INPUT_PATH_OPTION,
    config: Path | None = CONFIG_OPTION,
    width: float | None = WIDTH_OPTION,
) -> None:
    """Show how each statement wraps on the form."""
    cfg = load_config(config)
    target = _resolve_width(cfg, width)
    payload = [
        {"text": statement, **_render_dict(render_bullet_text(statement, target))}
        for statement in _collect_statements(text, input_path)
    ]
    typer.echo(json.dumps({"statements": payload}, indent=2))


@app.command()
def optimize(
    text: List[str] | None = TEXT_OPTION,
    input_path: Path | None = INPUT_PATH_OPTION,
    config: Path | None = CONFIG_OPTION,
    width: float | None = WIDTH_OPTION,
    multi_line: bool = typer.Option(
        False, "--multi-line", help="Compress every space instead of fitting one line."
    ),
) -> None:
    """Adjust inter-word spacing so each statement fits the line width."""
    cfg = load_config(config)
    target = _resolve_width(cfg, width)
    optimizer = optimize_multi_line_bullet if multi_line else optimize_bullet
    payload = [
        _optimize_dict(statement, optimizer(statement, target))
        for statement in _collect_statements(text, input_path)
    ]
    typer.echo(json.dumps({"statements": payload}, indent=2))


@app.command()
def analyze(
    text: List[str] | None = TEXT_OPTION,
    input_path: Path | None = INPUT_PATH_OPTION,
    config: Path | None = CONFIG_OPTION,
    width: float | None = WIDTH_OPTION,
) -> None:
    """Report fill, overflow and suggestions for each statement."""
    cfg = load_config(config)
    target = _resolve_width(cfg, width)
    payload: List[Dict[str, Any]] = []
    for statement in _collect_statements(text, input_path):
        analysis = analyze_text_fit(statement, target)
        payload.append(
            {
                "text": statement,
                "width_px": analysis.width_px,
                "fits_on_single_line": analysis.fits_on_single_line,
                "overflow_px": analysis.overflow_px,
                "overflow_percent": analysis.overflow_percent,
                "fill_percent": analysis.fill_percent,
                "estimated_lines": analysis.estimated_lines,
                "is_optimal": analysis.is_optimal,
                "can_be_optimized": analysis.can_be_optimized,
                "suggestions": get_optimization_suggestions(
                    statement, target, cfg.abbreviations
                ),
            }
        )
    typer.echo(json.dumps({"statements": payload}, indent=2))


@app.command()
def enforce(
    text: List[str] | None = TEXT_OPTION,
    input_path: Path | None = INPUT_PATH_OPTION,
    config: Path | None = CONFIG_OPTION,
    target_max: int | None = typer.Option(
        None, "--target-max", help="Maximum character count."
    ),
    target_min: int | None = typer.Option(
        None, "--target-min", help="Minimum character count (default: max - 10)."
    ),
    max_retries: int | None = typer.Option(
        None, "--max-retries", help="Revision attempts (capped at 3)."
    ),
    context: str | None = typer.Option(
        None, "--context", help="Category label passed to the model (e.g. MPA)."
    ),
    force: bool = typer.Option(
        False, "--force", help="Skip the pre-check and always run enforcement."
    ),
    openai_enabled: bool | None = typer.Option(
        None,
        "--openai-enabled/--openai-disabled",
        help="Toggle OpenAI-backed revision.",
    ),
    openai_model: str | None = typer.Option(
        None, "--openai-model", help="OpenAI model identifier (e.g., gpt-4.1-mini)."
    ),
    openai_api_key: str | None = typer.Option(
        None, "--openai-api-key", help="Explicit OpenAI API key (prefer env vars)."
    ),
    openai_api_key_env: str | None = typer.Option(
        None,
        "--openai-api-key-env",
        help="Environment variable to read the OpenAI API key from.",
    ),
    openai_base_url: str | None = typer.Option(
        None, "--openai-base-url", help="Custom OpenAI base URL (Azure, proxy, etc.)."
    ),
    openai_request_timeout: float | None = typer.Option(
        None, "--openai-request-timeout", help="Per-request timeout (seconds)."
    ),
) -> None:
    """Revise statements with the model until they fit the character window."""
    cfg = load_config(config)
    _apply_enforcement_overrides(cfg, target_max, target_min, max_retries, context)
    _apply_openai_overrides(
        cfg,
        openai_enabled,
        openai_model,
        openai_api_key,
        openai_api_key_env,
        openai_base_url,
        openai_request_timeout,
    )
    statements = _collect_statements(text, input_path)
    settings = cfg.enforcement

    # Statements the pre-check rejects keep their text and skip the model.
    pending: List[str] = []
    skipped: Dict[int, str] = {}
    for idx, statement in enumerate(statements):
        decision = should_attempt_enforcement(
            statement, settings.target_max, settings.target_min
        )
        if force or decision.should_enforce:
            pending.append(statement)
        else:
            skipped[idx] = decision.reason

    results: List[EnforcementResult] = []
    if pending:
        generator = _build_generator(cfg)
        results = enforce_character_limits_multiple(pending, settings, generator)

    enforced = iter(results)
    payload: List[Dict[str, Any]] = []
    for idx, statement in enumerate(statements):
        if idx in skipped:
            validation = validate_character_count(
                statement, settings.target_max, settings.target_min
            )
            payload.append(
                {
                    "original": statement,
                    "statement": statement,
                    "attempts": 0,
                    "was_adjusted": False,
                    "stop_reason": None,
                    "skipped_reason": skipped[idx],
                    "validation": _validation_dict(validation),
                }
            )
            continue
        result = next(enforced)
        payload.append(
            {
                "original": statement,
                "statement": result.statement,
                "attempts": result.attempts,
                "was_adjusted": result.was_adjusted,
                "stop_reason": result.stop_reason.value,
                "skipped_reason": None,
                "validation": _validation_dict(result.final_validation),
            }
        )
    typer.echo(json.dumps({"statements": payload}, indent=2))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = BulletFitterConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _collect_statements(
    text: List[str] | None, input_path: Path | None
) -> List[str]:
    """Gather statements from --text flags and/or a file, one per line."""
    statements: List[str] = list(text or [])
    if input_path is not None:
        contents = input_path.read_text(encoding="utf-8")
        statements.extend(line for line in contents.splitlines() if line.strip())
    if not statements:
        raise typer.BadParameter("Provide --text or --input-path.")
    return statements


def _resolve_width(config: BulletFitterConfig, width: float | None) -> float:
    if width is None:
        return config.target_width_px
    if width <= 0:
        raise typer.BadParameter("--width must be positive.")
    return width


def _apply_enforcement_overrides(
    config: BulletFitterConfig,
    target_max: int | None,
    target_min: int | None,
    max_retries: int | None,
    context: str | None,
) -> None:
    """Override enforcement settings from CLI flags."""
    settings = config.enforcement
    if target_max is not None:
        settings.target_max = target_max
    if target_min is not None:
        settings.target_min = target_min
    if max_retries is not None:
        settings.max_retries = max_retries
    if context:
        settings.context = context
    if settings.target_min is not None and settings.target_min > settings.target_max:
        raise typer.BadParameter("--target-min cannot exceed --target-max.")


def _apply_openai_overrides(
    config: BulletFitterConfig,
    openai_enabled: bool | None,
    openai_model: str | None,
    openai_api_key: str | None,
    openai_api_key_env: str | None,
    openai_base_url: str | None,
    openai_request_timeout: float | None,
) -> None:
    """Override OpenAI settings from CLI flags."""
    settings = config.openai
    if openai_enabled is not None:
        settings.enabled = openai_enabled
    if openai_model:
        settings.model = openai_model
    if openai_api_key:
        settings.api_key = openai_api_key
    if openai_api_key_env:
        settings.api_key_env = openai_api_key_env
    if openai_base_url:
        settings.base_url = openai_base_url
    if openai_request_timeout is not None:
        settings.request_timeout = openai_request_timeout


def _build_generator(config: BulletFitterConfig) -> TextGenerator:
    """Instantiate the configured text generator for the current run."""
    if not config.openai.enabled:
        typer.echo(
            "Enforcement needs a model; pass --openai-enabled or set openai.enabled.",
            err=True,
        )
        raise typer.Exit(code=1)
    api_key = _resolve_openai_api_key(config.openai)
    client = OpenAIGenerationClient(config.openai, api_key=api_key)
    return OpenAITextGenerator(client, label=config.enforcement.context or "statement")


def _resolve_openai_api_key(settings: OpenAISettings) -> str:
    """Resolve the API key from explicit config or the configured environment variable."""
    if settings.api_key:
        return settings.api_key
    env_name = settings.api_key_env or "OPENAI_API_KEY"
    if env_name in os.environ:
        return os.environ[env_name]
    typer.echo(
        "OpenAI API key not provided. Use --openai-api-key or set "
        f"{env_name}.",
        err=True,
    )
    raise typer.Exit(code=1)


def _render_dict(rendering: RenderResult) -> RenderPayload:
    return {
        "text_lines": list(rendering.text_lines),
        "full_width": rendering.full_width,
        "lines": rendering.lines,
        "overflow": rendering.overflow,
    }


def _optimize_dict(text: str, result: OptimizeResult) -> OptimizePayload:
    return {
        "text": text,
        "status": result.status.name.lower(),
        "optimized_text": result.optimized_text,
        "rendering": _render_dict(result.rendering),
    }


def _validation_dict(validation: CharacterValidationResult) -> ValidationPayload:
    return {
        "is_compliant": validation.is_compliant,
        "actual_length": validation.actual_length,
        "target_min": validation.target_min,
        "target_max": validation.target_max,
        "variance_direction": validation.variance_direction,
        "chars_to_adjust": validation.chars_to_adjust,
    }


if __name__ == "__main__":
    main()
