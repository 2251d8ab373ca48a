"""
Character-count enforcement for LLM-drafted statements.

The model is asked to revise a statement until its length lands inside a
character window. Because the model is slow, costly and may never converge,
the loop is bounded by a hard retry ceiling and stops early when the model
repeats itself, stops improving, or bounces between too short and too long.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Set

from .config import EnforcementSettings
from .generation import TextGenerator
from .models import (
    CharacterValidationResult,
    EnforcementResult,
    StopReason,
    VarianceDirection,
)
from .sanitize import sanitize_statement_text
from .validation import (
    CLOSE_ENOUGH_THRESHOLD,
    resolve_target_min,
    validate_character_count,
)

logger = logging.getLogger(__name__)

# Hard limits; settings cannot raise them.
MAX_ABSOLUTE_RETRIES = 3
MIN_IMPROVEMENT_THRESHOLD = 5
MAX_OSCILLATIONS = 2
MAX_CONCURRENT_ENFORCEMENTS = 3

SYSTEM_PROMPT = (
    "You are a precise text editor. Your ONLY job is to adjust the character "
    "count of a statement to meet exact requirements. You must be meticulous "
    "about counting characters. Every letter, number, space, and punctuation "
    "mark counts."
)

EXPAND_TECHNIQUES = (
    '1. Expand abbreviations: "ops" -> "operations", "mbr" -> "member"\n'
    '2. Add scope: "team" -> "12-member team"\n'
    '3. Quantify vague results: "saved time" -> "saved 40 man-hours monthly"\n'
    '4. Expand "&" to " and " where appropriate\n'
    "Keep ONE complete sentence; never start a new sentence or add filler."
)

CONTRACT_TECHNIQUES = (
    '1. Use abbreviations: "operations" -> "ops", "members" -> "mbrs"\n'
    '2. Remove weak adjectives: "highly successful" -> "successful"\n'
    '3. Condense phrases: "in order to" -> "to"\n'
    '4. Use "&" instead of " and "\n'
    "Keep every metric and the core impact."
)

_WRAPPING_QUOTES_RE = re.compile(r"^[\"']|[\"']$")


def build_correction_prompt(
    statement: str,
    validation: CharacterValidationResult,
    context: str | None = None,
) -> str:
    """Build the expand or contract instruction for one revision attempt."""
    delta = abs(validation.chars_to_adjust)
    if validation.variance_direction == "under":
        problem = f"This statement is {delta} characters SHORT of the minimum."
        action = f"NEED TO ADD: {delta} characters (reach at least {validation.target_min})"
        techniques = EXPAND_TECHNIQUES
    else:
        problem = f"This statement is {delta} characters OVER the maximum."
        action = f"NEED TO REMOVE: {delta} characters (stay at or below {validation.target_max})"
        techniques = CONTRACT_TECHNIQUES

    lines = [
        "CHARACTER COUNT ADJUSTMENT REQUIRED",
        "",
        f'Current statement ({validation.actual_length} characters):',
        f'"{statement}"',
        "",
        problem,
        f"TARGET: {validation.target_min}-{validation.target_max} characters",
        action,
    ]
    if context:
        lines.append(f"CONTEXT: {context}")
    lines.extend(
        [
            "",
            "Techniques:",
            techniques,
            "",
            "Output ONLY the revised statement, no quotes, no explanation:",
        ]
    )
    return "\n".join(lines)


def count_oscillations(history: Sequence[VarianceDirection]) -> int:
    """Count under/over flips; "within" entries are ignored as flip partners."""
    flips = 0
    for previous, current in zip(history, history[1:]):
        if {previous, current} == {"under", "over"}:
            flips += 1
    return flips


def clean_model_output(text: str) -> str:
    return _WRAPPING_QUOTES_RE.sub("", text.strip())


def enforce_character_limits(
    statement: str,
    settings: EnforcementSettings,
    generator: TextGenerator,
    *,
    context: str | None = None,
) -> EnforcementResult:
    """
    Revise ``statement`` through ``generator`` until it fits the window.

    At most ``MAX_ABSOLUTE_RETRIES`` model calls are made. A non-compliant
    result is best effort; ``stop_reason`` tells the caller why the loop
    ended. Generator errors end the loop with ``StopReason.ERROR`` and are
    never re-raised.
    """
    target_max = settings.target_max
    target_min = resolve_target_min(target_max, settings.target_min)
    max_retries = min(settings.max_retries, MAX_ABSOLUTE_RETRIES)
    context = context if context is not None else settings.context

    current = statement
    validation = validate_character_count(current, target_max, target_min)
    if validation.is_compliant:
        return EnforcementResult(current, 0, False, validation, StopReason.COMPLIANT)
    if abs(validation.chars_to_adjust) <= CLOSE_ENOUGH_THRESHOLD:
        return EnforcementResult(current, 0, False, validation, StopReason.CLOSE_ENOUGH)

    seen: Set[str] = {current}
    directions: List[VarianceDirection] = [validation.variance_direction]
    previous_deficit = abs(validation.chars_to_adjust)
    attempts = 0
    was_adjusted = False
    stop_reason: StopReason | None = None

    while attempts < max_retries:
        attempts += 1
        was_adjusted = True
        try:
            raw = generator.generate(
                system_prompt=SYSTEM_PROMPT,
                prompt=build_correction_prompt(current, validation, context),
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
            )
            candidate = clean_model_output(raw)
        except Exception:
            logger.exception("Revision attempt %s failed", attempts)
            stop_reason = StopReason.ERROR
            break

        if candidate in seen:
            logger.warning(
                "Duplicate statement returned at attempt %s, stopping", attempts
            )
            stop_reason = StopReason.DUPLICATE
            break
        seen.add(candidate)

        current = candidate
        validation = validate_character_count(current, target_max, target_min)
        if validation.is_compliant:
            stop_reason = StopReason.COMPLIANT
            break

        deficit = abs(validation.chars_to_adjust)
        if deficit <= CLOSE_ENOUGH_THRESHOLD:
            logger.info("Within close-enough threshold (%s chars off)", deficit)
            stop_reason = StopReason.CLOSE_ENOUGH
            break

        improvement = previous_deficit - deficit
        if attempts > 1 and improvement < MIN_IMPROVEMENT_THRESHOLD:
            logger.warning(
                "Insufficient progress (%s chars improved), stopping", improvement
            )
            stop_reason = StopReason.NO_PROGRESS
            break

        directions.append(validation.variance_direction)
        flips = count_oscillations(directions)
        if flips >= MAX_OSCILLATIONS:
            logger.warning("Oscillation detected (%s flips), stopping", flips)
            stop_reason = StopReason.OSCILLATING
            break

        previous_deficit = deficit

    if stop_reason is None:
        stop_reason = (
            StopReason.COMPLIANT if validation.is_compliant else StopReason.MAX_RETRIES
        )

    final_statement = current
    if was_adjusted:
        final_statement = sanitize_statement_text(current, settings.banned_words)
        if final_statement != current:
            logger.info("Sanitized revised statement")
            validation = validate_character_count(
                final_statement, target_max, target_min
            )

    return EnforcementResult(
        statement=final_statement,
        attempts=attempts,
        was_adjusted=was_adjusted,
        final_validation=validation,
        stop_reason=stop_reason,
    )


def enforce_character_limits_multiple(
    statements: Sequence[str],
    settings: EnforcementSettings,
    generator: TextGenerator,
    *,
    context: str | None = None,
) -> List[EnforcementResult]:
    """Enforce many statements, at most three at a time, keeping input order."""
    results: List[EnforcementResult] = []
    if not statements:
        return results
    with ThreadPoolExecutor(max_workers=MAX_CONCURRENT_ENFORCEMENTS) as pool:
        for start in range(0, len(statements), MAX_CONCURRENT_ENFORCEMENTS):
            batch = statements[start : start + MAX_CONCURRENT_ENFORCEMENTS]
            results.extend(
                pool.map(
                    lambda item: enforce_character_limits(
                        item, settings, generator, context=context
                    ),
                    batch,
                )
            )
    return results
