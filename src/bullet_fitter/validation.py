from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import CharacterValidationResult, VarianceDirection

# Misses this small are accepted without calling the model.
CLOSE_ENOUGH_THRESHOLD = 15

# A miss larger than this fraction of target_max is treated as a bad
# generation that is not worth patching.
EXTREME_MISS_RATIO = 0.5

DEFAULT_WINDOW = 10

DecisionReason = Literal[
    "already_compliant", "close_enough", "too_far_off", "needs_adjustment"
]


@dataclass(frozen=True, slots=True)
class EnforcementDecision:
    """Outcome of the cheap pre-check run before enforcement."""

    should_enforce: bool
    reason: DecisionReason


@dataclass(frozen=True, slots=True)
class CharacterDeficit:
    deficit: int
    direction: Literal["under", "over", "ok"]


def resolve_target_min(target_max: int, target_min: int | None = None) -> int:
    """Return ``target_min`` or the default window below ``target_max``."""
    if target_min is not None:
        return target_min
    return max(0, target_max - DEFAULT_WINDOW)


def validate_character_count(
    statement: str,
    target_max: int,
    target_min: int | None = None,
    tolerance_percent: float = 3.0,
) -> CharacterValidationResult:
    """
    Check the raw length of ``statement`` against ``[target_min, target_max]``.

    ``chars_to_adjust`` is positive when characters must be added and negative
    when they must be removed. ``variance`` is the percentage distance from the
    middle of the window; ``tolerance_percent`` is accepted for callers that
    report it but does not change compliance.
    """
    actual_length = len(statement)
    effective_min = resolve_target_min(target_max, target_min)
    mid_target = (effective_min + target_max) / 2
    variance = (
        abs((actual_length - mid_target) / mid_target * 100) if mid_target else 0.0
    )

    direction: VarianceDirection
    if actual_length < effective_min:
        direction = "under"
        chars_to_adjust = effective_min - actual_length
    elif actual_length > target_max:
        direction = "over"
        chars_to_adjust = target_max - actual_length
    else:
        direction = "within"
        chars_to_adjust = 0

    return CharacterValidationResult(
        is_compliant=direction == "within",
        actual_length=actual_length,
        target_min=effective_min,
        target_max=target_max,
        variance=variance,
        variance_direction=direction,
        chars_to_adjust=chars_to_adjust,
    )


def should_attempt_enforcement(
    statement: str, target_max: int, target_min: int | None = None
) -> EnforcementDecision:
    """Decide cheaply whether running the enforcement loop is worthwhile."""
    validation = validate_character_count(statement, target_max, target_min)
    if validation.is_compliant:
        return EnforcementDecision(False, "already_compliant")
    miss = abs(validation.chars_to_adjust)
    if miss <= CLOSE_ENOUGH_THRESHOLD:
        return EnforcementDecision(False, "close_enough")
    if miss > target_max * EXTREME_MISS_RATIO:
        return EnforcementDecision(False, "too_far_off")
    return EnforcementDecision(True, "needs_adjustment")


def is_within_range(
    statement: str, target_max: int, target_min: int | None = None
) -> bool:
    effective_min = resolve_target_min(target_max, target_min)
    return effective_min <= len(statement) <= target_max


def get_character_deficit(
    statement: str, target_max: int, target_min: int | None = None
) -> CharacterDeficit:
    """Return how many characters ``statement`` is short or over by."""
    length = len(statement)
    effective_min = resolve_target_min(target_max, target_min)
    if length < effective_min:
        return CharacterDeficit(effective_min - length, "under")
    if length > target_max:
        return CharacterDeficit(length - target_max, "over")
    return CharacterDeficit(0, "ok")
