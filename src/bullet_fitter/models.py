from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Literal, Tuple

VarianceDirection = Literal["under", "over", "within"]


class FitStatus(IntEnum):
    """Outcome of a space-substitution optimization."""

    OPTIMIZED = 0
    FAILED = 1
    NOT_OPTIMIZED = -1


class StopReason(str, Enum):
    """Why an enforcement run stopped."""

    COMPLIANT = "compliant"
    MAX_RETRIES = "max_retries"
    NO_PROGRESS = "no_progress"
    OSCILLATING = "oscillating"
    CLOSE_ENOUGH = "close_enough"
    DUPLICATE = "duplicate"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class RenderResult:
    """How a statement wraps on the form at a given width."""

    text_lines: Tuple[str, ...]
    full_width: float
    lines: int
    overflow: float


@dataclass(frozen=True, slots=True)
class OptimizeResult:
    """Result of swapping inter-word spaces to hit a width budget."""

    status: FitStatus
    rendering: RenderResult
    optimized_text: str


@dataclass(frozen=True, slots=True)
class VisualLineSegment:
    """A rendered line with its character offsets in the source text."""

    text: str
    start_index: int
    end_index: int
    width: float
    is_compressed: bool


@dataclass(frozen=True, slots=True)
class TextFitAnalysis:
    """Read-only report on how well a statement fills one form line."""

    text: str
    width_px: float
    target_width_px: float
    fits_on_single_line: bool
    overflow_px: float
    overflow_percent: float
    fill_percent: float
    estimated_lines: int
    is_optimal: bool
    can_be_optimized: bool


@dataclass(frozen=True, slots=True)
class CharacterValidationResult:
    """Character-count check of a statement against an inclusive window."""

    is_compliant: bool
    actual_length: int
    target_min: int
    target_max: int
    variance: float
    variance_direction: VarianceDirection
    chars_to_adjust: int


@dataclass(frozen=True, slots=True)
class EnforcementResult:
    """Final state of one character-count enforcement run."""

    statement: str
    attempts: int
    was_adjusted: bool
    final_validation: CharacterValidationResult
    stop_reason: StopReason
