from __future__ import annotations

import logging
import re
from typing import List, Tuple

from .display import normalize_spaces
from .layout import render_bullet_text
from .models import FitStatus, OptimizeResult
from .widths import (
    AF1206_LINE_WIDTH_PX,
    MEDIUM_SPACE,
    NORMAL_SPACE,
    THIN_SPACE,
    get_char_width,
)

logger = logging.getLogger(__name__)

# Widening counts as a fit when the line ends at most this far short.
MAX_UNDERFLOW_PX = -4.0

# Multi-line compression only counts when it saves more than this.
MIN_COMPRESSION_SAVINGS_PX = 5.0

_WHITESPACE_RE = re.compile(r"\s+")


def string_hash(value: str) -> int:
    """Signed 32-bit ``hash * 31 + char`` string hash."""
    result = 0
    for char in value:
        result = (result * 31 + ord(char)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result


def deterministic_index(seed: str, upper: int) -> int:
    """Map ``seed`` onto ``[0, upper)`` without any external entropy."""
    if upper <= 0:
        return 0
    fraction = abs(9 * string_hash(seed) + 5) % 100000
    return fraction * upper // 100000


def optimize_bullet(
    sentence: str, target_width_px: float = AF1206_LINE_WIDTH_PX
) -> OptimizeResult:
    """
    Swap inter-word spaces for thin or medium spaces until the statement
    exactly fits one line of ``target_width_px``.

    The first space (after the leading dash) is never touched and only
    whitespace changes; the words themselves are preserved. Whitespace runs,
    including previously substituted spaces, collapse to one normal space
    before measuring, so re-optimizing an optimized statement is a no-op.
    """
    words = _WHITESPACE_RE.split(sentence.strip())
    collapsed = NORMAL_SPACE.join(words)
    initial = render_bullet_text(collapsed, target_width_px)
    if initial.overflow == 0 or (
        initial.lines == 1 and MAX_UNDERFLOW_PX < initial.overflow <= 0
    ):
        return OptimizeResult(FitStatus.OPTIMIZED, initial, collapsed)

    narrowing = initial.overflow > 0
    new_space = THIN_SPACE if narrowing else MEDIUM_SPACE

    worst_case = NORMAL_SPACE.join(words[:1] + [new_space.join(words[1:])])
    worst_results = render_bullet_text(worst_case, target_width_px)
    if (narrowing and worst_results.overflow > 0) or (
        not narrowing and worst_results.overflow < MAX_UNDERFLOW_PX
    ):
        return OptimizeResult(FitStatus.FAILED, worst_results, worst_case)

    previous_words, previous_results = list(words), initial
    while len(words) > 2:
        words = _merge_next_pair(words, new_space)
        results = render_bullet_text(NORMAL_SPACE.join(words), target_width_px)
        if narrowing and results.overflow <= 0:
            return OptimizeResult(
                FitStatus.OPTIMIZED, results, NORMAL_SPACE.join(words)
            )
        if not narrowing and results.overflow > 0:
            # One substitution too many; the previous layout was the best fit.
            return OptimizeResult(
                FitStatus.OPTIMIZED,
                previous_results,
                NORMAL_SPACE.join(previous_words),
            )
        previous_words, previous_results = words, results

    if narrowing:
        status = (
            FitStatus.OPTIMIZED if previous_results.overflow <= 0 else FitStatus.FAILED
        )
    else:
        status = (
            FitStatus.OPTIMIZED
            if previous_results.overflow >= MAX_UNDERFLOW_PX
            else FitStatus.FAILED
        )
    logger.debug(
        "Space substitution exhausted with overflow %.2f", previous_results.overflow
    )
    return OptimizeResult(status, previous_results, NORMAL_SPACE.join(previous_words))


def _merge_next_pair(words: List[str], new_space: str) -> List[str]:
    # Never pick the first word (keeps the space after the dash) nor the last.
    idx = deterministic_index("".join(words), len(words) - 2) + 1
    return words[:idx] + [words[idx] + new_space + words[idx + 1]] + words[idx + 2 :]


def compress_text(text: str) -> Tuple[str, float]:
    """Replace every normal space with a thin space; return text and px saved."""
    savings = get_char_width(NORMAL_SPACE) - get_char_width(THIN_SPACE)
    return text.replace(NORMAL_SPACE, THIN_SPACE), text.count(NORMAL_SPACE) * savings


def expand_text(text: str) -> Tuple[str, float]:
    """Replace every normal space with a medium space; return text and px added."""
    gain = get_char_width(MEDIUM_SPACE) - get_char_width(NORMAL_SPACE)
    return text.replace(NORMAL_SPACE, MEDIUM_SPACE), text.count(NORMAL_SPACE) * gain


def optimize_multi_line_bullet(
    text: str, target_width_px: float = AF1206_LINE_WIDTH_PX
) -> OptimizeResult:
    """Compress all spacing of a statement that spans several lines."""
    normalized = normalize_spaces(text)
    before = render_bullet_text(normalized, target_width_px)
    compressed, saved_px = compress_text(normalized)
    after = render_bullet_text(compressed, target_width_px)
    if after.lines < before.lines or saved_px > MIN_COMPRESSION_SAVINGS_PX:
        return OptimizeResult(FitStatus.OPTIMIZED, after, compressed)
    return OptimizeResult(FitStatus.NOT_OPTIMIZED, before, normalized)
