from __future__ import annotations

import math
import re
from typing import Dict, List, Literal, Mapping

from .models import FitStatus, TextFitAnalysis
from .optimizer import optimize_bullet
from .widths import AF1206_LINE_WIDTH_PX, get_char_width, get_text_width_px
from .wordlists import DEFAULT_ABBREVIATIONS

CharWidthCategory = Literal["narrow", "average", "wide"]

NARROW_CHAR_MAX_PX = 5.5
WIDE_CHAR_MIN_PX = 11.0
OPTIMAL_FILL_RANGE = (90.0, 100.0)
WIDE_CHAR_WARNING_RATIO = 0.15


def analyze_text_fit(
    text: str, target_width_px: float = AF1206_LINE_WIDTH_PX
) -> TextFitAnalysis:
    """Summarize how well ``text`` fills a single form line."""
    width_px = get_text_width_px(text.rstrip())
    overflow_px = width_px - target_width_px
    fill_percent = width_px / target_width_px * 100 if target_width_px else 0.0
    estimated_lines = (
        max(1, math.ceil(width_px / target_width_px)) if target_width_px > 0 else 1
    )
    optimized = optimize_bullet(text, target_width_px)
    low, high = OPTIMAL_FILL_RANGE
    return TextFitAnalysis(
        text=text,
        width_px=width_px,
        target_width_px=target_width_px,
        fits_on_single_line=width_px <= target_width_px,
        overflow_px=max(0.0, overflow_px),
        overflow_percent=(
            max(0.0, overflow_px / target_width_px * 100) if target_width_px else 0.0
        ),
        fill_percent=min(100.0, fill_percent),
        estimated_lines=estimated_lines,
        is_optimal=low <= fill_percent <= high,
        can_be_optimized=optimized.status == FitStatus.OPTIMIZED,
    )


def get_char_width_category(char: str) -> CharWidthCategory:
    width = get_char_width(char)
    if width <= NARROW_CHAR_MAX_PX:
        return "narrow"
    if width >= WIDE_CHAR_MIN_PX:
        return "wide"
    return "average"


def analyze_character_widths(text: str) -> Dict[CharWidthCategory, int]:
    """Count narrow, average and wide characters in ``text``."""
    counts: Dict[CharWidthCategory, int] = {"narrow": 0, "average": 0, "wide": 0}
    for char in text:
        counts[get_char_width_category(char)] += 1
    return counts


def get_optimization_suggestions(
    statement: str,
    target_width_px: float = AF1206_LINE_WIDTH_PX,
    abbreviations: Mapping[str, str] | None = None,
) -> List[str]:
    """Return human-readable hints for making a statement fit better."""
    analysis = analyze_text_fit(statement, target_width_px)
    if analysis.fits_on_single_line and analysis.is_optimal:
        return ["Statement is already optimally sized."]

    suggestions: List[str] = []
    if not analysis.fits_on_single_line:
        suggestions.append(
            f"Statement overflows by {analysis.overflow_percent:.1f}%"
        )
        if analysis.can_be_optimized:
            suggestions.append("Can be optimized using space compression.")
        else:
            suggestions.append(
                "Consider shortening the statement or using abbreviations."
            )
    elif analysis.fill_percent < OPTIMAL_FILL_RANGE[0]:
        suggestions.append(
            f"Statement only fills {analysis.fill_percent:.1f}% - "
            "consider adding more impact details."
        )

    mapping = DEFAULT_ABBREVIATIONS if abbreviations is None else abbreviations
    for word, short in mapping.items():
        if re.search(rf"\b{re.escape(word)}\b", statement, re.IGNORECASE):
            suggestions.append(f'Consider replacing "{word}" with "{short}"')

    if statement:
        wide_ratio = analyze_character_widths(statement)["wide"] / len(statement)
        if wide_ratio > WIDE_CHAR_WARNING_RATIO:
            suggestions.append(
                "Statement has many wide characters (M, W, etc.) - consider rephrasing."
            )
    return suggestions
