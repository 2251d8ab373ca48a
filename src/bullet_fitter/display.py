"""
Conversions between stored statement text and the form used in editors.

Browsers treat "-" as a line-break opportunity while the form renderer does
not, so editable text swaps hyphens for the visually identical U+2011
non-breaking hyphen. Stored text always uses plain hyphens.
"""

from __future__ import annotations

from .widths import (
    HAIR_SPACE,
    MEDIUM_SPACE,
    NON_BREAKING_HYPHEN,
    NORMAL_SPACE,
    REGULAR_HYPHEN,
    THIN_SPACE,
)

_NORMALIZE_TABLE = str.maketrans(
    {
        THIN_SPACE: NORMAL_SPACE,
        MEDIUM_SPACE: NORMAL_SPACE,
        HAIR_SPACE: NORMAL_SPACE,
        NON_BREAKING_HYPHEN: REGULAR_HYPHEN,
    }
)

_VISUALIZE_TABLE = str.maketrans({THIN_SPACE: "⋅", MEDIUM_SPACE: "·"})


def to_display_text(text: str) -> str:
    """Swap regular hyphens for non-breaking hyphens."""
    return text.replace(REGULAR_HYPHEN, NON_BREAKING_HYPHEN)


def from_display_text(text: str) -> str:
    """Restore regular hyphens before the text is stored."""
    return text.replace(NON_BREAKING_HYPHEN, REGULAR_HYPHEN)


def normalize_spaces(text: str) -> str:
    """Undo space optimization and display hyphens."""
    return text.translate(_NORMALIZE_TABLE)


def visualize_optimized_text(text: str) -> str:
    # thin -> dot operator, medium -> middle dot
    return text.translate(_VISUALIZE_TABLE)
