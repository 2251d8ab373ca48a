from __future__ import annotations

import re
from itertools import accumulate
from typing import List, Tuple

from .models import RenderResult, VisualLineSegment
from .widths import AF1206_LINE_WIDTH_PX, THIN_SPACE, get_char_width, get_text_width_px

# The form renderer breaks after whitespace (including the optimization
# spaces) or one of ? / | % ! and only when the next character is
# alphanumeric, "+" or a backslash. Hyphens are never break points:
# "tri-service" always stays on one line.
LINE_BREAK_PATTERN = re.compile(r"([\u2004\u2009\u2006\s?/|%!])(?=[a-zA-Z0-9+\\])")


def split_line_tokens(text: str) -> List[str]:
    """Split text into the units the form renderer wraps between."""
    return [token for token in LINE_BREAK_PATTERN.split(text) if token]


def fits_on_line(text: str, target_width_px: float = AF1206_LINE_WIDTH_PX) -> bool:
    """Return True when the right-trimmed text fits on one line."""
    return get_text_width_px(text.rstrip()) <= target_width_px


def render_bullet_text(
    text: str, target_width_px: float = AF1206_LINE_WIDTH_PX
) -> RenderResult:
    """Predict how the form wraps ``text`` at ``target_width_px``."""
    trimmed = text.rstrip()
    full_width = get_text_width_px(trimmed)
    overflow = full_width - target_width_px

    lines: List[str] = []
    remaining = trimmed
    while remaining:
        if get_text_width_px(remaining) <= target_width_px:
            lines.append(remaining)
            break
        first_line, rest = _break_first_line(remaining, target_width_px)
        if not first_line or rest == remaining:
            # Nothing breakable left; keep it as one overflowing line.
            lines.append(remaining)
            break
        lines.append(first_line)
        remaining = rest.rstrip()

    return RenderResult(
        text_lines=tuple(lines),
        full_width=full_width,
        lines=len(lines),
        overflow=overflow,
    )


def get_visual_line_segments(
    text: str, target_width_px: float = AF1206_LINE_WIDTH_PX
) -> List[VisualLineSegment]:
    """Return rendered lines with their offsets into ``text``."""
    if not text.strip():
        return []
    lines = render_bullet_text(text, target_width_px).text_lines
    segments: List[VisualLineSegment] = []
    start = 0
    for number, line in enumerate(lines, start=1):
        # the last segment also owns the trimmed trailing whitespace
        end = len(text) if number == len(lines) else start + len(line)
        segments.append(
            VisualLineSegment(
                text=line,
                start_index=start,
                end_index=end,
                width=get_text_width_px(line),
                is_compressed=THIN_SPACE in line,
            )
        )
        start = end
    return segments


def _break_first_line(text: str, target_width_px: float) -> Tuple[str, str]:
    tokens = split_line_tokens(text)
    if tokens and get_text_width_px(tokens[0].rstrip()) < target_width_px:
        return _break_at_token(tokens, target_width_px)
    return _break_at_character(text, target_width_px)


def _break_at_token(tokens: List[str], target_width_px: float) -> Tuple[str, str]:
    answer_idx = len(tokens)
    for idx in range(1, len(tokens) + 1):
        candidate = "".join(tokens[:idx]).rstrip()
        if get_text_width_px(candidate) > target_width_px:
            answer_idx = idx - 1
            break
    return "".join(tokens[:answer_idx]), "".join(tokens[answer_idx:])


def _break_at_character(text: str, target_width_px: float) -> Tuple[str, str]:
    """
    Break an unbreakable run at the last character that still fits.

    The first guess comes from the average character width; the scan then
    walks outward until the cumulative width first exceeds the target.
    """
    prefix = [0.0, *accumulate(get_char_width(char) for char in text)]
    average = prefix[-1] / len(text)
    guess = max(0, min(len(text), int(target_width_px // average)))

    answer_idx = guess
    if prefix[guess] > target_width_px:
        while answer_idx > 0 and prefix[answer_idx] > target_width_px:
            answer_idx -= 1
    else:
        while answer_idx < len(text) and prefix[answer_idx + 1] <= target_width_px:
            answer_idx += 1
    return text[:answer_idx], text[answer_idx:]
