"""
bullet_fitter fits performance statements to AF Form 1206 line widths and
character-count windows.
"""

from __future__ import annotations

from .analysis import analyze_text_fit, get_optimization_suggestions
from .config import BulletFitterConfig, config_from_dict, config_from_yaml, load_config
from .display import from_display_text, normalize_spaces, to_display_text
from .enforcement import enforce_character_limits, enforce_character_limits_multiple
from .layout import fits_on_line, get_visual_line_segments, render_bullet_text
from .models import (
    CharacterValidationResult,
    EnforcementResult,
    FitStatus,
    OptimizeResult,
    RenderResult,
    StopReason,
    TextFitAnalysis,
)
from .optimizer import optimize_bullet, optimize_multi_line_bullet
from .validation import should_attempt_enforcement, validate_character_count
from .widths import AF1206_LINE_WIDTH_PX, get_char_width, get_text_width_px

__all__ = [
    "AF1206_LINE_WIDTH_PX",
    "BulletFitterConfig",
    "CharacterValidationResult",
    "EnforcementResult",
    "FitStatus",
    "OptimizeResult",
    "RenderResult",
    "StopReason",
    "TextFitAnalysis",
    "analyze_text_fit",
    "config_from_dict",
    "config_from_yaml",
    "enforce_character_limits",
    "enforce_character_limits_multiple",
    "fits_on_line",
    "from_display_text",
    "get_char_width",
    "get_optimization_suggestions",
    "get_text_width_px",
    "get_visual_line_segments",
    "load_config",
    "normalize_spaces",
    "optimize_bullet",
    "optimize_multi_line_bullet",
    "render_bullet_text",
    "should_attempt_enforcement",
    "to_display_text",
    "validate_character_count",
]

__version__ = "0.1.0"
