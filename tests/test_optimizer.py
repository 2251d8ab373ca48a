import pytest

from bullet_fitter.display import normalize_spaces
from bullet_fitter.models import FitStatus
from bullet_fitter.optimizer import (
    MAX_UNDERFLOW_PX,
    compress_text,
    deterministic_index,
    expand_text,
    optimize_bullet,
    optimize_multi_line_bullet,
    string_hash,
)
from bullet_fitter.widths import MEDIUM_SPACE, THIN_SPACE

# 70 words of "a" overflow the line by about 7px; 68 fall about 15px short.
OVERFLOWING = " ".join(["a"] * 70)
UNDERFILLED = " ".join(["a"] * 68)
WRAPPING_STATEMENT = (
    "operations for Giant Voice systems, including 42 poles valued at 850K, "
    "enabling effective alerts across DoD's sole tri-service"
)


def test_string_hash_matches_signed_32bit_hash():
    assert string_hash("") == 0
    assert string_hash("a") == 97
    assert string_hash("ab") == 97 * 31 + 98
    # wraps into the negative range like a 32-bit signed integer
    assert string_hash("polygenelubricants") == -2147483648


def test_deterministic_index_is_stable_and_bounded():
    seeds = ["alpha", "bravo", "a" * 50, "Led12-memberteam"]
    for seed in seeds:
        value = deterministic_index(seed, 17)
        assert 0 <= value < 17
        assert deterministic_index(seed, 17) == value
    assert deterministic_index("alpha", 0) == 0


def test_narrowing_fits_one_line():
    """Overflowing text is narrowed with thin spaces until it fits."""
    result = optimize_bullet(OVERFLOWING)
    assert result.status == FitStatus.OPTIMIZED
    assert result.rendering.lines == 1
    assert -1.33 < result.rendering.overflow <= 0
    assert THIN_SPACE in result.optimized_text
    assert MEDIUM_SPACE not in result.optimized_text


def test_widening_stops_before_overflow():
    """Underfilled text is widened with medium spaces without overshooting."""
    result = optimize_bullet(UNDERFILLED)
    assert result.status == FitStatus.OPTIMIZED
    assert result.rendering.lines == 1
    assert MAX_UNDERFLOW_PX < result.rendering.overflow <= 0
    assert MEDIUM_SPACE in result.optimized_text
    assert THIN_SPACE not in result.optimized_text


@pytest.mark.parametrize("text", [OVERFLOWING, UNDERFILLED, WRAPPING_STATEMENT])
def test_words_and_first_space_are_preserved(text: str):
    """Only spacing changes and the space after the first word stays normal."""
    result = optimize_bullet(text)
    assert normalize_spaces(result.optimized_text).split(" ") == text.split(" ")
    first_word = text.split(" ")[0]
    assert result.optimized_text.startswith(first_word + " ")


@pytest.mark.parametrize("text", [OVERFLOWING, UNDERFILLED])
def test_optimization_is_idempotent(text: str):
    first = optimize_bullet(text)
    second = optimize_bullet(first.optimized_text)
    assert second.status == FitStatus.OPTIMIZED
    assert second.optimized_text == first.optimized_text


def test_optimization_is_deterministic():
    assert optimize_bullet(OVERFLOWING) == optimize_bullet(OVERFLOWING)
    assert optimize_bullet(UNDERFILLED) == optimize_bullet(UNDERFILLED)


def test_text_within_tolerance_is_returned_unchanged():
    text = " ".join(["a"] * 69)  # about 4px short of the line
    result = optimize_bullet(text)
    assert result.status == FitStatus.OPTIMIZED
    assert result.optimized_text == text


def test_narrowing_fails_when_compression_cannot_fit():
    """Two wide words leave no substitutable space, so narrowing fails."""
    text = "W" * 30 + " " + "W" * 30
    result = optimize_bullet(text)
    assert result.status == FitStatus.FAILED
    assert result.optimized_text == text
    assert result.rendering.overflow > 0


def test_narrowing_fails_for_long_wrapping_statement():
    result = optimize_bullet(WRAPPING_STATEMENT)
    assert result.status == FitStatus.FAILED
    assert result.rendering.lines == 2


def test_widening_fails_for_short_text():
    result = optimize_bullet("Short text")
    assert result.status == FitStatus.FAILED
    assert result.rendering.overflow < MAX_UNDERFLOW_PX


def test_degenerate_inputs_do_not_raise():
    for text in ["", " ", "word", "two words"]:
        result = optimize_bullet(text)
        assert result.status in (FitStatus.OPTIMIZED, FitStatus.FAILED)


def test_custom_target_width():
    result = optimize_bullet("a a a a a a", 60)
    assert result.status == FitStatus.OPTIMIZED
    assert result.rendering.lines == 1


def test_compress_and_expand_report_pixel_change():
    compressed, saved = compress_text("hello world test")
    assert compressed == f"hello{THIN_SPACE}world{THIN_SPACE}test"
    assert saved == pytest.approx(2 * (4 - 2.67))

    expanded, added = expand_text("hello world test")
    assert expanded == f"hello{MEDIUM_SPACE}world{MEDIUM_SPACE}test"
    assert added == pytest.approx(2 * (5.33 - 4))


def test_multi_line_compression_reports_savings():
    result = optimize_multi_line_bullet(WRAPPING_STATEMENT)
    assert result.status == FitStatus.OPTIMIZED
    assert " " not in result.optimized_text
    assert normalize_spaces(result.optimized_text) == WRAPPING_STATEMENT


def test_multi_line_compression_skips_small_savings():
    result = optimize_multi_line_bullet(f"Led{MEDIUM_SPACE}team well")
    assert result.status == FitStatus.NOT_OPTIMIZED
    assert result.optimized_text == "Led team well"


def test_whitespace_runs_are_collapsed_before_fitting():
    """A double space is measured as one space, not fixed with a thin space."""
    text = "  ".join(["a"] * 2) + " " + " ".join(["a"] * 67)
    result = optimize_bullet(text)
    assert result.status == FitStatus.OPTIMIZED
    assert result.optimized_text == " ".join(["a"] * 69)
    assert THIN_SPACE not in result.optimized_text
    assert MAX_UNDERFLOW_PX < result.rendering.overflow <= 0


def test_pre_optimized_input_gives_the_same_result():
    """Feeding optimized text back in reproduces the same layout."""
    first = optimize_bullet(UNDERFILLED)
    second = optimize_bullet(first.optimized_text.replace(MEDIUM_SPACE, THIN_SPACE))
    assert second == first


@pytest.mark.parametrize(
    ("text", "width"),
    [
        (" -d/- , ?f?% d c   d  .e /d- /  ,e ,f, a", 200),
        ("Led  12-mbr\tteam;  saved $2M  across 3 sites ", 250),
        (" ".join(["ab"] * 30) + "   end", 500),
    ],
)
def test_irregular_spacing_is_idempotent(text: str, width: float):
    first = optimize_bullet(text, width)
    second = optimize_bullet(first.optimized_text, width)
    assert second.status == first.status
    assert second.optimized_text == first.optimized_text
