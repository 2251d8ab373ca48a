import pytest

from bullet_fitter.layout import (
    fits_on_line,
    get_visual_line_segments,
    render_bullet_text,
    split_line_tokens,
)
from bullet_fitter.widths import AF1206_LINE_WIDTH_PX, THIN_SPACE, get_text_width_px

SHORT_STATEMENT = (
    "Led a 12-member cross-functional team to deliver a mission-critical "
    "upgrade on schedule"
)
WRAPPING_STATEMENT = (
    "operations for Giant Voice systems, including 42 poles valued at 850K, "
    "enabling effective alerts across DoD's sole tri-service"
)


def test_short_statement_renders_on_one_line():
    result = render_bullet_text(SHORT_STATEMENT)
    assert result.lines == 1
    assert result.text_lines == (SHORT_STATEMENT,)
    assert result.full_width == pytest.approx(570.90625)
    assert result.overflow == pytest.approx(570.90625 - AF1206_LINE_WIDTH_PX)


def test_hyphenated_word_wraps_whole():
    """A hyphenated compound moves to the next line intact."""
    result = render_bullet_text(WRAPPING_STATEMENT)
    assert result.lines == 2
    assert result.text_lines[0].rstrip().endswith("sole")
    assert result.text_lines[1] == "tri-service"
    assert result.overflow == pytest.approx(802.2109375 - AF1206_LINE_WIDTH_PX)


def test_no_line_ends_with_a_hyphen_break():
    result = render_bullet_text("tri-service", 50)
    assert result.text_lines == ("tri-serv", "ice")
    assert all(not line.endswith("-") for line in result.text_lines)


def test_trailing_whitespace_is_ignored():
    """Trailing whitespace never changes the rendering."""
    assert render_bullet_text(WRAPPING_STATEMENT + "   \t") == render_bullet_text(
        WRAPPING_STATEMENT
    )


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_blank_text_renders_no_lines(text: str):
    result = render_bullet_text(text)
    assert result.lines == 0
    assert result.text_lines == ()
    assert result.full_width == 0
    assert result.overflow == pytest.approx(-AF1206_LINE_WIDTH_PX)


def test_exact_fit_boundary_for_unbreakable_run():
    """An unbreakable run is split at the last character that still fits."""
    fits = render_bullet_text("a" * 107)
    assert fits.lines == 1

    overflow = render_bullet_text("a" * 108)
    assert overflow.lines == 2
    assert overflow.text_lines == ("a" * 107, "a")


def test_single_character_wider_than_target_terminates():
    """Text that cannot be broken further stays on one overflowing line."""
    result = render_bullet_text("W", 10)
    assert result.lines == 1
    assert result.text_lines == ("W",)
    assert result.overflow > 0


def test_long_text_never_produces_empty_lines():
    text = " ".join(["mission-critical"] * 40)
    result = render_bullet_text(text)
    assert result.lines > 1
    assert all(line.strip() for line in result.text_lines)
    assert "".join(result.text_lines).replace(" ", "") == text.replace(" ", "")


def test_split_line_tokens_keeps_break_characters():
    tokens = split_line_tokens("saved $2M/yr; 100% on-time")
    assert "".join(tokens) == "saved $2M/yr; 100% on-time"
    assert "/" in tokens
    assert "on-time" in tokens


def test_special_spaces_are_break_points():
    text = f"alpha{THIN_SPACE}bravo"
    assert split_line_tokens(text) == ["alpha", THIN_SPACE, "bravo"]


def test_fits_on_line():
    assert fits_on_line(SHORT_STATEMENT)
    assert not fits_on_line(WRAPPING_STATEMENT)
    assert fits_on_line("abc   ", get_text_width_px("abc"))


def test_visual_line_segments_cover_text():
    """Segments follow the rendered lines with contiguous offsets."""
    segments = get_visual_line_segments(WRAPPING_STATEMENT)
    assert len(segments) == 2
    assert segments[0].start_index == 0
    assert segments[0].end_index == segments[1].start_index
    assert "".join(seg.text for seg in segments) == WRAPPING_STATEMENT
    for segment in segments:
        assert WRAPPING_STATEMENT[segment.start_index : segment.end_index] == segment.text
        assert segment.width == pytest.approx(get_text_width_px(segment.text))
        assert not segment.is_compressed


def test_visual_line_segments_flag_compressed_lines():
    segments = get_visual_line_segments(f"Led{THIN_SPACE}team")
    assert len(segments) == 1
    assert segments[0].is_compressed


def test_visual_line_segments_empty_text():
    assert get_visual_line_segments("  ") == []


@pytest.mark.parametrize(
    "text",
    [" " * 10, "- - -", "???///" * 100, "漢字" * 200, "a\nb\tc", "%%%" + "W" * 90],
)
def test_render_never_raises(text: str):
    result = render_bullet_text(text)
    assert result.lines == len(result.text_lines)
    assert result.full_width == pytest.approx(get_text_width_px(text.rstrip()))


def test_visual_line_segments_cover_trailing_whitespace():
    segments = get_visual_line_segments("abc   ")
    assert len(segments) == 1
    assert (segments[0].start_index, segments[0].end_index) == (0, 6)
    assert segments[0].text == "abc"

    wrapped = get_visual_line_segments(WRAPPING_STATEMENT + "  ")
    assert wrapped[-1].end_index == len(WRAPPING_STATEMENT) + 2
