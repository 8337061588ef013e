import pytest

from docmirror_lib.autofit import (
    PillowTextMeasurer,
    estimate_line_count,
    estimate_required_height,
    fit_font_size,
    parse_font_stack,
)

STACK = "'Inter', sans-serif"


class LinearMeasurer:
    """Every character is half an em wide."""

    def measure_width(self, text, font_stack, size, bold=False):
        return len(text) * size * 0.5


@pytest.fixture
def measurer():
    return LinearMeasurer()


def test_text_that_fits_keeps_its_size(measurer):
    result = fit_font_size("abc", 100, 20, 10, measurer, STACK, 1.5)
    assert result.font_size == 10
    assert result.line_count == 1
    assert result.required_height == pytest.approx(15)
    assert result.overflow is False


def test_height_overflow_scales_by_area(measurer):
    # 40 chars at 10pt = 200 wide -> 3 lines -> 36pt tall in a 30pt box
    result = fit_font_size("x" * 40, 100, 30, 10, measurer, STACK, 1.2)
    assert result.font_size == pytest.approx(10 * (30 / 36) ** 0.5)
    assert result.overflow is False


def test_scaling_is_floored_and_flags_overflow(measurer, caplog):
    result = fit_font_size("x" * 40, 100, 12, 10, measurer, STACK, 1.2)
    assert result.font_size == pytest.approx(6)
    assert result.overflow is True
    assert "overflows" in caplog.text


def test_zero_width_box_goes_to_floor(measurer):
    result = fit_font_size("abc", 0, 20, 10, measurer, STACK, 1.5)
    assert result.font_size == pytest.approx(6)
    assert result.overflow is True


def test_empty_text_needs_no_space(measurer):
    result = fit_font_size("", 100, 10, 12, measurer, STACK, 1.5)
    assert result == (12, 0, 0, False)


def test_estimate_line_count():
    assert estimate_line_count(0, 100) == 0
    assert estimate_line_count(50, 0) == 1
    assert estimate_line_count(90, 100) == 1
    assert estimate_line_count(100, 100) == 2


def test_required_height_is_monotone_in_font_size(measurer):
    text = "The quick brown fox jumps over the lazy dog " * 3
    heights = [
        estimate_required_height(text, 150, size, measurer, STACK, 1.5)[2]
        for size in range(4, 30)
    ]
    assert heights == sorted(heights)


def test_parse_font_stack():
    stack = "'Times New Roman', serif, \"Noto Sans Tamil\", sans-serif"
    assert parse_font_stack(stack) == ["Times New Roman", "serif", "Noto Sans Tamil", "sans-serif"]


def test_pillow_measurer_scales_linearly():
    m = PillowTextMeasurer()
    small = m.measure_width("Hello world", STACK, 10)
    large = m.measure_width("Hello world", STACK, 20)
    assert small > 0
    assert large == pytest.approx(small * 2)
    assert m.measure_width("", STACK, 10) == 0


def test_pillow_measurer_survives_missing_font_file(tmp_path, caplog):
    m = PillowTextMeasurer({"Inter": str(tmp_path / "missing.ttf")})
    assert m.measure_width("abc", STACK, 10) > 0
    assert "Could not load font" in caplog.text
