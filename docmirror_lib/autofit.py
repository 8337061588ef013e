# --- docmirror_lib/autofit.py ---
"""
docmirror_lib/autofit.py: Bounded font down-scaling for re-flowed text.

When a text item's content changes length (typically after translation) it
must still fit the box it was extracted from. The required height is
estimated from the single-line width of the text rather than by simulating
word wrap, and the font is shrunk by at most 40%.
"""
import functools
import logging
import math
from typing import Mapping, NamedTuple, Optional, Protocol

from PIL import ImageFont

from .constants import HEIGHT_OVERFLOW_TOLERANCE, MIN_FONT_SCALE, WRAP_SLACK

log_fit = logging.getLogger("docmirror.fit")

REFERENCE_SIZE = 100


class TextMeasurer(Protocol):
    """Capability for measuring the single-line advance width of a string."""

    def measure_width(self, text: str, font_stack: str, size: float, bold: bool) -> float:
        ...


def parse_font_stack(font_stack: str):
    """Splits a CSS-like font stack into bare family names."""
    return [f.strip().strip("'\"") for f in font_stack.split(",") if f.strip()]


@functools.lru_cache(maxsize=32)
def _load_font(path: Optional[str]):
    if path is None:
        return ImageFont.load_default(size=REFERENCE_SIZE)
    return ImageFont.truetype(path, REFERENCE_SIZE)


class PillowTextMeasurer:
    """
    Measures text with Pillow's FreeType bindings.

    Widths are taken at a fixed reference size and scaled linearly, so the
    result is proportional to the requested size.

    Args:
        font_files: Family name -> TrueType file path.
        bold_files: Family name -> TrueType file path for the bold weight.
    """

    def __init__(self, font_files: Mapping[str, str] = None, bold_files: Mapping[str, str] = None):
        self.font_files = dict(font_files or {})
        self.bold_files = dict(bold_files or {})

    def _font_for(self, font_stack: str, bold: bool):
        for family in parse_font_stack(font_stack):
            path = (self.bold_files.get(family) if bold else None) or self.font_files.get(family)
            if not path:
                continue
            try:
                return _load_font(path)
            except OSError as e:
                log_fit.warning("Could not load font '%s' from %s: %s", family, path, e)
        return _load_font(None)

    def measure_width(self, text: str, font_stack: str, size: float, bold: bool = False) -> float:
        if not text:
            return 0.0
        font = self._font_for(font_stack, bold)
        return font.getlength(text) * size / REFERENCE_SIZE


class FitResult(NamedTuple):
    font_size: float
    line_count: int
    required_height: float
    overflow: bool = False


def estimate_line_count(measured_width: float, box_width: float) -> int:
    if measured_width <= 0:
        return 0
    if box_width <= 0:
        return 1
    return max(1, math.ceil(measured_width / (box_width * WRAP_SLACK)))


def estimate_required_height(
    text, box_width, font_size, measurer, font_stack, line_spacing, bold=False
):
    """
    Estimates the vertical space a text needs when wrapped inside box_width.

    Returns:
        (line_count, measured_width, required_height)
    """
    measured = measurer.measure_width(text, font_stack, font_size, bold)
    line_count = estimate_line_count(measured, box_width)
    return line_count, measured, line_count * font_size * line_spacing


def fit_font_size(
    text: str,
    box_width: float,
    box_height: float,
    font_size: float,
    measurer: TextMeasurer,
    font_stack: str,
    line_spacing: float,
    bold: bool = False,
) -> FitResult:
    """
    Picks a font size that keeps the text inside its box, floored at 60%.

    Returns:
        FitResult; overflow is set when even the floor size is estimated to
        exceed the box. The text is still rendered at the floor size.
    """
    line_count, measured, required = estimate_required_height(
        text, box_width, font_size, measurer, font_stack, line_spacing, bold
    )
    floor = font_size * MIN_FONT_SCALE

    if required > box_height * HEIGHT_OVERFLOW_TOLERANCE:
        scaled = font_size * math.sqrt(box_height / required)
        size = max(scaled, floor)
    elif line_count == 1 and measured > box_width:
        size = max(font_size * box_width / measured, floor)
    else:
        return FitResult(font_size, line_count, required)

    line_count, measured, required = estimate_required_height(
        text, box_width, size, measurer, font_stack, line_spacing, bold
    )
    overflow = size == floor and (
        required > box_height * HEIGHT_OVERFLOW_TOLERANCE
        or (line_count == 1 and measured > box_width)
    )
    if overflow:
        log_fit.warning(
            "Text '%.30s' still overflows its %.1fx%.1f box at the %.1fpt floor.",
            text,
            box_width,
            box_height,
            size,
        )
    else:
        log_fit.debug("Scaled '%.30s' from %.2fpt to %.2fpt.", text, font_size, size)
    return FitResult(size, line_count, required, overflow)
