# --- docmirror_lib/stats.py ---
"""
docmirror_lib/stats.py: Document-local line-spacing statistics.

The modal gap between consecutive text lines is taken as the page's normal
line height; occasional paragraph gaps would pollute a plain mean.
"""
import logging
import math
import statistics
from collections import Counter
from typing import NamedTuple, Sequence

from .constants import (
    DEFAULT_PARA_GAP_THRESHOLD,
    DEFAULT_STD_LINE_HEIGHT,
    MAX_LINE_GAP,
    MIN_LINE_GAP,
    MIN_MODAL_LINE_HEIGHT,
    PARA_GAP_FACTOR,
)

log_layout = logging.getLogger("docmirror.layout")


class LineSpacingStats(NamedTuple):
    std_line_height: float
    para_gap_threshold: float


DEFAULT_STATS = LineSpacingStats(DEFAULT_STD_LINE_HEIGHT, DEFAULT_PARA_GAP_THRESHOLD)


def calculate_line_spacing_stats(y_coords: Sequence[float]) -> LineSpacingStats:
    """
    Derives the normal line height and the new-paragraph gap for one page.

    Args:
        y_coords: Distinct line y-coordinates, sorted descending.

    Returns:
        LineSpacingStats; the fixed defaults when no usable gap exists.
    """
    if len(y_coords) < 2:
        return DEFAULT_STATS

    gaps = [
        gap
        for a, b in zip(y_coords, y_coords[1:])
        if MIN_LINE_GAP < (gap := abs(a - b)) < MAX_LINE_GAP
    ]
    if not gaps:
        log_layout.debug("No usable line gaps, falling back to default spacing.")
        return DEFAULT_STATS

    # Half-up rounding; ties go to the smallest of the most frequent gaps.
    frequency = Counter(math.floor(g + 0.5) for g in gaps)
    max_freq = max(frequency.values())
    mode = min(g for g, n in frequency.items() if n == max_freq)

    std = mode if mode > MIN_MODAL_LINE_HEIGHT else statistics.mean(gaps)
    log_layout.debug(
        "Line spacing: %d gaps, mode=%d, std line height=%.2f", len(gaps), mode, std
    )
    return LineSpacingStats(std, std * PARA_GAP_FACTOR)
