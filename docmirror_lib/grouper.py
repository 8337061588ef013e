# --- docmirror_lib/grouper.py ---
"""
docmirror_lib/grouper.py: Clusters raw glyph runs into lines and text items.

Runs are bucketed by baseline into lines, lines are walked top to bottom and
adjacent runs on a line are fused into one text item. Paragraph starts and
first-line indentation are inferred from the vertical and horizontal deltas
to the previously started item, which are threaded through a fold over the
sorted line sequence.
"""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from functools import reduce
from typing import Dict, List, NamedTuple, Optional, Tuple

from .constants import (
    CENTER_TOLERANCE,
    DEFAULT_FONT_NAME,
    INDENT_MAX,
    INDENT_MIN,
    LINE_KEY_RESOLUTION,
    RIGHT_ALIGN_RATIO,
    RUN_JOIN_CHAR_FACTOR,
    RUN_JOIN_MIN_GAP,
    RUN_SPACE_CHAR_FACTOR,
)
from .models import GlyphRun, PageGeometry, TextItem
from .stats import LineSpacingStats, calculate_line_spacing_stats

log_layout = logging.getLogger("docmirror.layout")


def line_key(baseline: float) -> float:
    """Rounds a baseline (half up) to the line bucket resolution."""
    return math.floor(baseline * LINE_KEY_RESOLUTION + 0.5) / LINE_KEY_RESOLUTION


def bucket_lines(runs: List[GlyphRun]) -> Dict[float, List[GlyphRun]]:
    """Buckets non-empty runs by rounded baseline."""
    lines = defaultdict(list)
    for run in runs:
        if not run.text or not run.text.strip():
            continue
        lines[line_key(run.baseline)].append(run)
    return lines


def infer_alignment(item: TextItem, page_width: float) -> Optional[str]:
    """Classifies an item as centered, right-aligned or unset (left)."""
    if abs(item.center_x - page_width / 2) < CENTER_TOLERANCE:
        return "center"
    if item.x > page_width * RIGHT_ALIGN_RATIO:
        return "right"
    return None


@dataclass
class _OpenItem:
    """A text item still accepting runs from its line."""

    text: str
    x: float
    width: float
    key: float
    font_size: float
    font_name: str
    is_paragraph_start: bool
    indent: float

    @property
    def right(self):
        return self.x + self.width

    def absorb(self, run: GlyphRun, char_width: float):
        if run.x - self.right > char_width * RUN_SPACE_CHAR_FACTOR:
            self.text += " "
        self.text += run.text
        self.width = run.x + run.width - self.x


class _GroupingState(NamedTuple):
    items: Tuple[TextItem, ...]
    previous_y: Optional[float]
    previous_x: Optional[float]


class LineGrouper:
    """Turns one page's glyph runs into raster-ordered text items."""

    def __init__(self, page_width: float, page_height: float, stats: LineSpacingStats):
        self.page_width = page_width
        self.page_height = page_height
        self.stats = stats

    def _close(self, open_item: _OpenItem) -> TextItem:
        font_name = open_item.font_name or DEFAULT_FONT_NAME
        item = TextItem(
            x=max(0.0, open_item.x),
            y=max(0.0, self.page_height - open_item.key - open_item.font_size),
            width=max(0.0, open_item.width),
            height=open_item.font_size,
            text=open_item.text,
            font_size=open_item.font_size,
            font_name=font_name,
            is_bold="bold" in font_name.lower(),
            is_paragraph_start=open_item.is_paragraph_start,
            indent=open_item.indent,
        )
        item.alignment = infer_alignment(item, self.page_width)
        return item

    def _open(self, run: GlyphRun, key: float, state: _GroupingState) -> _OpenItem:
        gap = abs(state.previous_y - key) if state.previous_y is not None else 0
        is_new_paragraph = state.previous_y is None or gap > self.stats.para_gap_threshold
        indent = 0.0
        if is_new_paragraph and state.previous_x is not None:
            diff = run.x - state.previous_x
            if INDENT_MIN < diff < INDENT_MAX:
                indent = diff
        return _OpenItem(
            text=run.text,
            x=run.x,
            width=run.width,
            key=key,
            font_size=run.font_size,
            font_name=run.font_name,
            is_paragraph_start=is_new_paragraph,
            indent=indent,
        )

    def fold_line(self, state: _GroupingState, line: Tuple[float, List[GlyphRun]]):
        """Consumes one line of runs; returns the updated accumulator."""
        key, runs = line
        items = list(state.items)
        current = None
        for run in sorted(runs, key=lambda r: r.x):
            char_width = run.width / len(run.text)
            split_threshold = max(char_width * RUN_JOIN_CHAR_FACTOR, RUN_JOIN_MIN_GAP)
            if current is not None and run.x - current.right < split_threshold:
                current.absorb(run, char_width)
                continue
            if current is not None:
                items.append(self._close(current))
            current = self._open(run, key, state)
            state = _GroupingState(state.items, key, run.x)
        if current is not None:
            items.append(self._close(current))
        return _GroupingState(tuple(items), state.previous_y, state.previous_x)

    def group(self, lines: Dict[float, List[GlyphRun]]) -> List[TextItem]:
        sorted_lines = sorted(lines.items(), key=lambda kv: kv[0], reverse=True)
        final = reduce(self.fold_line, sorted_lines, _GroupingState((), None, None))
        return list(final.items)


def group_runs(page: PageGeometry) -> List[TextItem]:
    """
    Groups a page's glyph runs into text items in raster order.

    Args:
        page: The adapter output for one page.

    Returns:
        Text items, top of page first and left to right within a line.
    """
    lines = bucket_lines(page.runs)
    keys = sorted(lines.keys(), reverse=True)
    stats = calculate_line_spacing_stats(keys)
    items = LineGrouper(page.width, page.height, stats).group(lines)
    log_layout.debug(
        "Grouped %d runs into %d lines and %d text items (para gap %.2f).",
        len(page.runs),
        len(keys),
        len(items),
        stats.para_gap_threshold,
    )
    return items
