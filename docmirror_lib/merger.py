# --- docmirror_lib/merger.py ---
"""
docmirror_lib/merger.py: Fuses consecutive text lines into paragraphs.

Runs over items already in reading order and only ever compares an item with
its immediate successor. A merge builds a new TextItem; the inputs are left
untouched.
"""
import logging
import re
from dataclasses import replace
from typing import List, Sequence

from .constants import (
    FLOW_MARGIN,
    HANGING_INDENT_MIN,
    LIST_MARKER_PATTERNS,
    MAX_FONT_SIZE_DIFF,
    MAX_LEFT_ALIGN_DIFF,
    MAX_LINE_ADVANCE_FACTOR,
)
from .models import PageItem, TextItem

log_merge = logging.getLogger("docmirror.merge")

LIST_MARKER_RE = re.compile("|".join(LIST_MARKER_PATTERNS))


def is_list_item(text: str) -> bool:
    """True if the text opens with a bullet glyph or an enumeration marker."""
    return bool(LIST_MARKER_RE.match(text))


def can_merge(current: TextItem, nxt: TextItem) -> bool:
    """
    Decides whether nxt continues the paragraph in current.

    The line advance is taken from the top of current, so a merged block
    only keeps growing while the next line starts within 2.5 font sizes of
    its first line.
    """
    if current.font_name != nxt.font_name:
        return False
    if abs(current.font_size - nxt.font_size) >= MAX_FONT_SIZE_DIFF:
        return False
    line_advance = nxt.y - current.y
    if not 0 < line_advance < current.font_size * MAX_LINE_ADVANCE_FACTOR:
        return False
    is_aligned_left = abs(current.x - nxt.x) < MAX_LEFT_ALIGN_DIFF
    is_flowing = nxt.x >= current.x - FLOW_MARGIN and nxt.right <= current.right + FLOW_MARGIN
    if not (is_aligned_left or is_flowing):
        return False
    return not is_list_item(nxt.text)


def join_text(first: str, second: str) -> str:
    """Joins two lines, undoing a trailing hyphenation break."""
    trimmed = first.strip()
    if trimmed.endswith("-"):
        return trimmed[:-1] + second
    return first + " " + second


def merge_pair(current: TextItem, nxt: TextItem) -> TextItem:
    """Builds the text item covering both lines."""
    x = min(current.x, nxt.x)
    y = min(current.y, nxt.y)
    indent = current.indent
    if nxt.x < current.x - HANGING_INDENT_MIN:
        indent = (current.indent or 0) + (current.x - nxt.x)
    return replace(
        current,
        text=join_text(current.text, nxt.text),
        x=x,
        y=y,
        width=max(current.right, nxt.right) - x,
        height=max(current.bottom, nxt.bottom) - y,
        indent=indent,
    )


def merge_text_blocks(items: Sequence[PageItem]) -> List[PageItem]:
    """
    Merges adjacent paragraph lines in a reading-ordered item list.

    Non-text items and lines failing the fusion test pass through unchanged.
    """
    if not items:
        return []

    merged = []
    current = items[0]
    for nxt in items[1:]:
        if current.type == "text" and nxt.type == "text" and can_merge(current, nxt):
            log_merge.debug("Merging '%.30s' into '%.30s'", nxt.text, current.text)
            current = merge_pair(current, nxt)
            continue
        merged.append(current)
        current = nxt
    merged.append(current)
    log_merge.debug("Merged %d items into %d.", len(items), len(merged))
    return merged
